# backend/skillswap/models/__init__.py
"""
SQLAlchemy models for the SkillSwap platform.

Importing this package registers every table on ``Base.metadata``.
"""

from .skill_session import SessionStatusHistory, SkillSession
from .user import User, UserSkill

__all__ = [
    "SessionStatusHistory",
    "SkillSession",
    "User",
    "UserSkill",
]
