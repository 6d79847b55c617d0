# backend/skillswap/repositories/__init__.py
"""
Repository layer for SkillSwap.

Repositories own every query; services own transactions.
"""

from .base_repository import BaseRepository
from .factory import RepositoryFactory
from .skill_session_repository import SkillSessionRepository
from .user_repository import UserRepository

__all__ = [
    "BaseRepository",
    "RepositoryFactory",
    "SkillSessionRepository",
    "UserRepository",
]
