# backend/skillswap/repositories/factory.py
"""
Repository Factory for SkillSwap

Provides centralized creation of repository instances,
ensuring consistent initialization and dependency injection.
"""

from typing import TYPE_CHECKING

from sqlalchemy.orm import Session

# Avoid circular imports
if TYPE_CHECKING:
    from .skill_session_repository import SkillSessionRepository
    from .user_repository import UserRepository


class RepositoryFactory:
    """Factory class for creating repository instances."""

    @staticmethod
    def create_user_repository(db: Session) -> "UserRepository":
        """Create repository for directory lookups and rating updates."""
        from .user_repository import UserRepository

        return UserRepository(db)

    @staticmethod
    def create_skill_session_repository(db: Session) -> "SkillSessionRepository":
        """Create repository for session queries and lifecycle writes."""
        from .skill_session_repository import SkillSessionRepository

        return SkillSessionRepository(db)
