# backend/skillswap/repositories/user_repository.py
"""
User Repository for SkillSwap

Directory lookups, row locking for booking/rating serialization and the
rating aggregate update used by review settlement.
"""

import logging
from typing import Iterable, List, Optional, Sequence, Tuple

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..core.enums import UserRole
from ..core.exceptions import RepositoryException
from ..models.user import User, UserSkill, role_for_skills
from .base_repository import BaseRepository

logger = logging.getLogger(__name__)


class UserRepository(BaseRepository[User]):
    """Repository for User data access."""

    def __init__(self, db: Session):
        super().__init__(db, User)
        self.logger = logging.getLogger(__name__)

    def get_by_email(self, email: str) -> Optional[User]:
        if not email:
            return None
        return self.find_one_by(email=email.strip().lower())

    def get_for_update(self, user_id: str) -> Optional[User]:
        """
        Load a user row with ``SELECT ... FOR UPDATE``.

        SQLite ignores the clause; there the engine opens every transaction with
        ``BEGIN IMMEDIATE`` so concurrent bookings still serialize.
        """
        try:
            return self.db.query(User).filter(User.id == user_id).with_for_update().first()
        except SQLAlchemyError as e:
            self.logger.error(f"Error locking user {user_id}: {str(e)}")
            raise RepositoryException(f"Failed to lock user: {str(e)}")

    def lock_many(self, user_ids: Iterable[str]) -> List[User]:
        """Lock several user rows in ascending id order."""
        return [
            user
            for user in (self.get_for_update(user_id) for user_id in sorted(set(user_ids)))
            if user is not None
        ]

    def create_user(
        self,
        *,
        name: str,
        email: str,
        skills: Sequence[Tuple[str, str]] = (),
        role: Optional[UserRole] = None,
    ) -> User:
        """
        Create a directory entry with an ordered skill list.

        When ``role`` is omitted it is derived from the skills.
        """
        skill_rows = [UserSkill(name=skill_name.strip(), level=level) for skill_name, level in skills]
        resolved_role = role or role_for_skills(skill_rows)
        user = User(name=name.strip(), email=email.strip().lower(), role=resolved_role.value)
        user.skills.extend(skill_rows)
        try:
            self.db.add(user)
            self.db.flush()
        except SQLAlchemyError as e:
            self.logger.error(f"Error creating user {email}: {str(e)}")
            raise RepositoryException(f"Failed to create user: {str(e)}")
        return user

    def update_rating(self, user: User, rating: float, review_count: int) -> User:
        user.rating = rating
        user.review_count = review_count
        self.db.flush()
        return user
