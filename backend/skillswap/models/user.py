# backend/skillswap/models/user.py
"""
User model for the SkillSwap identity directory.

A user is either a student or a teacher and carries an ordered list of
skills with a proficiency level. Teaching eligibility is derived from those
skills; rating and review_count are maintained by review settlement.
"""

from datetime import datetime, timezone
from typing import Iterable, Optional

from sqlalchemy import CheckConstraint, Column, DateTime, Float, ForeignKey, Integer, String
from sqlalchemy.orm import relationship
from sqlalchemy.ext.orderinglist import ordering_list
import ulid

from ..core.enums import TEACHING_LEVELS, SkillLevel, UserRole
from ..database import Base


def _skill_level(value: object) -> Optional[SkillLevel]:
    try:
        return SkillLevel(value)
    except ValueError:
        return None


def role_for_skills(skills: Iterable["UserSkill"]) -> UserRole:
    """Teachers are users holding at least one Advanced or Expert skill."""
    for skill in skills:
        if _skill_level(skill.level) in TEACHING_LEVELS:
            return UserRole.TEACHER
    return UserRole.STUDENT


class User(Base):
    """
    Directory entry for a marketplace participant.

    Attributes:
        id: ULID primary key
        name: Display name
        email: Unique, stored lower-cased
        role: student or teacher
        rating: Mean of ratings received over settled sessions
        review_count: Number of ratings behind ``rating``
        skills: Ordered list of UserSkill rows
    """

    __tablename__ = "users"

    id = Column(String(26), primary_key=True, index=True, default=lambda: str(ulid.ULID()))
    name = Column(String(100), nullable=False)
    email = Column(String(255), unique=True, index=True, nullable=False)
    role = Column(String(20), nullable=False, default=UserRole.STUDENT.value)
    rating = Column(Float, nullable=False, default=0.0)
    review_count = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))

    skills = relationship(
        "UserSkill",
        back_populates="user",
        order_by="UserSkill.position",
        collection_class=ordering_list("position"),
        cascade="all, delete-orphan",
        lazy="selectin",
    )

    __table_args__ = (
        CheckConstraint("role IN ('student', 'teacher')", name="ck_users_role"),
        CheckConstraint("review_count >= 0", name="ck_users_review_count"),
    )

    @property
    def is_teacher(self) -> bool:
        return self.role == UserRole.TEACHER.value

    def can_teach(self, skill_name: str) -> bool:
        """True when the user is a teacher holding ``skill_name`` at Advanced or Expert."""
        if not self.is_teacher or not skill_name:
            return False
        wanted = skill_name.strip().casefold()
        return any(
            skill.name.strip().casefold() == wanted and _skill_level(skill.level) in TEACHING_LEVELS
            for skill in self.skills
        )

    def __repr__(self) -> str:
        return f"<User {self.email} ({self.role})>"


class UserSkill(Base):
    """One skill entry in a user's ordered skill list."""

    __tablename__ = "user_skills"

    id = Column(String(26), primary_key=True, default=lambda: str(ulid.ULID()))
    user_id = Column(String(26), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    name = Column(String(100), nullable=False)
    level = Column(String(20), nullable=False)
    position = Column(Integer, nullable=False, default=0)

    user = relationship("User", back_populates="skills")

    __table_args__ = (
        CheckConstraint(
            "level IN ('Beginner', 'Intermediate', 'Advanced', 'Expert')",
            name="ck_user_skills_level",
        ),
    )

    def __repr__(self) -> str:
        return f"<UserSkill {self.name} ({self.level})>"
