# backend/skillswap/core/enums.py
"""
Core enums for the SkillSwap platform.

All enums persisted to the database inherit from (str, Enum) so the stored
value is the lowercase string, matching what the API accepts and returns.
"""

from enum import Enum


class UserRole(str, Enum):
    """Directory role of a user. A user is either a student or a teacher."""

    STUDENT = "student"
    TEACHER = "teacher"


class PrincipalRole(str, Enum):
    """Roles that may appear in an access token."""

    STUDENT = "student"
    TEACHER = "teacher"
    ADMIN = "admin"


class SkillLevel(str, Enum):
    """Self-declared proficiency for a skill."""

    BEGINNER = "Beginner"
    INTERMEDIATE = "Intermediate"
    ADVANCED = "Advanced"
    EXPERT = "Expert"


# Levels at which a teacher may be booked for a skill
TEACHING_LEVELS = frozenset({SkillLevel.ADVANCED, SkillLevel.EXPERT})


class SessionStatus(str, Enum):
    """Session lifecycle statuses."""

    PENDING = "pending"  # Requested by the student, awaiting the teacher
    CONFIRMED = "confirmed"  # Accepted by the teacher
    COMPLETED = "completed"  # Terminal
    CANCELLED = "cancelled"  # Terminal


# Statuses that hold a teacher's time slot
ACTIVE_SESSION_STATUSES = (SessionStatus.PENDING, SessionStatus.CONFIRMED)


class ParticipantRole(str, Enum):
    """The side a user is on within a single session."""

    STUDENT = "student"
    TEACHER = "teacher"
