# backend/skillswap/models/skill_session.py
"""
Session model for SkillSwap.

A SkillSession is one booked block of time between a student and a teacher.
Reviews are embedded on the row (one write-once slot per participant) and
each accepted status change appends a SessionStatusHistory row.

Design notes:
- ULID string IDs
- All timestamps stored as UTC; read through ``ensure_utc``
- ``status`` is stored as its lowercase string so compare-and-set updates can
  match on it directly
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from sqlalchemy import CheckConstraint, Column, DateTime, ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import relationship
import ulid

from ..core.clock import ensure_utc
from ..core.enums import ParticipantRole, SessionStatus
from ..database import Base


@dataclass(frozen=True)
class ReviewSnapshot:
    """Read-only view of one embedded review slot."""

    rating: int
    comment: str
    created_at: datetime


class SkillSession(Base):
    """
    A booked session between a student and a teacher.

    Attributes:
        id: ULID primary key
        skill: Skill being taught (trimmed, non-empty)
        start_time / end_time: UTC window, end strictly after start
        student_id / teacher_id: Participants (never the same user)
        status: pending, confirmed, completed or cancelled
        meeting_link: Set by the student once the session is confirmed
        notes: Free text, editable by either participant
        student_review_* / teacher_review_*: Embedded review slots
    """

    __tablename__ = "skill_sessions"

    id = Column(String(26), primary_key=True, default=lambda: str(ulid.ULID()))
    skill = Column(String(100), nullable=False)
    start_time = Column(DateTime(timezone=True), nullable=False)
    end_time = Column(DateTime(timezone=True), nullable=False)

    student_id = Column(String(26), ForeignKey("users.id"), nullable=False, index=True)
    teacher_id = Column(String(26), ForeignKey("users.id"), nullable=False, index=True)

    status = Column(String(20), nullable=False, default=SessionStatus.PENDING.value, index=True)
    meeting_link = Column(String(500), nullable=True)
    notes = Column(Text, nullable=True)

    # Review written by the student about the teacher
    student_review_rating = Column(Integer, nullable=True)
    student_review_comment = Column(Text, nullable=True)
    student_review_created_at = Column(DateTime(timezone=True), nullable=True)

    # Review written by the teacher about the student
    teacher_review_rating = Column(Integer, nullable=True)
    teacher_review_comment = Column(Text, nullable=True)
    teacher_review_created_at = Column(DateTime(timezone=True), nullable=True)

    created_at = Column(DateTime(timezone=True), nullable=False)
    updated_at = Column(DateTime(timezone=True), nullable=False)

    student = relationship("User", foreign_keys=[student_id], lazy="joined")
    teacher = relationship("User", foreign_keys=[teacher_id], lazy="joined")
    status_history = relationship(
        "SessionStatusHistory",
        back_populates="session",
        order_by="SessionStatusHistory.changed_at, SessionStatusHistory.id",
        cascade="all, delete-orphan",
        lazy="selectin",
    )

    __table_args__ = (
        CheckConstraint("end_time > start_time", name="ck_skill_sessions_window"),
        CheckConstraint("student_id <> teacher_id", name="ck_skill_sessions_distinct_participants"),
        CheckConstraint(
            "status IN ('pending', 'confirmed', 'completed', 'cancelled')",
            name="ck_skill_sessions_status",
        ),
        CheckConstraint(
            "student_review_rating IS NULL OR (student_review_rating >= 1 AND student_review_rating <= 5)",
            name="ck_skill_sessions_student_review_rating",
        ),
        CheckConstraint(
            "teacher_review_rating IS NULL OR (teacher_review_rating >= 1 AND teacher_review_rating <= 5)",
            name="ck_skill_sessions_teacher_review_rating",
        ),
        Index("idx_skill_sessions_teacher_window", "teacher_id", "status", "start_time", "end_time"),
    )

    @property
    def status_enum(self) -> SessionStatus:
        return SessionStatus(self.status)

    def participant_role(self, user_id: str) -> Optional[ParticipantRole]:
        """Which side ``user_id`` is on, or None for outsiders."""
        if user_id == self.student_id:
            return ParticipantRole.STUDENT
        if user_id == self.teacher_id:
            return ParticipantRole.TEACHER
        return None

    def review_for(self, role: ParticipantRole) -> Optional[ReviewSnapshot]:
        """Review written by the participant on ``role``'s side."""
        prefix = role.value
        rating = getattr(self, f"{prefix}_review_rating")
        if rating is None:
            return None
        return ReviewSnapshot(
            rating=rating,
            comment=getattr(self, f"{prefix}_review_comment"),
            created_at=ensure_utc(getattr(self, f"{prefix}_review_created_at")),
        )

    @property
    def student_review(self) -> Optional[ReviewSnapshot]:
        return self.review_for(ParticipantRole.STUDENT)

    @property
    def teacher_review(self) -> Optional[ReviewSnapshot]:
        return self.review_for(ParticipantRole.TEACHER)

    @property
    def is_settled(self) -> bool:
        """Both participants have reviewed."""
        return self.student_review_rating is not None and self.teacher_review_rating is not None

    def __repr__(self) -> str:
        return f"<SkillSession {self.id} {self.skill} {self.status}>"


class SessionStatusHistory(Base):
    """Append-only record of accepted status changes."""

    __tablename__ = "session_status_history"

    id = Column(String(26), primary_key=True, default=lambda: str(ulid.ULID()))
    session_id = Column(
        String(26), ForeignKey("skill_sessions.id", ondelete="CASCADE"), nullable=False, index=True
    )
    status = Column(String(20), nullable=False)
    changed_by_id = Column(String(26), ForeignKey("users.id"), nullable=False)
    changed_at = Column(DateTime(timezone=True), nullable=False)

    session = relationship("SkillSession", back_populates="status_history")

    def __repr__(self) -> str:
        return f"<SessionStatusHistory {self.session_id} -> {self.status}>"
