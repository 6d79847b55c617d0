# backend/skillswap/schemas/session.py
"""
Session request and response models.

Request bodies are deliberately loose: BookingService and the lifecycle
engine validate contents so each failure carries its own error code.
"""

from datetime import datetime
from typing import Any, List, Optional

from pydantic import Field

from ..core.clock import ensure_utc
from ..models.skill_session import ReviewSnapshot, SkillSession
from .base import Pagination, StandardizedModel
from .user import ParticipantSummary


class SessionCreateRequest(StandardizedModel):
    skill: Optional[str] = None
    start_time: Optional[Any] = Field(None, description="ISO-8601 timestamp; naive values are UTC")
    end_time: Optional[Any] = Field(None, description="ISO-8601 timestamp; naive values are UTC")
    teacher_id: Optional[str] = None
    notes: Optional[str] = None


class SessionStatusUpdate(StandardizedModel):
    status: str


class SessionNotesUpdate(StandardizedModel):
    notes: Optional[str] = None


class MeetingLinkUpdate(StandardizedModel):
    meeting_link: Optional[str] = None


class ReviewOut(StandardizedModel):
    rating: int
    comment: str
    created_at: datetime


class StatusHistoryEntry(StandardizedModel):
    status: str
    changed_by: str
    changed_at: datetime


def _review_out(snapshot: Optional[ReviewSnapshot]) -> Optional[ReviewOut]:
    if snapshot is None:
        return None
    return ReviewOut(rating=snapshot.rating, comment=snapshot.comment, created_at=snapshot.created_at)


class SessionResponse(StandardizedModel):
    id: str
    skill: str
    start_time: datetime
    end_time: datetime
    status: str
    teacher: ParticipantSummary
    student: ParticipantSummary
    meeting_link: Optional[str] = None
    notes: Optional[str] = None
    student_review: Optional[ReviewOut] = None
    teacher_review: Optional[ReviewOut] = None
    status_history: List[StatusHistoryEntry] = Field(default_factory=list)
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_session(cls, session: SkillSession) -> "SessionResponse":
        return cls(
            id=session.id,
            skill=session.skill,
            start_time=ensure_utc(session.start_time),
            end_time=ensure_utc(session.end_time),
            status=session.status,
            teacher=ParticipantSummary.model_validate(session.teacher),
            student=ParticipantSummary.model_validate(session.student),
            meeting_link=session.meeting_link,
            notes=session.notes,
            student_review=_review_out(session.student_review),
            teacher_review=_review_out(session.teacher_review),
            status_history=[
                StatusHistoryEntry(
                    status=entry.status,
                    changed_by=entry.changed_by_id,
                    changed_at=ensure_utc(entry.changed_at),
                )
                for entry in session.status_history
            ],
            created_at=ensure_utc(session.created_at),
            updated_at=ensure_utc(session.updated_at),
        )


class SessionPage(StandardizedModel):
    sessions: List[SessionResponse]
    pagination: Pagination
