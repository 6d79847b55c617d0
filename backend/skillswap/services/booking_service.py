# backend/skillswap/services/booking_service.py
"""
Booking Service for SkillSwap

Creates sessions after the booking checks pass and serves the participant
and admin listings.

Checks run in a fixed order so callers always see the first failure:
required fields, timestamp parsing, future start, positive duration,
maximum duration, self-booking, teacher existence, teacher qualification,
and finally overlap with the teacher's pending/confirmed sessions.
"""

from datetime import timedelta
import logging
from typing import Any, List, Mapping, Optional, Tuple

from sqlalchemy.orm import Session

from ..core.clock import Clock
from ..core.config import settings
from ..core.enums import SessionStatus
from ..core.exceptions import (
    ForbiddenException,
    NotFoundException,
    SessionConflictException,
    ValidationException,
)
from ..core.session_lock import session_lock_sync, teacher_booking_key
from ..models.skill_session import SkillSession
from ..repositories.factory import RepositoryFactory
from ..repositories.skill_session_repository import SkillSessionRepository
from ..repositories.user_repository import UserRepository
from .base import BaseService
from .booking_rules import describe_conflicts, validate_booking_window

logger = logging.getLogger(__name__)


class BookingService(BaseService):
    """
    Service layer for creating and listing sessions.

    A teacher's slot is serialized while booking: the teacher row is read
    ``FOR UPDATE`` and, when Redis is configured, a per-teacher mutex is held
    around the overlap query and insert.
    """

    def __init__(
        self,
        db: Session,
        clock: Optional[Clock] = None,
        user_repository: Optional[UserRepository] = None,
        session_repository: Optional[SkillSessionRepository] = None,
    ):
        super().__init__(db, clock)
        self.user_repository = user_repository or RepositoryFactory.create_user_repository(db)
        self.session_repository = (
            session_repository or RepositoryFactory.create_skill_session_repository(db)
        )

    @BaseService.measure_operation("create_session")
    def create_session(self, student_id: str, data: Mapping[str, Any]) -> SkillSession:
        """
        Book a new pending session for ``student_id``.

        Args:
            student_id: The authenticated caller, who becomes the student
            data: skill, start_time, end_time, teacher_id and optional notes

        Returns:
            The persisted session with participants loaded

        Raises:
            ValidationException: Malformed or unacceptable request
            NotFoundException: Teacher does not exist
            SessionConflictException: Window overlaps an active session
        """
        now = self.now()
        window = validate_booking_window(
            skill=data.get("skill"),
            start_time=data.get("start_time"),
            end_time=data.get("end_time"),
            teacher_id=data.get("teacher_id"),
            student_id=student_id,
            now=now,
            max_duration=timedelta(hours=settings.max_session_hours),
        )

        with session_lock_sync(teacher_booking_key(window.teacher_id)) as acquired:
            if not acquired:
                raise SessionConflictException(
                    "Another booking for this teacher is in progress, please retry",
                    code="BOOKING_IN_PROGRESS",
                    details={"teacher_id": window.teacher_id},
                )

            with self.transaction():
                teacher = self.user_repository.get_for_update(window.teacher_id)
                if teacher is None:
                    raise NotFoundException(
                        "Teacher not found",
                        code="TEACHER_NOT_FOUND",
                        details={"teacher_id": window.teacher_id},
                    )

                if not teacher.can_teach(window.skill):
                    raise ValidationException(
                        "Teacher is not qualified to teach this skill",
                        code="UNQUALIFIED_TEACHER",
                        details={"teacher_id": teacher.id, "skill": window.skill},
                    )

                conflicts = self.session_repository.find_overlapping(
                    teacher.id, window.start_time, window.end_time
                )
                if conflicts:
                    raise SessionConflictException(
                        details={"conflicts": describe_conflicts(conflicts)},
                    )

                notes = data.get("notes")
                session = self.session_repository.create(
                    skill=window.skill,
                    start_time=window.start_time,
                    end_time=window.end_time,
                    student_id=window.student_id,
                    teacher_id=teacher.id,
                    status=SessionStatus.PENDING.value,
                    notes=notes if notes else None,
                    created_at=now,
                    updated_at=now,
                )

        self.log_operation(
            "create_session",
            session_id=session.id,
            teacher_id=session.teacher_id,
            student_id=session.student_id,
        )
        return self.session_repository.get_by_id(session.id) or session

    @BaseService.measure_operation("list_for_participant")
    def list_for_participant(self, user_id: str) -> List[SkillSession]:
        """Sessions where ``user_id`` is student or teacher, latest start first."""
        return self.session_repository.list_for_participant(user_id)

    @BaseService.measure_operation("list_for_teacher")
    def list_for_teacher(self, user_id: str) -> List[SkillSession]:
        """Sessions taught by ``user_id``; the stored directory role must be teacher."""
        user = self.user_repository.get_by_id(user_id, load_relationships=False)
        if user is None or not user.is_teacher:
            raise ForbiddenException(
                "Only teachers can view teaching sessions",
                code="TEACHER_ROLE_REQUIRED",
            )
        return self.session_repository.list_for_teacher(user_id)

    @BaseService.measure_operation("list_sessions")
    def list_sessions(
        self,
        *,
        status: Optional[str] = None,
        page: int = 1,
        limit: Optional[int] = None,
    ) -> Tuple[List[SkillSession], int, int, int]:
        """
        Admin listing across all sessions, newest first.

        Returns:
            (sessions, total, page, limit) after clamping paging arguments
        """
        status_filter: Optional[SessionStatus] = None
        if status:
            try:
                status_filter = SessionStatus(status.strip().lower())
            except ValueError:
                raise ValidationException(
                    f"Unknown session status: {status}",
                    code="INVALID_STATUS",
                    details={"allowed": [s.value for s in SessionStatus]},
                )

        page = max(page, 1)
        limit = limit or settings.default_page_size
        limit = min(max(limit, 1), settings.max_page_size)

        sessions, total = self.session_repository.list_all(
            status=status_filter, skip=(page - 1) * limit, limit=limit
        )
        return sessions, total, page, limit
