# backend/skillswap/services/session_lifecycle_service.py
"""
Session Lifecycle Service for SkillSwap

Applies the status state machine to persisted sessions and handles the
auxiliary participant edits (notes, meeting link).

A transition is checked in this order:
1. The session exists
2. The caller is one of its participants
3. The requested status is a known status
4. The transition table allows current -> requested
5. The caller's side and the time to start permit it

Only then is the status written, with a compare-and-set on the expected
current status so a concurrent change is detected instead of overwritten.
"""

from datetime import timedelta
import logging
from typing import Optional

from sqlalchemy.orm import Session

from ..core.clock import Clock
from ..core.config import settings
from ..core.enums import ParticipantRole, SessionStatus
from ..core.exceptions import (
    ForbiddenException,
    InvalidStateException,
    InvalidTransitionException,
    NotFoundException,
    ValidationException,
)
from ..models.skill_session import SkillSession
from ..monitoring.prometheus_metrics import prometheus_metrics
from ..repositories.factory import RepositoryFactory
from ..repositories.skill_session_repository import SkillSessionRepository
from .base import BaseService
from .session_state_machine import allowed_transitions, permitted_transitions

logger = logging.getLogger(__name__)


class SessionLifecycleService(BaseService):
    """Status transitions, participant reads and participant edits."""

    def __init__(
        self,
        db: Session,
        clock: Optional[Clock] = None,
        session_repository: Optional[SkillSessionRepository] = None,
    ):
        super().__init__(db, clock)
        self.session_repository = (
            session_repository or RepositoryFactory.create_skill_session_repository(db)
        )

    def _load(self, session_id: str) -> SkillSession:
        session = self.session_repository.get_by_id(session_id)
        if session is None:
            raise NotFoundException(
                "Session not found",
                code="SESSION_NOT_FOUND",
                details={"session_id": session_id},
            )
        return session

    def _require_participant(self, session: SkillSession, user_id: str) -> ParticipantRole:
        role = session.participant_role(user_id)
        if role is None:
            raise ForbiddenException(
                "You are not a participant in this session",
                code="NOT_A_PARTICIPANT",
                details={"session_id": session.id},
            )
        return role

    @BaseService.measure_operation("get_session")
    def get_by_id(self, session_id: str, user_id: str) -> SkillSession:
        session = self._load(session_id)
        self._require_participant(session, user_id)
        return session

    @BaseService.measure_operation("transition_session")
    def transition(self, session_id: str, user_id: str, requested_status: str) -> SkillSession:
        """
        Move a session to ``requested_status`` on behalf of ``user_id``.

        Raises:
            NotFoundException: Session does not exist
            ForbiddenException: Caller is not a participant, or their side /
                the remaining notice does not permit this change
            ValidationException: ``requested_status`` is not a known status
            InvalidTransitionException: The table does not allow the change,
                including when a concurrent request changed the status first
        """
        session = self._load(session_id)
        role = self._require_participant(session, user_id)

        try:
            requested = SessionStatus(str(requested_status).strip().lower())
        except ValueError:
            raise ValidationException(
                f"Unknown session status: {requested_status}",
                code="INVALID_STATUS",
                details={"allowed": [s.value for s in SessionStatus]},
            )

        current = session.status_enum
        allowed = allowed_transitions(current)
        if requested not in allowed:
            raise InvalidTransitionException(
                current.value, requested.value, [s.value for s in allowed]
            )

        now = self.now()
        notice = timedelta(hours=settings.cancellation_notice_hours)
        if requested not in permitted_transitions(session, role, now, notice=notice):
            raise ForbiddenException(
                self._forbidden_message(requested),
                code="TRANSITION_NOT_PERMITTED",
                details={
                    "current_status": current.value,
                    "requested_status": requested.value,
                    "role": role.value,
                },
            )

        with self.transaction():
            changed = self.session_repository.compare_and_set_status(
                session.id, expected=current, new_status=requested, updated_at=now
            )
            if not changed:
                fresh = self.session_repository.reload(session).status_enum
                raise InvalidTransitionException(
                    fresh.value,
                    requested.value,
                    [s.value for s in allowed_transitions(fresh)],
                )
            self.session_repository.append_history(
                session.id, status=requested, changed_by_id=user_id, changed_at=now
            )

        prometheus_metrics.record_session_transition(current.value, requested.value)
        self.log_operation(
            "transition_session",
            session_id=session.id,
            from_status=current.value,
            to_status=requested.value,
            changed_by=user_id,
        )
        return self.session_repository.reload(session)

    @staticmethod
    def _forbidden_message(requested: SessionStatus) -> str:
        if requested is SessionStatus.CANCELLED:
            return (
                "Sessions can only be cancelled by the teacher within "
                f"{settings.cancellation_notice_hours} hours of the start time"
            )
        return f"Only the teacher can mark a session as {requested.value}"

    @BaseService.measure_operation("update_notes")
    def update_notes(self, session_id: str, user_id: str, notes: Optional[str]) -> SkillSession:
        """Either participant may edit notes at any status."""
        session = self._load(session_id)
        self._require_participant(session, user_id)

        with self.transaction():
            session.notes = notes
            session.updated_at = self.now()
            self.session_repository.flush()

        self.log_operation("update_notes", session_id=session.id, updated_by=user_id)
        return session

    @BaseService.measure_operation("update_meeting_link")
    def update_meeting_link(
        self, session_id: str, user_id: str, meeting_link: Optional[str]
    ) -> SkillSession:
        """The student sets the meeting link once the teacher has confirmed."""
        session = self._load(session_id)
        role = self._require_participant(session, user_id)

        if role is not ParticipantRole.STUDENT:
            raise ForbiddenException(
                "Only the student can update the meeting link",
                code="STUDENT_ONLY",
                details={"session_id": session.id},
            )

        if session.status_enum is not SessionStatus.CONFIRMED:
            raise InvalidStateException(
                "Meeting link can only be updated for confirmed sessions",
                code="SESSION_NOT_CONFIRMED",
                details={"current_status": session.status},
            )

        link = meeting_link.strip() if isinstance(meeting_link, str) else None
        with self.transaction():
            session.meeting_link = link or None
            session.updated_at = self.now()
            self.session_repository.flush()

        self.log_operation("update_meeting_link", session_id=session.id, updated_by=user_id)
        return session
