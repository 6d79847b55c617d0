# backend/skillswap/repositories/skill_session_repository.py
"""
SkillSession Repository for SkillSwap

Data access for sessions: overlap detection, participant listings,
compare-and-set status changes, write-once review slots and the
projections used for rating settlement and review listings.
"""

from datetime import datetime
import logging
from typing import Iterable, List, Optional, Tuple

from sqlalchemy import and_, case, or_
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Query, Session, joinedload, selectinload

from ..core.enums import ACTIVE_SESSION_STATUSES, ParticipantRole, SessionStatus
from ..core.exceptions import RepositoryException
from ..models.skill_session import SessionStatusHistory, SkillSession
from .base_repository import BaseRepository

logger = logging.getLogger(__name__)


class SkillSessionRepository(BaseRepository[SkillSession]):
    """Repository for SkillSession data access."""

    def __init__(self, db: Session):
        super().__init__(db, SkillSession)
        self.logger = logging.getLogger(__name__)

    def _apply_eager_loading(self, query: Query) -> Query:
        return query.options(
            joinedload(SkillSession.student),
            joinedload(SkillSession.teacher),
            selectinload(SkillSession.status_history),
        )

    # ==========================================
    # Booking support
    # ==========================================

    def find_overlapping(
        self,
        teacher_id: str,
        start_time: datetime,
        end_time: datetime,
        statuses: Iterable[SessionStatus] = ACTIVE_SESSION_STATUSES,
    ) -> List[SkillSession]:
        """
        Sessions of ``teacher_id`` in ``statuses`` intersecting ``[start_time, end_time)``.

        Touching endpoints do not overlap.
        """
        query = (
            self.db.query(SkillSession)
            .filter(
                SkillSession.teacher_id == teacher_id,
                SkillSession.status.in_([status.value for status in statuses]),
                SkillSession.start_time < end_time,
                SkillSession.end_time > start_time,
            )
            .order_by(SkillSession.start_time)
        )
        return self._execute_query(query)

    # ==========================================
    # Listings
    # ==========================================

    def list_for_participant(self, user_id: str) -> List[SkillSession]:
        query = (
            self._apply_eager_loading(self.db.query(SkillSession))
            .filter(or_(SkillSession.student_id == user_id, SkillSession.teacher_id == user_id))
            .order_by(SkillSession.start_time.desc(), SkillSession.id.desc())
        )
        return self._execute_query(query)

    def list_for_teacher(self, teacher_id: str) -> List[SkillSession]:
        query = (
            self._apply_eager_loading(self.db.query(SkillSession))
            .filter(SkillSession.teacher_id == teacher_id)
            .order_by(SkillSession.start_time.desc(), SkillSession.id.desc())
        )
        return self._execute_query(query)

    def list_all(
        self, *, status: Optional[SessionStatus] = None, skip: int = 0, limit: int = 10
    ) -> Tuple[List[SkillSession], int]:
        """Page through every session, newest first, with the unpaged total."""
        query = self.db.query(SkillSession)
        if status is not None:
            query = query.filter(SkillSession.status == status.value)
        try:
            total = query.count()
        except SQLAlchemyError as e:
            self.logger.error(f"Error counting sessions: {str(e)}")
            raise RepositoryException(f"Failed to count sessions: {str(e)}")
        page_query = (
            self._apply_eager_loading(query)
            .order_by(SkillSession.created_at.desc(), SkillSession.id.desc())
            .offset(skip)
            .limit(limit)
        )
        return self._execute_query(page_query), total

    # ==========================================
    # Lifecycle writes
    # ==========================================

    def compare_and_set_status(
        self,
        session_id: str,
        *,
        expected: SessionStatus,
        new_status: SessionStatus,
        updated_at: datetime,
    ) -> bool:
        """
        Move the session to ``new_status`` only if it is still ``expected``.

        Returns False when another writer changed the status first.
        """
        try:
            updated = (
                self.db.query(SkillSession)
                .filter(SkillSession.id == session_id, SkillSession.status == expected.value)
                .update(
                    {SkillSession.status: new_status.value, SkillSession.updated_at: updated_at},
                    synchronize_session=False,
                )
            )
        except SQLAlchemyError as e:
            self.logger.error(f"Error updating status of session {session_id}: {str(e)}")
            raise RepositoryException(f"Failed to update session status: {str(e)}")
        return updated == 1

    def append_history(
        self, session_id: str, *, status: SessionStatus, changed_by_id: str, changed_at: datetime
    ) -> SessionStatusHistory:
        entry = SessionStatusHistory(
            session_id=session_id,
            status=status.value,
            changed_by_id=changed_by_id,
            changed_at=changed_at,
        )
        try:
            self.db.add(entry)
            self.db.flush()
        except SQLAlchemyError as e:
            self.logger.error(f"Error appending history for session {session_id}: {str(e)}")
            raise RepositoryException(f"Failed to append status history: {str(e)}")
        return entry

    def claim_review_slot(
        self,
        session_id: str,
        *,
        role: ParticipantRole,
        rating: int,
        comment: str,
        created_at: datetime,
    ) -> bool:
        """
        Write a review into ``role``'s slot if it is still empty.

        Returns False when the slot was already filled.
        """
        rating_col = getattr(SkillSession, f"{role.value}_review_rating")
        values = {
            rating_col: rating,
            getattr(SkillSession, f"{role.value}_review_comment"): comment,
            getattr(SkillSession, f"{role.value}_review_created_at"): created_at,
            SkillSession.updated_at: created_at,
        }
        try:
            updated = (
                self.db.query(SkillSession)
                .filter(
                    SkillSession.id == session_id,
                    SkillSession.status == SessionStatus.COMPLETED.value,
                    rating_col.is_(None),
                )
                .update(values, synchronize_session=False)
            )
        except SQLAlchemyError as e:
            self.logger.error(f"Error writing review for session {session_id}: {str(e)}")
            raise RepositoryException(f"Failed to write review: {str(e)}")
        return updated == 1

    def reload(self, session: SkillSession) -> SkillSession:
        """Re-read a session after a bulk UPDATE bypassed the identity map."""
        self.db.refresh(session)
        return session

    # ==========================================
    # Review projections
    # ==========================================

    def settled_ratings_received(self, user_id: str) -> List[int]:
        """
        Ratings ``user_id`` received on sessions where both sides have reviewed.

        As a teacher they are rated by the student's review; as a student by
        the teacher's review.
        """
        settled = and_(
            SkillSession.student_review_rating.isnot(None),
            SkillSession.teacher_review_rating.isnot(None),
        )
        received = case(
            (SkillSession.teacher_id == user_id, SkillSession.student_review_rating),
            else_=SkillSession.teacher_review_rating,
        )
        query = self.db.query(received).filter(
            settled,
            or_(SkillSession.teacher_id == user_id, SkillSession.student_id == user_id),
        )
        try:
            return [row[0] for row in query.all()]
        except SQLAlchemyError as e:
            self.logger.error(f"Error loading ratings for user {user_id}: {str(e)}")
            raise RepositoryException(f"Failed to load ratings: {str(e)}")

    def _received_reviews_filter(self, user_id: str):
        return or_(
            and_(SkillSession.teacher_id == user_id, SkillSession.student_review_rating.isnot(None)),
            and_(SkillSession.student_id == user_id, SkillSession.teacher_review_rating.isnot(None)),
        )

    def list_received_reviews(
        self, user_id: str, *, skip: int = 0, limit: int = 10
    ) -> Tuple[List[SkillSession], int]:
        """Sessions carrying a review written about ``user_id``, newest review first."""
        base = self.db.query(SkillSession).filter(self._received_reviews_filter(user_id))
        try:
            total = base.count()
        except SQLAlchemyError as e:
            self.logger.error(f"Error counting reviews for user {user_id}: {str(e)}")
            raise RepositoryException(f"Failed to count reviews: {str(e)}")
        review_created = case(
            (SkillSession.teacher_id == user_id, SkillSession.student_review_created_at),
            else_=SkillSession.teacher_review_created_at,
        )
        query = (
            self._apply_eager_loading(base)
            .order_by(review_created.desc(), SkillSession.id.desc())
            .offset(skip)
            .limit(limit)
        )
        return self._execute_query(query), total
