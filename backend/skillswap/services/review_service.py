# backend/skillswap/services/review_service.py
"""
Review Service for SkillSwap

Records one review per participant on a completed session and settles both
participants' ratings once the second review lands.

Settlement is a full recompute: each participant's rating becomes the mean
of every rating they received on sessions where both sides have reviewed.
The two user rows are locked in id order (plus per-user Redis mutexes where
configured) so concurrent settlements touching the same user serialize.
"""

import logging
from typing import Any, List, Optional, Tuple

from sqlalchemy.orm import Session

from ..core.clock import Clock
from ..core.config import settings
from ..core.enums import ParticipantRole, SessionStatus
from ..core.exceptions import (
    ForbiddenException,
    InvalidStateException,
    NotFoundException,
    ReviewAlreadySubmittedException,
    SessionConflictException,
    ValidationException,
)
from ..core.session_lock import multi_lock_sync, user_rating_key
from ..models.skill_session import ReviewSnapshot, SkillSession
from ..repositories.factory import RepositoryFactory
from ..repositories.skill_session_repository import SkillSessionRepository
from ..repositories.user_repository import UserRepository
from .base import BaseService
from .ratings_math import mean_rating

logger = logging.getLogger(__name__)

MIN_RATING = 1
MAX_RATING = 5


class ReviewService(BaseService):
    """Review submission, rating settlement and received-review listing."""

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

    @staticmethod
    def _validate_review(rating: Any, comment: Any) -> Tuple[int, str]:
        # bool is an int subclass; True must not pass as a rating of 1
        if isinstance(rating, bool) or not isinstance(rating, int):
            raise ValidationException(
                "Invalid rating",
                code="INVALID_RATING",
                details={"reason": f"Rating must be an integer between {MIN_RATING} and {MAX_RATING}"},
            )
        if rating < MIN_RATING or rating > MAX_RATING:
            raise ValidationException(
                "Invalid rating",
                code="INVALID_RATING",
                details={"reason": f"Rating must be an integer between {MIN_RATING} and {MAX_RATING}"},
            )
        if not isinstance(comment, str) or not comment.strip():
            raise ValidationException(
                "Invalid comment",
                code="INVALID_COMMENT",
                details={"reason": "Comment is required and cannot be empty"},
            )
        return rating, comment.strip()

    @BaseService.measure_operation("submit_review")
    def submit_review(
        self, session_id: str, user_id: str, rating: Any, comment: Any
    ) -> SkillSession:
        """
        Write the caller's review on a completed session.

        Raises:
            NotFoundException: Session does not exist
            InvalidStateException: Session is not completed
            ForbiddenException: Caller is not a participant
            ValidationException: Rating outside 1..5 or empty comment
            ReviewAlreadySubmittedException: Caller's review slot is taken
        """
        session = self.session_repository.get_by_id(session_id)
        if session is None:
            raise NotFoundException(
                "Session not found",
                code="SESSION_NOT_FOUND",
                details={"session_id": session_id},
            )

        if session.status_enum is not SessionStatus.COMPLETED:
            raise InvalidStateException(
                "Can only review completed sessions; this session is not completed",
                code="SESSION_NOT_COMPLETED",
                details={
                    "current_status": session.status,
                    "required_status": SessionStatus.COMPLETED.value,
                },
            )

        role = session.participant_role(user_id)
        if role is None:
            raise ForbiddenException(
                "Not authorized to review this session",
                code="NOT_A_PARTICIPANT",
                details={"session_id": session.id},
            )

        clean_rating, clean_comment = self._validate_review(rating, comment)

        if session.review_for(role) is not None:
            raise ReviewAlreadySubmittedException(session.id, role.value)

        now = self.now()
        rating_keys = [user_rating_key(session.student_id), user_rating_key(session.teacher_id)]
        with multi_lock_sync(rating_keys) as acquired:
            if not acquired:
                raise SessionConflictException(
                    "Ratings for this session's participants are being updated, please retry",
                    code="RATING_IN_PROGRESS",
                    details={"session_id": session.id},
                )

            with self.transaction():
                claimed = self.session_repository.claim_review_slot(
                    session.id,
                    role=role,
                    rating=clean_rating,
                    comment=clean_comment,
                    created_at=now,
                )
                if not claimed:
                    raise ReviewAlreadySubmittedException(session.id, role.value)
                self.session_repository.reload(session)

                if session.is_settled:
                    self._settle_ratings(session)

        self.log_operation(
            "submit_review",
            session_id=session.id,
            reviewer_id=user_id,
            reviewer_role=role.value,
            rating=clean_rating,
        )
        return session

    def _settle_ratings(self, session: SkillSession) -> None:
        """
        Recompute both participants' ratings from their settled sessions.

        Runs inside the review transaction after the user rows are locked, so a
        concurrent settlement for the same user reads this session's review.
        """
        for user in self.user_repository.lock_many([session.student_id, session.teacher_id]):
            rating, count = mean_rating(self.session_repository.settled_ratings_received(user.id))
            self.user_repository.update_rating(user, rating, count)
            self.logger.info(
                "Rating settled",
                extra={"user_id": user.id, "rating": rating, "review_count": count},
            )

    @BaseService.measure_operation("list_received_reviews")
    def list_received_reviews(
        self, user_id: str, *, page: int = 1, limit: Optional[int] = None
    ) -> Tuple[List[Tuple[SkillSession, ReviewSnapshot]], int, int, int]:
        """
        Reviews written about ``user_id``, newest first.

        Returns:
            ([(session, review), ...], total, page, limit)
        """
        if self.user_repository.get_by_id(user_id, load_relationships=False) is None:
            raise NotFoundException(
                "User not found",
                code="USER_NOT_FOUND",
                details={"user_id": user_id},
            )

        page = max(page, 1)
        limit = limit or settings.default_page_size
        limit = min(max(limit, 1), settings.max_page_size)

        sessions, total = self.session_repository.list_received_reviews(
            user_id, skip=(page - 1) * limit, limit=limit
        )
        items = []
        for session in sessions:
            # The reviewer is the counterpart, so the review sits in their slot
            reviewer_role = (
                ParticipantRole.STUDENT
                if session.teacher_id == user_id
                else ParticipantRole.TEACHER
            )
            review = session.review_for(reviewer_role)
            if review is not None:
                items.append((session, review))
        return items, total, page, limit

