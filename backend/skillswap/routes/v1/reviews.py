# backend/skillswap/routes/v1/reviews.py
"""
Reviews routes - API v1

Endpoints:
    GET /user/{user_id} → Reviews written about a user, newest first
"""

import logging
from typing import NoReturn, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status

from ...api.dependencies.services import get_review_service
from ...auth import get_current_principal
from ...core.exceptions import DomainException
from ...principal import UserPrincipal
from ...schemas.base import Pagination
from ...schemas.review import ReceivedReviewItem, ReceivedReviewListResponse
from ...schemas.user import ParticipantSummary
from ...services.review_service import ReviewService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["reviews-v1"])


def handle_domain_exception(exc: DomainException) -> NoReturn:
    """Convert domain exceptions to HTTP exceptions."""
    if hasattr(exc, "to_http_exception"):
        raise exc.to_http_exception()
    raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(exc))


@router.get("/user/{user_id}", response_model=ReceivedReviewListResponse)
def get_user_reviews(
    user_id: str,
    page: int = Query(1, ge=1),
    limit: Optional[int] = Query(None, ge=1),
    _: UserPrincipal = Depends(get_current_principal),
    service: ReviewService = Depends(get_review_service),
) -> ReceivedReviewListResponse:
    try:
        items, total, page, limit = service.list_received_reviews(user_id, page=page, limit=limit)
    except DomainException as e:
        handle_domain_exception(e)

    reviews = []
    for session, review in items:
        reviewer = session.student if session.teacher_id == user_id else session.teacher
        reviews.append(
            ReceivedReviewItem(
                session_id=session.id,
                skill=session.skill,
                rating=review.rating,
                comment=review.comment,
                created_at=review.created_at,
                reviewer=ParticipantSummary.model_validate(reviewer),
            )
        )
    return ReceivedReviewListResponse(
        reviews=reviews,
        pagination=Pagination.build(total=total, page=page, limit=limit),
    )
