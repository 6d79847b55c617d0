# backend/skillswap/schemas/review.py
"""
Review request and response schemas.

Ratings and comments are accepted untyped; the review service validates them.
"""

from datetime import datetime
from typing import Any, List, Optional

from .base import Pagination, StandardizedModel
from .user import ParticipantSummary


class ReviewSubmitRequest(StandardizedModel):
    rating: Optional[Any] = None
    comment: Optional[Any] = None


class ReceivedReviewItem(StandardizedModel):
    session_id: str
    skill: str
    rating: int
    comment: str
    created_at: datetime
    reviewer: ParticipantSummary


class ReceivedReviewListResponse(StandardizedModel):
    reviews: List[ReceivedReviewItem]
    pagination: Pagination
