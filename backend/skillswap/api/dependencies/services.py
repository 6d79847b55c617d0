# backend/skillswap/api/dependencies/services.py
"""
Service layer dependencies for dependency injection.

Each factory builds a request-scoped service bound to the request's
database session and clock.
"""

from fastapi import Depends
from sqlalchemy.orm import Session

from ...core.clock import Clock
from ...services.booking_service import BookingService
from ...services.review_service import ReviewService
from ...services.session_lifecycle_service import SessionLifecycleService
from .clock import get_clock
from .database import get_db


def get_booking_service(
    db: Session = Depends(get_db),
    clock: Clock = Depends(get_clock),
) -> BookingService:
    return BookingService(db, clock=clock)


def get_session_lifecycle_service(
    db: Session = Depends(get_db),
    clock: Clock = Depends(get_clock),
) -> SessionLifecycleService:
    return SessionLifecycleService(db, clock=clock)


def get_review_service(
    db: Session = Depends(get_db),
    clock: Clock = Depends(get_clock),
) -> ReviewService:
    return ReviewService(db, clock=clock)
