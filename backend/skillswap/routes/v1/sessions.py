# backend/skillswap/routes/v1/sessions.py
"""
Sessions routes - API v1

Versioned session endpoints under /api/v1/sessions.
All business logic delegated to BookingService, SessionLifecycleService
and ReviewService.

Endpoints:
    POST /                          → Book a session (caller becomes the student)
    GET /my-sessions                → Sessions the caller takes part in
    GET /teacher-sessions           → Sessions the caller teaches (teachers only)
    GET /{session_id}               → Session details (participants only)
    PATCH /{session_id}/status      → Status transition
    PATCH /{session_id}/notes       → Edit notes (either participant)
    PATCH /{session_id}/meeting-link → Set meeting link (student, confirmed only)
    POST /{session_id}/review       → Review a completed session
"""

import logging
from typing import List, NoReturn

from fastapi import APIRouter, Body, Depends, HTTPException, status

from ...api.dependencies.auth import get_current_participant
from ...api.dependencies.services import (
    get_booking_service,
    get_review_service,
    get_session_lifecycle_service,
)
from ...core.exceptions import DomainException
from ...principal import UserPrincipal
from ...schemas.review import ReviewSubmitRequest
from ...schemas.session import (
    MeetingLinkUpdate,
    SessionCreateRequest,
    SessionNotesUpdate,
    SessionResponse,
    SessionStatusUpdate,
)
from ...services.booking_service import BookingService
from ...services.review_service import ReviewService
from ...services.session_lifecycle_service import SessionLifecycleService

logger = logging.getLogger(__name__)

# V1 router - no prefix here, will be added when mounting in main.py
router = APIRouter(tags=["sessions-v1"])


def handle_domain_exception(exc: DomainException) -> NoReturn:
    """Convert domain exceptions to HTTP exceptions."""
    if hasattr(exc, "to_http_exception"):
        raise exc.to_http_exception()
    raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(exc))


# =============================================================================
# Static routes first (before dynamic routes with path parameters)
# =============================================================================


@router.post("", response_model=SessionResponse, status_code=status.HTTP_201_CREATED)
def create_session(
    payload: SessionCreateRequest = Body(...),
    current_user: UserPrincipal = Depends(get_current_participant),
    service: BookingService = Depends(get_booking_service),
) -> SessionResponse:
    """Book a session with a teacher; the session starts out pending."""
    try:
        session = service.create_session(current_user.user_id, payload.model_dump())
        return SessionResponse.from_session(session)
    except DomainException as e:
        handle_domain_exception(e)


@router.get("/my-sessions", response_model=List[SessionResponse])
def get_my_sessions(
    current_user: UserPrincipal = Depends(get_current_participant),
    service: BookingService = Depends(get_booking_service),
) -> List[SessionResponse]:
    try:
        sessions = service.list_for_participant(current_user.user_id)
        return [SessionResponse.from_session(s) for s in sessions]
    except DomainException as e:
        handle_domain_exception(e)


@router.get("/teacher-sessions", response_model=List[SessionResponse])
def get_teacher_sessions(
    current_user: UserPrincipal = Depends(get_current_participant),
    service: BookingService = Depends(get_booking_service),
) -> List[SessionResponse]:
    try:
        sessions = service.list_for_teacher(current_user.user_id)
        return [SessionResponse.from_session(s) for s in sessions]
    except DomainException as e:
        handle_domain_exception(e)


# =============================================================================
# Per-session routes
# =============================================================================


@router.get("/{session_id}", response_model=SessionResponse)
def get_session(
    session_id: str,
    current_user: UserPrincipal = Depends(get_current_participant),
    service: SessionLifecycleService = Depends(get_session_lifecycle_service),
) -> SessionResponse:
    try:
        return SessionResponse.from_session(service.get_by_id(session_id, current_user.user_id))
    except DomainException as e:
        handle_domain_exception(e)


@router.patch("/{session_id}/status", response_model=SessionResponse)
def update_session_status(
    session_id: str,
    payload: SessionStatusUpdate = Body(...),
    current_user: UserPrincipal = Depends(get_current_participant),
    service: SessionLifecycleService = Depends(get_session_lifecycle_service),
) -> SessionResponse:
    """
    Move a session along its lifecycle.

    pending → confirmed | cancelled, confirmed → completed | cancelled.
    Confirming and completing are teacher-only; students may cancel until
    the cancellation notice window before the start.
    """
    try:
        session = service.transition(session_id, current_user.user_id, payload.status)
        return SessionResponse.from_session(session)
    except DomainException as e:
        handle_domain_exception(e)


@router.patch("/{session_id}/notes", response_model=SessionResponse)
def update_session_notes(
    session_id: str,
    payload: SessionNotesUpdate = Body(...),
    current_user: UserPrincipal = Depends(get_current_participant),
    service: SessionLifecycleService = Depends(get_session_lifecycle_service),
) -> SessionResponse:
    try:
        session = service.update_notes(session_id, current_user.user_id, payload.notes)
        return SessionResponse.from_session(session)
    except DomainException as e:
        handle_domain_exception(e)


@router.patch("/{session_id}/meeting-link", response_model=SessionResponse)
def update_meeting_link(
    session_id: str,
    payload: MeetingLinkUpdate = Body(...),
    current_user: UserPrincipal = Depends(get_current_participant),
    service: SessionLifecycleService = Depends(get_session_lifecycle_service),
) -> SessionResponse:
    try:
        session = service.update_meeting_link(
            session_id, current_user.user_id, payload.meeting_link
        )
        return SessionResponse.from_session(session)
    except DomainException as e:
        handle_domain_exception(e)


@router.post("/{session_id}/review", response_model=SessionResponse)
def submit_session_review(
    session_id: str,
    payload: ReviewSubmitRequest = Body(...),
    current_user: UserPrincipal = Depends(get_current_participant),
    service: ReviewService = Depends(get_review_service),
) -> SessionResponse:
    """Review the other participant of a completed session (once per side)."""
    try:
        session = service.submit_review(
            session_id, current_user.user_id, payload.rating, payload.comment
        )
        return SessionResponse.from_session(session)
    except DomainException as e:
        handle_domain_exception(e)
