# backend/skillswap/routes/v1/admin.py
"""
Admin routes - API v1

Read-only operator view over every session.

Endpoints:
    GET /sessions → All sessions, newest first, optional status filter
"""

import logging
from typing import NoReturn, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status

from ...api.dependencies.auth import require_admin
from ...api.dependencies.services import get_booking_service
from ...core.exceptions import DomainException
from ...principal import UserPrincipal
from ...schemas.base import Pagination
from ...schemas.session import SessionPage, SessionResponse
from ...services.booking_service import BookingService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["admin-v1"])


def handle_domain_exception(exc: DomainException) -> NoReturn:
    """Convert domain exceptions to HTTP exceptions."""
    if hasattr(exc, "to_http_exception"):
        raise exc.to_http_exception()
    raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(exc))


@router.get("/sessions", response_model=SessionPage)
def list_all_sessions(
    status_filter: Optional[str] = Query(None, alias="status"),
    page: int = Query(1, ge=1),
    limit: Optional[int] = Query(None, ge=1),
    admin: UserPrincipal = Depends(require_admin),
    service: BookingService = Depends(get_booking_service),
) -> SessionPage:
    try:
        sessions, total, page, limit = service.list_sessions(
            status=status_filter, page=page, limit=limit
        )
    except DomainException as e:
        handle_domain_exception(e)

    logger.info(
        "Admin session listing",
        extra={"admin_id": admin.user_id, "status": status_filter, "page": page, "total": total},
    )
    return SessionPage(
        sessions=[SessionResponse.from_session(s) for s in sessions],
        pagination=Pagination.build(total=total, page=page, limit=limit),
    )
