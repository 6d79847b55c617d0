# backend/skillswap/api/dependencies/auth.py
"""
Authentication and authorization dependencies.

``get_current_participant`` is what session and review routes use: a
student/teacher principal whose user still exists in the directory.
Admin routes use ``require_admin``.
"""

import logging

from fastapi import Depends
from sqlalchemy.orm import Session

from ...auth import get_current_principal
from ...core.exceptions import ForbiddenException, UnauthorizedException
from ...principal import UserPrincipal
from ...repositories.factory import RepositoryFactory
from .database import get_db

logger = logging.getLogger(__name__)


def get_current_participant(
    principal: UserPrincipal = Depends(get_current_principal),
    db: Session = Depends(get_db),
) -> UserPrincipal:
    """
    Get the current student or teacher.

    Raises:
        HTTPException: 401 if the user no longer exists, 403 for admin tokens
    """
    if principal.is_admin:
        raise ForbiddenException(
            "Admin accounts cannot act as session participants",
            code="PARTICIPANT_REQUIRED",
        ).to_http_exception()

    user_repository = RepositoryFactory.create_user_repository(db)
    if not user_repository.exists(id=principal.user_id):
        logger.warning("Token subject not found in directory", extra={"user_id": principal.user_id})
        raise UnauthorizedException("User not found", code="USER_NOT_FOUND").to_http_exception()
    return principal


async def require_admin(
    principal: UserPrincipal = Depends(get_current_principal),
) -> UserPrincipal:
    """Dependency that ensures the caller has administrator privileges."""
    if not principal.is_admin:
        raise ForbiddenException("Admin access required", code="ADMIN_REQUIRED").to_http_exception()
    return principal
