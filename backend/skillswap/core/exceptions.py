# backend/skillswap/core/exceptions.py
"""
Domain-specific exceptions for the SkillSwap platform.

These exceptions carry a human-readable message, a stable machine code and
optional structured details. The API layer turns them into HTTP errors via
``to_http_exception``.
"""

from typing import Any, Dict, Iterable, Optional

from fastapi import HTTPException, status


class DomainException(Exception):
    """Base exception for all domain-specific errors."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        self.message = message
        self.code = code or self.__class__.__name__
        self.details = details or {}
        super().__init__(self.message)

    def to_http_exception(self) -> HTTPException:
        return HTTPException(
            status_code=self.status_code,
            detail={
                "message": self.message,
                "code": self.code,
                "details": self.details,
            },
        )


class ValidationException(DomainException):
    """Raised when input is malformed or semantically invalid."""

    status_code = status.HTTP_400_BAD_REQUEST


class NotFoundException(DomainException):
    """Raised when a requested resource is not found."""

    status_code = status.HTTP_404_NOT_FOUND


class UnauthorizedException(DomainException):
    """Raised when the caller is not authenticated."""

    status_code = status.HTTP_401_UNAUTHORIZED

    def to_http_exception(self) -> HTTPException:
        exc = super().to_http_exception()
        exc.headers = {"WWW-Authenticate": "Bearer"}
        return exc


class ForbiddenException(DomainException):
    """Raised when the caller lacks permission for an action."""

    status_code = status.HTTP_403_FORBIDDEN


class ConflictException(DomainException):
    """Raised when there's a conflict with existing data."""

    status_code = status.HTTP_409_CONFLICT


class InvalidStateException(DomainException):
    """Raised when an operation is not valid for the session's current status."""

    status_code = status.HTTP_400_BAD_REQUEST


class ServiceException(DomainException):
    """Raised when a service operation fails."""

    def to_http_exception(self) -> HTTPException:
        return HTTPException(
            status_code=self.status_code,
            detail={
                "message": self.message or "An error occurred processing your request",
                "code": self.code,
                "details": self.details if self.details else {},
            },
        )


# Specific business exceptions


class SessionConflictException(ConflictException):
    """Raised when a booking overlaps an active session of the same teacher."""

    def __init__(
        self,
        message: Optional[str] = None,
        *,
        code: str = "OVERLAPPING_SESSION",
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(
            message=message or "This time overlaps an existing session for this teacher",
            code=code,
            details=details or {},
        )


class ReviewAlreadySubmittedException(ConflictException):
    """Raised when a participant reviews the same session twice."""

    def __init__(self, session_id: str, participant: str):
        super().__init__(
            message="You have already reviewed this session",
            code="ALREADY_REVIEWED",
            details={"session_id": session_id, "participant": participant},
        )


class InvalidTransitionException(DomainException):
    """Raised when a requested status is not reachable from the current one."""

    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, current_status: str, requested_status: str, allowed: Iterable[str]):
        allowed_list = sorted(allowed)
        super().__init__(
            message=f"Cannot change session status from {current_status} to {requested_status}",
            code="INVALID_TRANSITION",
            details={
                "current_status": current_status,
                "requested_status": requested_status,
                "allowed": allowed_list,
            },
        )
        self.current_status = current_status
        self.requested_status = requested_status
        self.allowed = allowed_list


class RepositoryException(Exception):
    """
    Exception raised for repository layer errors.

    This exception is used when data access operations fail,
    such as database connection issues, query failures, or
    constraint violations.
    """
