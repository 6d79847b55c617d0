from __future__ import annotations

import pytest

from skillswap.core.exceptions import (
    ConflictException,
    ForbiddenException,
    InvalidStateException,
    InvalidTransitionException,
    NotFoundException,
    ReviewAlreadySubmittedException,
    SessionConflictException,
    UnauthorizedException,
    ValidationException,
)


@pytest.mark.parametrize(
    ("exc_class", "status_code"),
    [
        (ValidationException, 400),
        (InvalidStateException, 400),
        (UnauthorizedException, 401),
        (ForbiddenException, 403),
        (NotFoundException, 404),
        (ConflictException, 409),
    ],
)
def test_status_codes(exc_class: type, status_code: int) -> None:
    http_exc = exc_class("boom", code="SOME_CODE").to_http_exception()
    assert http_exc.status_code == status_code
    assert http_exc.detail == {"message": "boom", "code": "SOME_CODE", "details": {}}


def test_code_defaults_to_class_name() -> None:
    assert NotFoundException("missing").code == "NotFoundException"


def test_unauthorized_sets_bearer_challenge() -> None:
    http_exc = UnauthorizedException("nope").to_http_exception()
    assert http_exc.headers == {"WWW-Authenticate": "Bearer"}


def test_session_conflict_defaults() -> None:
    exc = SessionConflictException(details={"conflicts": []})
    assert exc.status_code == 409
    assert exc.code == "OVERLAPPING_SESSION"
    assert "overlaps" in exc.message


def test_review_already_submitted() -> None:
    exc = ReviewAlreadySubmittedException("s1", "student")
    assert exc.status_code == 409
    assert exc.code == "ALREADY_REVIEWED"
    assert exc.details == {"session_id": "s1", "participant": "student"}


def test_invalid_transition_lists_allowed_sorted() -> None:
    exc = InvalidTransitionException("pending", "completed", ["confirmed", "cancelled"])
    assert exc.status_code == 400
    assert exc.code == "INVALID_TRANSITION"
    assert exc.details["allowed"] == ["cancelled", "confirmed"]
    assert "pending" in exc.message and "completed" in exc.message
