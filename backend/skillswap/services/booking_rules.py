# backend/skillswap/services/booking_rules.py
"""
Pure booking rules.

These functions decide whether a proposed booking window is acceptable
without touching the database. BookingService runs them first, then the
teacher lookup, qualification and overlap checks that need the store.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Iterable, List

from ..core.clock import ensure_utc
from ..core.exceptions import ValidationException

_REQUIRED_FIELDS = ("skill", "start_time", "end_time", "teacher_id")


@dataclass(frozen=True)
class BookingWindow:
    """A validated booking request with parsed UTC timestamps."""

    skill: str
    start_time: datetime
    end_time: datetime
    teacher_id: str
    student_id: str

    @property
    def duration(self) -> timedelta:
        return self.end_time - self.start_time


def _is_blank(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    return False


def parse_timestamp(value: Any) -> datetime:
    """
    Parse an ISO-8601 timestamp into aware UTC.

    Accepts datetimes directly and a trailing ``Z``; naive values are UTC.
    Raises ValueError for anything else, including offsets that push the
    instant outside the representable range.
    """
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, str):
        text = value.strip()
        if text.endswith(("Z", "z")):
            text = text[:-1] + "+00:00"
        parsed = datetime.fromisoformat(text)
    else:
        raise ValueError(f"Unsupported timestamp type: {type(value).__name__}")
    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=timezone.utc)
    try:
        return parsed.astimezone(timezone.utc)
    except OverflowError as exc:
        raise ValueError(f"Timestamp out of range: {value}") from exc


def validate_booking_window(
    *,
    skill: Any,
    start_time: Any,
    end_time: Any,
    teacher_id: Any,
    student_id: str,
    now: datetime,
    max_duration: timedelta = timedelta(hours=4),
) -> BookingWindow:
    """
    Run the database-free booking checks in order and return the parsed window.

    Raises ValidationException with a distinct ``code`` for the first failure:
    MISSING_FIELD, BAD_TIMESTAMP, START_IN_PAST, NON_POSITIVE_DURATION,
    DURATION_TOO_LONG or SELF_BOOKING.
    """
    supplied = {
        "skill": skill,
        "start_time": start_time,
        "end_time": end_time,
        "teacher_id": teacher_id,
    }
    missing = [name for name in _REQUIRED_FIELDS if _is_blank(supplied[name])]
    if missing:
        raise ValidationException(
            "Missing required fields",
            code="MISSING_FIELD",
            details={"missing": missing},
        )

    try:
        start = parse_timestamp(start_time)
        end = parse_timestamp(end_time)
    except ValueError as exc:
        raise ValidationException(
            "Invalid date format",
            code="BAD_TIMESTAMP",
            details={"start_time": str(start_time), "end_time": str(end_time), "reason": str(exc)},
        ) from exc

    now_utc = ensure_utc(now)
    if start <= now_utc:
        raise ValidationException(
            "Start time must be in the future",
            code="START_IN_PAST",
            details={"start_time": start.isoformat(), "now": now_utc.isoformat()},
        )

    if end <= start:
        raise ValidationException(
            "End time must be after start time",
            code="NON_POSITIVE_DURATION",
            details={"start_time": start.isoformat(), "end_time": end.isoformat()},
        )

    if end - start > max_duration:
        raise ValidationException(
            f"Session duration cannot exceed {_format_hours(max_duration)} hours",
            code="DURATION_TOO_LONG",
            details={
                "duration_minutes": int((end - start).total_seconds() // 60),
                "max_minutes": int(max_duration.total_seconds() // 60),
            },
        )

    teacher_key = str(teacher_id).strip()
    if teacher_key == student_id:
        raise ValidationException(
            "Cannot book a session with yourself",
            code="SELF_BOOKING",
        )

    return BookingWindow(
        skill=str(skill).strip(),
        start_time=start,
        end_time=end,
        teacher_id=teacher_key,
        student_id=student_id,
    )


def _format_hours(value: timedelta) -> str:
    hours = value.total_seconds() / 3600
    return str(int(hours)) if hours.is_integer() else f"{hours:g}"


def describe_conflicts(conflicts: Iterable[Any]) -> List[dict]:
    return [
        {
            "session_id": item.id,
            "start_time": ensure_utc(item.start_time).isoformat(),
            "end_time": ensure_utc(item.end_time).isoformat(),
            "status": getattr(item.status, "value", item.status),
        }
        for item in conflicts
    ]

