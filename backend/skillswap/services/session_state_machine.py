# backend/skillswap/services/session_state_machine.py
"""
Session status state machine.

Two layers decide whether a status change may happen:

1. ``ALLOWED_TRANSITIONS`` - which statuses are reachable at all.
2. ``permitted_transitions`` - which of those the caller may perform now,
   given their side of the session and the time left before it starts.

Both are pure; SessionLifecycleService applies them and persists the result.
"""

from datetime import datetime, timedelta
from typing import Any, FrozenSet, Mapping

from ..core.clock import ensure_utc
from ..core.enums import ParticipantRole, SessionStatus

DEFAULT_CANCELLATION_NOTICE = timedelta(hours=24)

ALLOWED_TRANSITIONS: Mapping[SessionStatus, FrozenSet[SessionStatus]] = {
    SessionStatus.PENDING: frozenset({SessionStatus.CONFIRMED, SessionStatus.CANCELLED}),
    SessionStatus.CONFIRMED: frozenset({SessionStatus.COMPLETED, SessionStatus.CANCELLED}),
    SessionStatus.COMPLETED: frozenset(),
    SessionStatus.CANCELLED: frozenset(),
}


def allowed_transitions(current: SessionStatus) -> FrozenSet[SessionStatus]:
    return ALLOWED_TRANSITIONS.get(SessionStatus(current), frozenset())


def permitted_transitions(
    session: Any,
    participant_role: ParticipantRole,
    now: datetime,
    notice: timedelta = DEFAULT_CANCELLATION_NOTICE,
) -> FrozenSet[SessionStatus]:
    """
    Statuses ``participant_role`` may move ``session`` to at ``now``.

    The teacher may perform every allowed transition. The student may only
    cancel, and only while more than ``notice`` remains before the start.
    """
    reachable = allowed_transitions(SessionStatus(session.status))
    if participant_role is ParticipantRole.TEACHER:
        return reachable

    if SessionStatus.CANCELLED not in reachable:
        return frozenset()
    time_left = ensure_utc(session.start_time) - ensure_utc(now)
    if time_left > notice:
        return frozenset({SessionStatus.CANCELLED})
    return frozenset()
