from __future__ import annotations

from datetime import timedelta

from skillswap.core.enums import SessionStatus
from tests._utils.helpers import NOW, admin_headers, auth_headers


def test_admin_lists_all_sessions(client, teacher, second_teacher, student, make_session) -> None:
    first = make_session(student, teacher, created_at=NOW - timedelta(hours=2))
    second = make_session(
        student,
        second_teacher,
        start=NOW + timedelta(days=5),
        status=SessionStatus.CANCELLED,
        created_at=NOW - timedelta(hours=1),
    )

    response = client.get("/api/v1/admin/sessions", headers=admin_headers())

    assert response.status_code == 200
    body = response.json()
    assert [s["id"] for s in body["sessions"]] == [second.id, first.id]
    assert body["pagination"]["total"] == 2


def test_status_filter(client, teacher, student, make_session) -> None:
    make_session(student, teacher)
    cancelled = make_session(
        student, teacher, start=NOW + timedelta(days=6), status=SessionStatus.CANCELLED
    )

    response = client.get(
        "/api/v1/admin/sessions", params={"status": "cancelled"}, headers=admin_headers()
    )

    assert [s["id"] for s in response.json()["sessions"]] == [cancelled.id]


def test_unknown_status_is_400(client) -> None:
    response = client.get(
        "/api/v1/admin/sessions", params={"status": "archived"}, headers=admin_headers()
    )
    assert response.status_code == 400
    assert response.json()["code"] == "INVALID_STATUS"


def test_participants_are_forbidden(client, teacher) -> None:
    response = client.get("/api/v1/admin/sessions", headers=auth_headers(teacher))
    assert response.status_code == 403
    assert response.json()["code"] == "ADMIN_REQUIRED"
