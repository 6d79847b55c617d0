from __future__ import annotations

from datetime import timedelta

from skillswap.core.enums import SessionStatus
from tests._utils.helpers import NOW, admin_headers, auth_headers


def _reviewed(make_session, student, teacher, *, start, rating, comment, at):
    return make_session(
        student,
        teacher,
        start=start,
        status=SessionStatus.COMPLETED,
        student_review_rating=rating,
        student_review_comment=comment,
        student_review_created_at=at,
    )


def test_lists_reviews_about_user(client, teacher, student, other_student, make_session) -> None:
    older = _reviewed(
        make_session, student, teacher, start=NOW - timedelta(days=3), rating=4, comment="good", at=NOW
    )
    newer = _reviewed(
        make_session,
        other_student,
        teacher,
        start=NOW - timedelta(days=2),
        rating=2,
        comment="meh",
        at=NOW + timedelta(hours=1),
    )

    response = client.get(f"/api/v1/reviews/user/{teacher.id}", headers=auth_headers(student))

    assert response.status_code == 200
    body = response.json()
    assert [r["session_id"] for r in body["reviews"]] == [newer.id, older.id]
    assert body["reviews"][0]["reviewer"]["id"] == other_student.id
    assert body["reviews"][0]["rating"] == 2
    assert body["pagination"] == {"total": 2, "page": 1, "limit": 10, "pages": 1}


def test_paging(client, teacher, student, make_session) -> None:
    for i in range(3):
        _reviewed(
            make_session,
            student,
            teacher,
            start=NOW - timedelta(days=5 - i),
            rating=5,
            comment=f"review {i}",
            at=NOW + timedelta(minutes=i),
        )

    response = client.get(
        f"/api/v1/reviews/user/{teacher.id}", params={"page": 2, "limit": 2}, headers=admin_headers()
    )

    body = response.json()
    assert [r["comment"] for r in body["reviews"]] == ["review 0"]
    assert body["pagination"] == {"total": 3, "page": 2, "limit": 2, "pages": 2}


def test_unknown_user_is_404(client, student) -> None:
    response = client.get("/api/v1/reviews/user/01NOSUCHUSER00000000000000", headers=auth_headers(student))
    assert response.status_code == 404
    assert response.json()["code"] == "USER_NOT_FOUND"


def test_requires_token(client, teacher) -> None:
    assert client.get(f"/api/v1/reviews/user/{teacher.id}").status_code == 401
