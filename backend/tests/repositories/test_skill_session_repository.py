from __future__ import annotations

from datetime import timedelta

from skillswap.core.enums import ParticipantRole, SessionStatus
from skillswap.repositories import SkillSessionRepository
from tests._utils.helpers import NOW

START = NOW + timedelta(days=3)


class TestFindOverlapping:
    def test_finds_intersecting_active_sessions(self, db, teacher, student, make_session) -> None:
        existing = make_session(student, teacher, start=START, hours=2)
        found = SkillSessionRepository(db).find_overlapping(
            teacher.id, START + timedelta(hours=1), START + timedelta(hours=3)
        )
        assert [s.id for s in found] == [existing.id]

    def test_touching_windows_do_not_overlap(self, db, teacher, student, make_session) -> None:
        make_session(student, teacher, start=START, hours=1)
        repo = SkillSessionRepository(db)
        assert repo.find_overlapping(teacher.id, START + timedelta(hours=1), START + timedelta(hours=2)) == []
        assert repo.find_overlapping(teacher.id, START - timedelta(hours=1), START) == []

    def test_terminal_sessions_do_not_block(self, db, teacher, student, make_session) -> None:
        make_session(student, teacher, start=START, status=SessionStatus.CANCELLED)
        make_session(student, teacher, start=START, status=SessionStatus.COMPLETED)
        assert SkillSessionRepository(db).find_overlapping(
            teacher.id, START, START + timedelta(hours=1)
        ) == []

    def test_other_teachers_do_not_block(
        self, db, teacher, second_teacher, student, make_session
    ) -> None:
        make_session(student, second_teacher, start=START)
        assert SkillSessionRepository(db).find_overlapping(
            teacher.id, START, START + timedelta(hours=1)
        ) == []


class TestListings:
    def test_participant_listing_covers_both_sides(
        self, db, teacher, second_teacher, student, make_session
    ) -> None:
        as_student = make_session(student, teacher, start=START)
        as_teacher = make_session(student, second_teacher, start=START + timedelta(days=1))
        repo = SkillSessionRepository(db)

        assert [s.id for s in repo.list_for_participant(student.id)] == [as_teacher.id, as_student.id]
        assert [s.id for s in repo.list_for_teacher(teacher.id)] == [as_student.id]
        assert repo.list_for_teacher(student.id) == []

    def test_list_all_filters_and_pages(self, db, teacher, student, make_session) -> None:
        sessions = [
            make_session(
                student,
                teacher,
                start=START + timedelta(days=i),
                created_at=NOW - timedelta(hours=5 - i),
                status=SessionStatus.CONFIRMED if i % 2 else SessionStatus.PENDING,
            )
            for i in range(5)
        ]
        repo = SkillSessionRepository(db)

        page, total = repo.list_all(skip=0, limit=2)
        assert total == 5
        assert [s.id for s in page] == [sessions[4].id, sessions[3].id]

        confirmed, confirmed_total = repo.list_all(status=SessionStatus.CONFIRMED, skip=0, limit=10)
        assert confirmed_total == 2
        assert {s.id for s in confirmed} == {sessions[1].id, sessions[3].id}

        beyond, beyond_total = repo.list_all(skip=10, limit=10)
        assert beyond == []
        assert beyond_total == 5


class TestCompareAndSet:
    def test_status_changes_when_expected_matches(self, db, teacher, student, make_session) -> None:
        session = make_session(student, teacher)
        repo = SkillSessionRepository(db)

        assert repo.compare_and_set_status(
            session.id,
            expected=SessionStatus.PENDING,
            new_status=SessionStatus.CONFIRMED,
            updated_at=NOW,
        )
        db.commit()
        assert repo.reload(session).status == SessionStatus.CONFIRMED.value

    def test_stale_expected_status_is_rejected(self, db, teacher, student, make_session) -> None:
        session = make_session(student, teacher, status=SessionStatus.CANCELLED)
        assert not SkillSessionRepository(db).compare_and_set_status(
            session.id,
            expected=SessionStatus.PENDING,
            new_status=SessionStatus.CONFIRMED,
            updated_at=NOW,
        )


class TestReviewSlots:
    def test_slot_is_write_once(self, db, teacher, student, make_session) -> None:
        session = make_session(student, teacher, status=SessionStatus.COMPLETED)
        repo = SkillSessionRepository(db)

        assert repo.claim_review_slot(
            session.id, role=ParticipantRole.STUDENT, rating=5, comment="Great", created_at=NOW
        )
        assert not repo.claim_review_slot(
            session.id, role=ParticipantRole.STUDENT, rating=1, comment="Changed", created_at=NOW
        )
        db.commit()

        review = repo.reload(session).student_review
        assert review.rating == 5
        assert review.comment == "Great"
        assert session.teacher_review is None

    def test_slot_requires_completed_session(self, db, teacher, student, make_session) -> None:
        session = make_session(student, teacher, status=SessionStatus.CONFIRMED)
        assert not SkillSessionRepository(db).claim_review_slot(
            session.id, role=ParticipantRole.TEACHER, rating=4, comment="Ok", created_at=NOW
        )

    def test_settled_ratings_received(self, db, teacher, student, make_session) -> None:
        settled = dict(
            status=SessionStatus.COMPLETED,
            student_review_rating=5,
            student_review_comment="Great teacher",
            student_review_created_at=NOW,
            teacher_review_rating=3,
            teacher_review_comment="Came unprepared",
            teacher_review_created_at=NOW,
        )
        make_session(student, teacher, start=START, **settled)
        # Only the student has reviewed; not settled yet
        make_session(
            student,
            teacher,
            start=START + timedelta(days=1),
            status=SessionStatus.COMPLETED,
            student_review_rating=1,
            student_review_comment="Late",
            student_review_created_at=NOW,
        )
        repo = SkillSessionRepository(db)

        assert repo.settled_ratings_received(teacher.id) == [5]
        assert repo.settled_ratings_received(student.id) == [3]

    def test_received_reviews_newest_first(self, db, teacher, student, other_student, make_session) -> None:
        older = make_session(
            student,
            teacher,
            start=START,
            status=SessionStatus.COMPLETED,
            student_review_rating=4,
            student_review_comment="Good",
            student_review_created_at=NOW,
        )
        newer = make_session(
            other_student,
            teacher,
            start=START + timedelta(days=1),
            status=SessionStatus.COMPLETED,
            student_review_rating=2,
            student_review_comment="Meh",
            student_review_created_at=NOW + timedelta(hours=1),
        )
        # A review the teacher wrote is not about the teacher
        make_session(
            student,
            teacher,
            start=START + timedelta(days=2),
            status=SessionStatus.COMPLETED,
            teacher_review_rating=5,
            teacher_review_comment="Keen student",
            teacher_review_created_at=NOW + timedelta(hours=2),
        )
        repo = SkillSessionRepository(db)

        sessions, total = repo.list_received_reviews(teacher.id, skip=0, limit=10)
        assert total == 2
        assert [s.id for s in sessions] == [newer.id, older.id]

        student_sessions, student_total = repo.list_received_reviews(student.id, skip=0, limit=10)
        assert student_total == 1
        assert student_sessions[0].teacher_review.comment == "Keen student"
