from __future__ import annotations

from datetime import timedelta
import threading
import time
from typing import List

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from skillswap.core.enums import ACTIVE_SESSION_STATUSES
from skillswap.core.exceptions import SessionConflictException
from skillswap.database import Base, configure_sqlite_locking
from skillswap.models import SkillSession
from skillswap.repositories import SkillSessionRepository, UserRepository
from skillswap.services.booking_service import BookingService
from tests._utils.helpers import NOW, FrozenClock

START = NOW + timedelta(days=3)


@pytest.fixture
def file_session_factory(tmp_path):
    engine = create_engine(
        f"sqlite:///{tmp_path / 'bookings.db'}",
        future=True,
        connect_args={"check_same_thread": False, "timeout": 15},
    )
    configure_sqlite_locking(engine)
    Base.metadata.create_all(engine)
    yield sessionmaker(bind=engine, autoflush=False, expire_on_commit=False, future=True)
    Base.metadata.drop_all(engine)
    engine.dispose()


def test_concurrent_overlapping_bookings_admit_only_one(file_session_factory, monkeypatch) -> None:
    setup = file_session_factory()
    users = UserRepository(setup)
    teacher = users.create_user(name="Ada", email="ada@example.com", skills=[("Python", "Expert")])
    students = [
        users.create_user(name="Sam", email="sam@example.com"),
        users.create_user(name="Lee", email="lee@example.com"),
    ]
    setup.commit()
    teacher_id, student_ids = teacher.id, [s.id for s in students]
    setup.close()

    # Hold each booking open between the overlap read and the insert
    find_overlapping = SkillSessionRepository.find_overlapping

    def slow_find_overlapping(self, *args, **kwargs):
        found = find_overlapping(self, *args, **kwargs)
        time.sleep(0.3)
        return found

    monkeypatch.setattr(SkillSessionRepository, "find_overlapping", slow_find_overlapping)

    requests = [
        (student_ids[0], START, START + timedelta(hours=1)),
        (student_ids[1], START + timedelta(minutes=30), START + timedelta(minutes=90)),
    ]
    start_together = threading.Barrier(len(requests))
    booked: List[str] = []
    conflicts: List[str] = []
    errors: List[BaseException] = []

    def book(student_id: str, start, end) -> None:
        db = file_session_factory()
        try:
            start_together.wait()
            session = BookingService(db, FrozenClock(NOW)).create_session(
                student_id,
                {
                    "skill": "Python",
                    "start_time": start.isoformat(),
                    "end_time": end.isoformat(),
                    "teacher_id": teacher_id,
                },
            )
            booked.append(session.id)
        except SessionConflictException as exc:
            conflicts.append(exc.code)
        except BaseException as exc:  # surfaced by the assertions below
            errors.append(exc)
        finally:
            db.close()

    threads = [threading.Thread(target=book, args=request) for request in requests]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join(timeout=30)

    assert errors == []
    assert len(booked) == 1
    assert conflicts == ["OVERLAPPING_SESSION"]

    check = file_session_factory()
    try:
        active = (
            check.query(SkillSession)
            .filter(SkillSession.status.in_([s.value for s in ACTIVE_SESSION_STATUSES]))
            .count()
        )
    finally:
        check.close()
    assert active == 1
