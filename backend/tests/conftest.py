# backend/tests/conftest.py
"""
Pytest configuration for the SkillSwap backend.

Each test gets its own in-memory SQLite database, a frozen clock and user
factories. Route tests use FastAPI's TestClient with the database and clock
dependencies overridden.
"""

import os

# Set testing mode BEFORE any skillswap imports
os.environ["ENVIRONMENT"] = "testing"
os.environ["REDIS_URL"] = ""

from datetime import datetime, timedelta
from typing import Callable, Iterator, Optional, Sequence, Tuple

from fastapi.testclient import TestClient
import pytest
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from skillswap.api.dependencies.clock import get_clock
from skillswap.api.dependencies.database import get_db
from skillswap.core.enums import SessionStatus, UserRole
from skillswap.database import Base
from skillswap.main import app
import skillswap.models  # noqa: F401
from skillswap.models.skill_session import SkillSession
from skillswap.models.user import User
from skillswap.repositories.user_repository import UserRepository
from tests._utils.helpers import NOW, FrozenClock


@pytest.fixture
def engine() -> Iterator[Engine]:
    engine = create_engine(
        "sqlite+pysqlite:///:memory:",
        future=True,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    Base.metadata.create_all(engine)
    yield engine
    Base.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture
def db(engine: Engine) -> Iterator[Session]:
    """A session bound to this test's private database."""
    TestSessionLocal = sessionmaker(
        bind=engine, autocommit=False, autoflush=False, expire_on_commit=False, future=True
    )
    session = TestSessionLocal()
    try:
        yield session
    finally:
        session.rollback()
        session.close()


@pytest.fixture
def clock() -> FrozenClock:
    return FrozenClock(NOW)


@pytest.fixture
def make_user(db: Session) -> Callable[..., User]:
    counter = {"n": 0}

    def _make(
        name: Optional[str] = None,
        *,
        skills: Sequence[Tuple[str, str]] = (),
        role: Optional[UserRole] = None,
        email: Optional[str] = None,
    ) -> User:
        counter["n"] += 1
        user = UserRepository(db).create_user(
            name=name or f"User {counter['n']}",
            email=email or f"user{counter['n']}@example.com",
            skills=skills,
            role=role,
        )
        db.commit()
        return user

    return _make


@pytest.fixture
def teacher(make_user: Callable[..., User]) -> User:
    return make_user(
        "Ada Teacher",
        email="ada@example.com",
        skills=[("Python", "Expert"), ("Guitar", "Intermediate")],
    )


@pytest.fixture
def second_teacher(make_user: Callable[..., User]) -> User:
    return make_user("Grace Teacher", email="grace@example.com", skills=[("Python", "Advanced")])


@pytest.fixture
def student(make_user: Callable[..., User]) -> User:
    return make_user("Sam Student", email="sam@example.com", skills=[("Python", "Beginner")])


@pytest.fixture
def other_student(make_user: Callable[..., User]) -> User:
    return make_user("Lee Student", email="lee@example.com")


@pytest.fixture
def make_session(db: Session) -> Callable[..., SkillSession]:
    """Insert a session directly, bypassing booking checks, in any status."""

    def _make(
        student: User,
        teacher: User,
        *,
        start: Optional[datetime] = None,
        hours: float = 1,
        status: SessionStatus = SessionStatus.PENDING,
        skill: str = "Python",
        created_at: Optional[datetime] = None,
        **extra: object,
    ) -> SkillSession:
        start_time = start or NOW + timedelta(days=3)
        session = SkillSession(
            skill=skill,
            start_time=start_time,
            end_time=start_time + timedelta(hours=hours),
            student_id=student.id,
            teacher_id=teacher.id,
            status=status.value,
            created_at=created_at or NOW,
            updated_at=created_at or NOW,
            **extra,
        )
        db.add(session)
        db.commit()
        return session

    return _make


@pytest.fixture
def client(db: Session, clock: FrozenClock) -> Iterator[TestClient]:
    """Create a test client bound to the test database and frozen clock."""

    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_clock] = lambda: clock

    test_client = TestClient(app)
    yield test_client

    app.dependency_overrides.clear()
    test_client.close()
