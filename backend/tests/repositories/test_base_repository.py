from __future__ import annotations

import pytest

from skillswap.core.exceptions import RepositoryException
from skillswap.models import User
from skillswap.repositories import BaseRepository


class TestBaseRepository:
    def test_get_by_id_and_find(self, db, teacher, student) -> None:
        repo = BaseRepository(db, User)
        assert repo.get_by_id(teacher.id).email == "ada@example.com"
        assert repo.get_by_id("01NOSUCHUSER00000000000000") is None
        assert repo.find_one_by(email="sam@example.com").id == student.id
        assert repo.find_one_by(email="nobody@example.com") is None

    def test_exists(self, db, teacher) -> None:
        repo = BaseRepository(db, User)
        assert repo.exists(email="ada@example.com")
        assert not repo.exists(email="nobody@example.com")

    def test_create_flushes_without_commit(self, db) -> None:
        repo = BaseRepository(db, User)
        user = repo.create(name="New", email="new@example.com", role="student")
        assert user.id
        db.rollback()
        assert not repo.exists(email="new@example.com")

    def test_create_reports_integrity_errors(self, db, teacher) -> None:
        repo = BaseRepository(db, User)
        with pytest.raises(RepositoryException):
            repo.create(name="Dup", email="ada@example.com", role="teacher")
