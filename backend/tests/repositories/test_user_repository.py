from __future__ import annotations

import pytest

from skillswap.core.enums import UserRole
from skillswap.core.exceptions import RepositoryException
from skillswap.repositories import UserRepository


class TestUserRepository:
    def test_create_user_derives_teacher_role(self, db) -> None:
        repo = UserRepository(db)
        user = repo.create_user(
            name=" Ada ", email="ADA@Example.com", skills=[("Python", "Expert")]
        )
        db.commit()

        assert user.role == UserRole.TEACHER.value
        assert user.name == "Ada"
        assert user.email == "ada@example.com"
        assert user.rating == 0.0
        assert user.review_count == 0

    def test_create_user_without_teaching_skills_is_student(self, db) -> None:
        user = UserRepository(db).create_user(
            name="Sam", email="sam@example.com", skills=[("Python", "Beginner")]
        )
        assert user.role == UserRole.STUDENT.value

    def test_explicit_role_wins(self, db) -> None:
        user = UserRepository(db).create_user(
            name="Sam", email="sam@example.com", role=UserRole.TEACHER
        )
        assert user.role == UserRole.TEACHER.value

    def test_duplicate_email_is_rejected(self, db, teacher) -> None:
        with pytest.raises(RepositoryException):
            UserRepository(db).create_user(name="Other", email="ada@example.com")
        db.rollback()

    def test_get_by_email_is_case_insensitive(self, db, teacher) -> None:
        assert UserRepository(db).get_by_email(" ADA@example.com ").id == teacher.id
        assert UserRepository(db).get_by_email("") is None

    def test_lock_many_skips_unknown_and_sorts(self, db, teacher, student) -> None:
        locked = UserRepository(db).lock_many([student.id, "missing", teacher.id, student.id])
        assert [user.id for user in locked] == sorted([teacher.id, student.id])

    def test_update_rating(self, db, teacher) -> None:
        repo = UserRepository(db)
        repo.update_rating(teacher, 4.5, 2)
        db.commit()
        reloaded = repo.get_by_id(teacher.id)
        assert reloaded.rating == 4.5
        assert reloaded.review_count == 2
