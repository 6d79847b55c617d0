from __future__ import annotations

from skillswap.core.enums import UserRole
from skillswap.models import User, UserSkill
from skillswap.models.user import role_for_skills


def _user(role: UserRole, *skills: tuple) -> User:
    user = User(name="Test", email="test@example.com", role=role.value)
    for name, level in skills:
        user.skills.append(UserSkill(name=name, level=level))
    return user


def test_role_for_skills() -> None:
    assert role_for_skills([UserSkill(name="Go", level="Beginner")]) is UserRole.STUDENT
    assert role_for_skills([UserSkill(name="Go", level="Expert")]) is UserRole.TEACHER
    assert role_for_skills([]) is UserRole.STUDENT


def test_can_teach_is_case_insensitive() -> None:
    user = _user(UserRole.TEACHER, ("Python", "Advanced"))
    assert user.can_teach("python")
    assert user.can_teach("  PYTHON ")


def test_cannot_teach_below_advanced() -> None:
    user = _user(UserRole.TEACHER, ("Python", "Expert"), ("Guitar", "Intermediate"))
    assert not user.can_teach("Guitar")
    assert not user.can_teach("Chess")


def test_students_cannot_teach() -> None:
    user = _user(UserRole.STUDENT, ("Python", "Expert"))
    assert not user.can_teach("Python")
    assert role_for_skills(user.skills) is UserRole.TEACHER


def test_skills_keep_their_order() -> None:
    user = _user(UserRole.TEACHER, ("Python", "Expert"), ("Guitar", "Beginner"))
    assert [skill.position for skill in user.skills] == [0, 1]
