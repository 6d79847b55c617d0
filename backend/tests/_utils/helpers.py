"""Shared test helpers: a frozen clock and bearer-token headers."""

from datetime import datetime, timedelta, timezone
from typing import Dict

from skillswap.auth import create_access_token

# Monday noon UTC, far enough in the future that no real clock interferes
NOW = datetime(2030, 1, 7, 12, 0, tzinfo=timezone.utc)

ADMIN_ID = "01ADMIN0000000000000000000"


class FrozenClock:
    """Callable clock whose time only moves when a test says so."""

    def __init__(self, now: datetime = NOW):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs: float) -> datetime:
        self.now = self.now + timedelta(**kwargs)
        return self.now


def token_for(user_id: str, role: str) -> str:
    return create_access_token({"sub": user_id, "role": role})


def auth_headers(user) -> Dict[str, str]:
    return {"Authorization": f"Bearer {token_for(user.id, user.role)}"}


def admin_headers(admin_id: str = ADMIN_ID) -> Dict[str, str]:
    return {"Authorization": f"Bearer {token_for(admin_id, 'admin')}"}
