"""
Redis-backed mutexes for booking and rating settlement.

The database row locks taken by the services are the primary guard; these
keyed mutexes additionally serialize work across API workers. When Redis is
not configured or unreachable the helpers fail open and report ``True``.
"""

from __future__ import annotations

from contextlib import ExitStack, contextmanager
import logging
import threading
import time
from typing import Iterable, Iterator, Optional

from redis import Redis

from skillswap.core.config import settings
from skillswap.monitoring.prometheus_metrics import prometheus_metrics

logger = logging.getLogger(__name__)

_SYNC_REDIS: Optional[Redis] = None
_SYNC_REDIS_LOCK = threading.Lock()


def teacher_booking_key(teacher_id: str) -> str:
    return f"teacher:{teacher_id}:booking"


def user_rating_key(user_id: str) -> str:
    return f"user:{user_id}:rating"


def _namespaced_key(key: str) -> str:
    return f"{settings.lock_namespace}:lock:{key}"


def _get_sync_redis() -> Optional[Redis]:
    global _SYNC_REDIS
    if not settings.redis_enabled:
        return None
    if _SYNC_REDIS is not None:
        return _SYNC_REDIS
    with _SYNC_REDIS_LOCK:
        if _SYNC_REDIS is not None:
            return _SYNC_REDIS
        try:
            client = Redis.from_url(
                settings.redis_url,
                encoding="utf-8",
                decode_responses=True,
            )
            client.ping()
        except Exception as exc:
            logger.warning("session_lock_redis_unavailable: %s", exc)
            return None
        _SYNC_REDIS = client
        return _SYNC_REDIS


def reset_redis_client() -> None:
    """Drop the cached client so the next call reconnects (used after config changes)."""
    global _SYNC_REDIS
    with _SYNC_REDIS_LOCK:
        _SYNC_REDIS = None


def acquire_lock_sync(key: str, ttl_s: Optional[int] = None) -> bool:
    client = _get_sync_redis()
    if client is None:
        prometheus_metrics.record_session_lock("acquire", "redis_unavailable")
        return True
    ttl = ttl_s or settings.lock_ttl_seconds
    try:
        acquired = bool(client.set(_namespaced_key(key), str(time.time()), nx=True, ex=ttl))
    except Exception as exc:
        prometheus_metrics.record_session_lock("acquire", "error")
        logger.warning(
            "session_lock_acquire_failed",
            extra={"lock_key": key, "error": str(exc), "error_type": type(exc).__name__},
        )
        return True
    prometheus_metrics.record_session_lock("acquire", "success" if acquired else "blocked")
    return acquired


def release_lock_sync(key: str) -> None:
    client = _get_sync_redis()
    if client is None:
        prometheus_metrics.record_session_lock("release", "redis_unavailable")
        return
    try:
        deleted = client.delete(_namespaced_key(key))
    except Exception as exc:
        prometheus_metrics.record_session_lock("release", "error")
        logger.warning(
            "session_lock_release_failed",
            extra={"lock_key": key, "error": str(exc), "error_type": type(exc).__name__},
        )
        return
    prometheus_metrics.record_session_lock("release", "success" if deleted else "not_found")


@contextmanager
def session_lock_sync(key: str, ttl_s: Optional[int] = None) -> Iterator[bool]:
    acquired = acquire_lock_sync(key, ttl_s=ttl_s)
    try:
        yield acquired
    finally:
        if acquired:
            release_lock_sync(key)


@contextmanager
def multi_lock_sync(keys: Iterable[str], ttl_s: Optional[int] = None) -> Iterator[bool]:
    """
    Acquire several keys in sorted order; yields False if any is held elsewhere.

    Keys already taken are released before yielding False.
    """
    with ExitStack() as stack:
        for key in sorted(set(keys)):
            acquired = stack.enter_context(session_lock_sync(key, ttl_s=ttl_s))
            if not acquired:
                stack.close()
                yield False
                return
        yield True
