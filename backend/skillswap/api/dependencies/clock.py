# backend/skillswap/api/dependencies/clock.py
"""
Clock dependency.
"""

from ...core.clock import Clock, utc_now


def get_clock() -> Clock:
    """Time source for request handling; overridden in tests to pin "now"."""
    return utc_now
