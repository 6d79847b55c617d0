# backend/skillswap/services/ratings_math.py
"""Rating aggregation helpers."""

from typing import Iterable, Tuple


def mean_rating(ratings: Iterable[int]) -> Tuple[float, int]:
    """Plain mean and count of ``ratings``; ``(0.0, 0)`` when empty."""
    values = list(ratings)
    if not values:
        return 0.0, 0
    return sum(values) / len(values), len(values)


def incremental_mean(current: float, count: int, new_rating: int) -> float:
    """
    Fold one rating into an existing mean.

    Matches ``mean_rating`` over the same sequence up to float rounding.
    """
    if count < 0:
        raise ValueError("count must be non-negative")
    return (current * count + new_rating) / (count + 1)
