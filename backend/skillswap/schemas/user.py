# backend/skillswap/schemas/user.py
"""
User summaries embedded in session and review payloads.
"""

from .base import StandardizedModel


class ParticipantSummary(StandardizedModel):
    """Denormalized participant shown on session payloads."""

    id: str
    name: str
    email: str

