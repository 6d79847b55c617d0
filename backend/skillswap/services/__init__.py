# backend/skillswap/services/__init__.py
"""Service layer: booking, session lifecycle and review settlement."""
