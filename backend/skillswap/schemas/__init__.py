# backend/skillswap/schemas/__init__.py
"""Pydantic request/response models for the SkillSwap API."""
