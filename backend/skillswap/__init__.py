"""SkillSwap backend: peer-to-peer skill exchange sessions."""

__version__ = "0.1.0"
