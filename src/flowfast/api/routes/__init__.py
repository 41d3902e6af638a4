"""API route modules."""

from . import coach, plans, sessions, feedback, profile

__all__ = ["coach", "plans", "sessions", "feedback", "profile"]
