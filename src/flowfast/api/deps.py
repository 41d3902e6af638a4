"""Dependency injection for API routes."""

from functools import lru_cache

from fastapi import Header

from ..config import get_settings
from ..exceptions import ValidationError
from ..services.coach import CoachService, create_coach_service


@lru_cache
def get_coach_service() -> CoachService:
    """Get the coach service instance."""
    return create_coach_service(get_settings())


def get_user_id(x_user_id: str = Header(default="")) -> str:
    """The calling user, from the X-User-Id header."""
    user_id = x_user_id.strip()
    if not user_id:
        raise ValidationError("X-User-Id header is required", field="X-User-Id")
    return user_id
