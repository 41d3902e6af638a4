"""Request bodies for the HTTP API."""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from ..models.history import PrimaryGoal


class GoalsRequest(BaseModel):
    """Weekly goals update."""
    primary_goal: PrimaryGoal = PrimaryGoal.GET_TONED
    target_workouts_per_week: int = Field(default=3, ge=1, le=7)
    target_minutes_per_week: int = Field(default=90, ge=30, le=500)


class EquipmentRequest(BaseModel):
    equipment: List[str] = Field(default_factory=list)


class GeneratePlanRequest(BaseModel):
    """Explicit plan parameters; values are range-checked by the plan request."""
    energy: str
    time_minutes: int
    focus_areas: List[str]
    goal_text: str = ""
    equipment: Optional[List[str]] = None


class StartSessionRequest(BaseModel):
    """A plan, as returned by the plan endpoints, to play."""
    plan: Dict[str, Any]


class FeedbackRequest(BaseModel):
    """Post-workout feedback."""
    rating: int
    post_energy: str
    rpe: int
    notes: Optional[str] = Field(default=None, max_length=2000)
    session_id: Optional[str] = None
