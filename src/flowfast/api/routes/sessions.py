"""Workout session routes."""

from fastapi import APIRouter, Depends

from ..deps import get_coach_service, get_user_id
from ..schemas import StartSessionRequest
from ...exceptions import ValidationError
from ...models.workouts import WorkoutPlan
from ...services.coach import CoachService


router = APIRouter()


@router.post("")
async def start_session(
    body: StartSessionRequest,
    user_id: str = Depends(get_user_id),
    coach_service: CoachService = Depends(get_coach_service),
):
    """Build a session from a plan and make it the user's current session."""
    try:
        plan = WorkoutPlan.from_dict(body.plan)
    except (KeyError, TypeError, ValueError) as e:
        raise ValidationError(f"Invalid workout plan: {e}", field="plan")
    return coach_service.start_workout(user_id, plan).to_dict()


@router.get("/{session_id}/steps/{index}")
async def get_step(
    session_id: str,
    index: int,
    user_id: str = Depends(get_user_id),
    coach_service: CoachService = Depends(get_coach_service),
):
    """One step of the current session, or a redirect for the player."""
    return coach_service.load_step(user_id, session_id, index).to_dict()


@router.delete("/current")
async def abandon_session(
    user_id: str = Depends(get_user_id),
    coach_service: CoachService = Depends(get_coach_service),
):
    coach_service.abandon_session(user_id)
    return {"status": "abandoned"}
