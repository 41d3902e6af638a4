"""Plan generation routes."""

from fastapi import APIRouter, Depends

from ..deps import get_coach_service, get_user_id
from ..schemas import GeneratePlanRequest
from ...services.coach import CoachService


router = APIRouter()


@router.post("/auto")
async def generate_auto_plan(
    user_id: str = Depends(get_user_id),
    coach_service: CoachService = Depends(get_coach_service),
):
    """
    Auto Today plan.

    When the AI generator is unavailable the response carries a bundled
    plan with ``is_fallback`` set and a user-facing ``notice``.
    """
    result = await coach_service.generate_auto_plan(user_id)
    return result.to_dict()


@router.post("/generate")
async def generate_plan(
    body: GeneratePlanRequest,
    user_id: str = Depends(get_user_id),
    coach_service: CoachService = Depends(get_coach_service),
):
    """Plan for explicitly chosen energy, time and focus areas."""
    result = await coach_service.generate_plan(
        user_id,
        energy=body.energy,
        time_minutes=body.time_minutes,
        focus_areas=body.focus_areas,
        goal_text=body.goal_text,
        equipment=body.equipment,
    )
    return result.to_dict()
