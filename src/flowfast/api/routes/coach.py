"""Today recommendation and Auto Today parameter routes."""

from fastapi import APIRouter, Depends

from ..deps import get_coach_service, get_user_id
from ...services.coach import CoachService


router = APIRouter()


@router.get("/today")
async def get_today(
    user_id: str = Depends(get_user_id),
    coach_service: CoachService = Depends(get_coach_service),
):
    """Today's recommendation with dashboard stats and the history snapshot."""
    return coach_service.get_today_summary(user_id).to_dict()


@router.get("/auto-plan-input")
async def get_auto_plan_input(
    user_id: str = Depends(get_user_id),
    coach_service: CoachService = Depends(get_coach_service),
):
    """The parameters Auto Today would send to the plan generator."""
    return coach_service.get_auto_plan_input(user_id).to_dict()
