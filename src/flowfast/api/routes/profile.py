"""Profile (goals, equipment) and history routes."""

from typing import Optional

from fastapi import APIRouter, Depends, Query

from ..deps import get_coach_service, get_user_id
from ..schemas import EquipmentRequest, GoalsRequest
from ...models.history import WeeklyGoals
from ...services.coach import CoachService


router = APIRouter()


@router.get("/profile/goals")
async def get_goals(
    user_id: str = Depends(get_user_id),
    coach_service: CoachService = Depends(get_coach_service),
):
    return coach_service.get_goals(user_id).to_dict()


@router.put("/profile/goals")
async def set_goals(
    body: GoalsRequest,
    user_id: str = Depends(get_user_id),
    coach_service: CoachService = Depends(get_coach_service),
):
    goals = WeeklyGoals(
        primary_goal=body.primary_goal,
        target_workouts_per_week=body.target_workouts_per_week,
        target_minutes_per_week=body.target_minutes_per_week,
    )
    return coach_service.set_goals(user_id, goals).to_dict()


@router.get("/profile/equipment")
async def get_equipment(
    user_id: str = Depends(get_user_id),
    coach_service: CoachService = Depends(get_coach_service),
):
    return {"equipment": coach_service.get_equipment(user_id)}


@router.put("/profile/equipment")
async def set_equipment(
    body: EquipmentRequest,
    user_id: str = Depends(get_user_id),
    coach_service: CoachService = Depends(get_coach_service),
):
    return {"equipment": coach_service.set_equipment(user_id, body.equipment)}


@router.get("/history")
async def get_history(
    limit: Optional[int] = Query(default=None, ge=1, le=500),
    user_id: str = Depends(get_user_id),
    coach_service: CoachService = Depends(get_coach_service),
):
    """Workout history, newest first."""
    entries = coach_service.get_history(user_id, limit)
    return {"entries": [e.to_dict() for e in entries], "count": len(entries)}
