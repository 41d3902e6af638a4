"""Post-workout feedback route."""

from fastapi import APIRouter, Depends

from ..deps import get_coach_service, get_user_id
from ..schemas import FeedbackRequest
from ...services.coach import CoachService


router = APIRouter()


@router.post("")
async def submit_feedback(
    body: FeedbackRequest,
    user_id: str = Depends(get_user_id),
    coach_service: CoachService = Depends(get_coach_service),
):
    """
    Record feedback for the current session.

    A store outage still returns ``saved: true``; the entry is kept on
    the server's local cache and ``warning`` explains the delay.
    """
    result = coach_service.submit_feedback(
        user_id,
        rating=body.rating,
        post_energy=body.post_energy,
        rpe=body.rpe,
        notes=body.notes,
        session_id=body.session_id,
    )
    return result.to_dict()


@router.post("/sync")
async def sync_pending(
    user_id: str = Depends(get_user_id),
    coach_service: CoachService = Depends(get_coach_service),
):
    """Retry writing workouts that were saved locally during an outage."""
    return {"synced": coach_service.retry_pending(user_id)}
