"""
Post-workout feedback processing.

Turns a rating, post-workout energy and RPE into a history entry for the
completed plan, and makes sure the entry survives a store outage.
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..db.repositories.base import HistoryStore
from ..db.repositories.local_cache import PendingEntryQueue
from ..exceptions import FeedbackValidationError, StoreError
from ..models.history import DifficultyFeedback, WorkoutHistoryEntry
from ..models.workouts import EnergyLevel, WorkoutPlan
from ..utils.dates import now_local


logger = logging.getLogger(__name__)

SAVE_DEGRADED_WARNING = (
    "We couldn't reach the server. Your workout is saved on this device and will sync later."
)
SAVE_FAILED_WARNING = "We couldn't save this workout. Please try again."


@dataclass
class FeedbackResult:
    """Outcome of a feedback submission."""
    saved: bool
    entry: WorkoutHistoryEntry
    warning: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "saved": self.saved,
            "warning": self.warning,
            "entry": self.entry.to_dict(),
        }


def map_difficulty(rating: int, post_energy: EnergyLevel) -> DifficultyFeedback:
    """Map a 1-5 rating plus post-workout energy to a difficulty."""
    if post_energy == EnergyLevel.LOW and rating <= 3:
        return DifficultyFeedback.COULDNT_FINISH
    if rating <= 2:
        return DifficultyFeedback.TOO_HARD
    if rating == 3:
        return DifficultyFeedback.JUST_RIGHT
    return DifficultyFeedback.TOO_EASY


def _validate_feedback(rating, post_energy, rpe) -> EnergyLevel:
    if isinstance(rating, bool) or not isinstance(rating, int) or not 1 <= rating <= 5:
        raise FeedbackValidationError(
            "Rating must be between 1 and 5", field="rating", details={"value": rating}
        )
    if isinstance(rpe, bool) or not isinstance(rpe, int) or not 1 <= rpe <= 10:
        raise FeedbackValidationError(
            "RPE must be between 1 and 10", field="rpe", details={"value": rpe}
        )
    try:
        return EnergyLevel(post_energy)
    except ValueError:
        raise FeedbackValidationError(
            f"Invalid energy level: {post_energy}", field="post_energy"
        )


def build_history_entry(
    plan: WorkoutPlan,
    difficulty: DifficultyFeedback,
    rpe: int,
    notes: Optional[str] = None,
    now: Optional[datetime] = None,
) -> WorkoutHistoryEntry:
    """
    Derive the history entry for a completed plan.

    Energy, time, focus and equipment come from the plan's request context
    when present, otherwise from the plan itself.
    """
    context = plan.context
    total_sets = sum(e.sets or 0 for e in plan.exercises)
    total_calories = sum(e.calories_estimate or 0 for e in plan.exercises)

    return WorkoutHistoryEntry(
        id=plan.id,
        date=now or now_local(),
        energy=context.energy if context else EnergyLevel.MEDIUM,
        time_minutes_planned=(context.time_minutes if context and context.time_minutes else plan.total_time),
        focus_areas=list(context.focus_areas if context and context.focus_areas else plan.focus_areas),
        equipment=list(context.equipment) if context else [],
        exercises_count=len(plan.exercises),
        total_sets=total_sets,
        total_estimated_calories=total_calories if total_calories > 0 else None,
        feedback_difficulty=difficulty,
        rpe=rpe,
        notes=notes or None,
        exercises=list(plan.exercises),
    )


class FeedbackProcessor:
    """
    Records feedback into the history store.

    When the store is unreachable the entry goes to the pending queue and
    the submission still counts as saved, with a warning.
    """

    def __init__(self, history_store: HistoryStore, pending: Optional[PendingEntryQueue] = None):
        self.history_store = history_store
        self.pending = pending

    def submit(
        self,
        user_id: str,
        plan: WorkoutPlan,
        rating: int,
        post_energy: EnergyLevel,
        rpe: int,
        notes: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> FeedbackResult:
        """
        Validate feedback, build the entry and persist it.

        Raises:
            FeedbackValidationError: If rating, RPE or energy are invalid
        """
        post_energy = _validate_feedback(rating, post_energy, rpe)
        difficulty = map_difficulty(rating, post_energy)
        entry = build_history_entry(plan, difficulty, rpe, notes, now)

        try:
            self.history_store.append(user_id, entry)
        except StoreError as e:
            logger.warning(
                f"submit_feedback: history append failed for user {user_id}, "
                f"plan {plan.id} (rating={rating}, rpe={rpe}): {e.message}"
            )
            if self.pending is None:
                return FeedbackResult(saved=False, entry=entry, warning=SAVE_FAILED_WARNING)
            self.pending.add(user_id, entry)
            return FeedbackResult(saved=True, entry=entry, warning=SAVE_DEGRADED_WARNING)

        logger.info(
            f"Recorded workout {entry.id} for user {user_id}: "
            f"{difficulty.value}, rpe={rpe}"
        )
        return FeedbackResult(saved=True, entry=entry)

    def retry_pending(self, user_id: str) -> int:
        """Write queued entries to the history store; returns how many were written."""
        if self.pending is None:
            return 0
        written = self.pending.flush(user_id, self.history_store.append)
        if written:
            logger.info(f"Synced {written} pending workout(s) for user {user_id}")
        return written
