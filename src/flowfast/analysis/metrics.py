"""
Adaptation metrics derived from workout history.

Everything here is a pure function of the entry list (plus "now" where a
calendar is involved). Entries may arrive in any order; they are sorted by
date before anything order-dependent is computed.
"""

from datetime import datetime, timedelta
from typing import Iterable, List, Optional, Sequence

from ..models.history import (
    AdaptationMetrics,
    DifficultyFeedback,
    PlannerHistorySnapshot,
    WorkoutHistoryEntry,
    WorkoutStats,
)
from ..utils.dates import ensure_aware, now_local, start_of_week, whole_days_between


# Net (too_easy - too_hard - couldnt_finish) needed to move the bias off 0
BIAS_NET_THRESHOLD = 2


def sort_newest_first(entries: Iterable[WorkoutHistoryEntry]) -> List[WorkoutHistoryEntry]:
    """Return entries sorted by date, most recent first."""
    return sorted(entries, key=lambda e: ensure_aware(e.date), reverse=True)


def compute_difficulty_bias(
    too_easy_count: int,
    too_hard_count: int,
    couldnt_finish_count: int,
) -> int:
    """
    Directional intensity signal from feedback counts.

    Any "couldn't finish" that is not outweighed by "too easy" feedback
    forces -1. Otherwise the net score is compared against
    BIAS_NET_THRESHOLD in both directions.

    Monotonic: adding too_easy never lowers the result, adding too_hard or
    couldnt_finish never raises it.

    Returns:
        -1 (reduce intensity), 0 (balanced) or 1 (increase intensity)
    """
    if couldnt_finish_count > 0 and couldnt_finish_count >= too_easy_count:
        return -1

    net_score = too_easy_count - (too_hard_count + couldnt_finish_count)
    if net_score >= BIAS_NET_THRESHOLD:
        return 1
    if net_score <= -BIAS_NET_THRESHOLD:
        return -1
    return 0


def compute_adaptation_metrics(entries: Sequence[WorkoutHistoryEntry]) -> AdaptationMetrics:
    """
    Reduce a user's history into AdaptationMetrics.

    Args:
        entries: History entries in any order

    Returns:
        Metrics; a zeroed object for empty history
    """
    if not entries:
        return AdaptationMetrics()

    ordered = sort_newest_first(entries)

    too_easy_count = 0
    too_hard_count = 0
    couldnt_finish_count = 0
    last_feedback: Optional[DifficultyFeedback] = None
    last_rpe: Optional[int] = None
    rpe_values: List[int] = []

    for entry in ordered:
        feedback = entry.feedback_difficulty
        if feedback is not None:
            if last_feedback is None:
                last_feedback = DifficultyFeedback(feedback)
            if feedback == DifficultyFeedback.TOO_EASY:
                too_easy_count += 1
            elif feedback == DifficultyFeedback.TOO_HARD:
                too_hard_count += 1
            elif feedback == DifficultyFeedback.COULDNT_FINISH:
                couldnt_finish_count += 1

        if entry.rpe is not None:
            rpe_values.append(entry.rpe)
            if last_rpe is None:
                last_rpe = entry.rpe

    avg_rpe = sum(rpe_values) / len(rpe_values) if rpe_values else None

    return AdaptationMetrics(
        total_sessions=len(ordered),
        too_easy_count=too_easy_count,
        too_hard_count=too_hard_count,
        couldnt_finish_count=couldnt_finish_count,
        last_feedback=last_feedback,
        last_rpe=last_rpe,
        avg_rpe=avg_rpe,
        last_workout_date=ensure_aware(ordered[0].date),
        difficulty_bias=compute_difficulty_bias(
            too_easy_count, too_hard_count, couldnt_finish_count
        ),
    )


def days_since_last_workout(
    last_workout_date: Optional[datetime],
    now: Optional[datetime] = None,
) -> Optional[int]:
    """Whole days since the last workout, or None without history."""
    if last_workout_date is None:
        return None
    return whole_days_between(last_workout_date, now or now_local())


def build_history_snapshot(
    metrics: AdaptationMetrics,
    now: Optional[datetime] = None,
) -> PlannerHistorySnapshot:
    """Summarize metrics for the plan generator."""
    return PlannerHistorySnapshot(
        sessions_completed=metrics.total_sessions,
        difficulty_bias=metrics.difficulty_bias,
        days_since_last_workout=days_since_last_workout(metrics.last_workout_date, now),
        last_feedback=metrics.last_feedback,
        avg_rpe=metrics.avg_rpe,
        last_rpe=metrics.last_rpe,
    )


def count_workouts_this_week(
    entries: Iterable[WorkoutHistoryEntry],
    now: Optional[datetime] = None,
) -> int:
    """Count entries dated between Monday 00:00 (local) and now."""
    now = ensure_aware(now or now_local())
    week_start = start_of_week(now)
    return sum(1 for e in entries if week_start <= ensure_aware(e.date) <= now)


def compute_current_streak(
    entries: Iterable[WorkoutHistoryEntry],
    now: Optional[datetime] = None,
) -> int:
    """
    Consecutive calendar days with a workout, counting back from today.

    The streak is 0 when there is no workout today. Multiple workouts on
    one day count once.
    """
    now = ensure_aware(now or now_local())
    tz = now.tzinfo
    workout_days = {ensure_aware(e.date).astimezone(tz).date() for e in entries}

    streak = 0
    day = now.date()
    while day in workout_days:
        streak += 1
        day -= timedelta(days=1)
    return streak


def compute_workout_stats(
    entries: Sequence[WorkoutHistoryEntry],
    now: Optional[datetime] = None,
) -> WorkoutStats:
    """Dashboard statistics for a user's history."""
    now = ensure_aware(now or now_local())
    return WorkoutStats(
        total_workouts=len(entries),
        current_streak=compute_current_streak(entries, now),
        this_week_workouts=count_workouts_this_week(entries, now),
        total_minutes_planned=sum(e.time_minutes_planned for e in entries),
        total_calories=float(sum(e.total_estimated_calories or 0 for e in entries)),
    )
