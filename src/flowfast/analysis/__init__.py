"""History analysis: adaptation metrics and dashboard statistics."""

from .metrics import (
    BIAS_NET_THRESHOLD,
    build_history_snapshot,
    compute_adaptation_metrics,
    compute_current_streak,
    compute_difficulty_bias,
    compute_workout_stats,
    count_workouts_this_week,
    days_since_last_workout,
    sort_newest_first,
)

__all__ = [
    "BIAS_NET_THRESHOLD",
    "build_history_snapshot",
    "compute_adaptation_metrics",
    "compute_current_streak",
    "compute_difficulty_bias",
    "compute_workout_stats",
    "count_workouts_this_week",
    "days_since_last_workout",
    "sort_newest_first",
]
