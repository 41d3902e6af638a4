"""
Today Recommendation Engine

Maps weekly adherence, recent effort (RPE) and recency into one of four
coaching modes. Rules are evaluated in priority order and the first match
wins; the order itself is part of the contract.
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional, Sequence

from ..analysis.metrics import (
    compute_adaptation_metrics,
    count_workouts_this_week,
    days_since_last_workout,
)
from ..models.history import AdaptationMetrics, WeeklyGoals, WorkoutHistoryEntry
from ..utils.dates import now_local


class TodayRecommendation(str, Enum):
    """Coaching mode for today's session."""

    PUSH = "push"            # On pace with effort headroom
    MAINTAIN = "maintain"    # Balanced / easing back in
    RECOVERY = "recovery"    # Recent effort very high
    CATCH_UP = "catch_up"    # Materially behind weekly pace


HIGH_RPE_THRESHOLD = 8
PUSH_MAX_RPE = 6
DEFAULT_RPE = 5
LAYOFF_DAYS = 3
# Stand-in gap for users with no history at all
NO_HISTORY_GAP_DAYS = 99


@dataclass
class RecommendationInputs:
    """The values the rules are evaluated against."""

    workouts_this_week: int
    target_workouts_per_week: int
    last_rpe: Optional[int]
    avg_rpe: Optional[float]
    days_since_last_workout: int

    def to_dict(self) -> dict:
        return {
            "workouts_this_week": self.workouts_this_week,
            "target_workouts_per_week": self.target_workouts_per_week,
            "last_rpe": self.last_rpe,
            "avg_rpe": self.avg_rpe,
            "days_since_last_workout": self.days_since_last_workout,
        }


def decide_recommendation(inputs: RecommendationInputs) -> TodayRecommendation:
    """
    Apply the priority-ordered rules.

    1. Behind weekly goal by 2+ workouts -> catch_up
    2. Last or average RPE >= 8 -> recovery
    3. 3+ days since last workout -> maintain (ease back in)
    4. On target and last RPE (default 5) <= 6 -> push
    5. Otherwise -> maintain
    """
    target = inputs.target_workouts_per_week

    if inputs.workouts_this_week < target - 1:
        return TodayRecommendation.CATCH_UP

    if (inputs.last_rpe is not None and inputs.last_rpe >= HIGH_RPE_THRESHOLD) or (
        inputs.avg_rpe is not None and inputs.avg_rpe >= HIGH_RPE_THRESHOLD
    ):
        return TodayRecommendation.RECOVERY

    if inputs.days_since_last_workout >= LAYOFF_DAYS:
        return TodayRecommendation.MAINTAIN

    last_rpe = inputs.last_rpe if inputs.last_rpe is not None else DEFAULT_RPE
    if inputs.workouts_this_week >= target and last_rpe <= PUSH_MAX_RPE:
        return TodayRecommendation.PUSH

    return TodayRecommendation.MAINTAIN


def build_recommendation_inputs(
    metrics: AdaptationMetrics,
    workouts_this_week: int,
    goals: WeeklyGoals,
    now: Optional[datetime] = None,
) -> RecommendationInputs:
    """Assemble rule inputs from precomputed metrics."""
    days = days_since_last_workout(metrics.last_workout_date, now)
    return RecommendationInputs(
        workouts_this_week=workouts_this_week,
        target_workouts_per_week=goals.target_workouts_per_week,
        last_rpe=metrics.last_rpe,
        avg_rpe=metrics.avg_rpe,
        days_since_last_workout=NO_HISTORY_GAP_DAYS if days is None else days,
    )


def recommend_from_metrics(
    metrics: AdaptationMetrics,
    workouts_this_week: int,
    goals: WeeklyGoals,
    now: Optional[datetime] = None,
) -> TodayRecommendation:
    """Recommendation from precomputed statistics."""
    return decide_recommendation(
        build_recommendation_inputs(metrics, workouts_this_week, goals, now)
    )


def recommend_today(
    entries: Sequence[WorkoutHistoryEntry],
    goals: WeeklyGoals,
    now: Optional[datetime] = None,
) -> TodayRecommendation:
    """
    Today's recommendation for a user's full history.

    Args:
        entries: History entries in any order
        goals: The user's weekly goals
        now: Reference time (defaults to the current local time)

    Returns:
        The TodayRecommendation
    """
    now = now or now_local()
    metrics = compute_adaptation_metrics(entries)
    return recommend_from_metrics(
        metrics, count_workouts_this_week(entries, now), goals, now
    )


RECOMMENDATION_MESSAGES = {
    TodayRecommendation.PUSH: "You're on track and recovered. Time to push a little harder.",
    TodayRecommendation.MAINTAIN: "Keep it balanced today: quality movement and consistency.",
    TodayRecommendation.RECOVERY: "Recent sessions were very demanding. Take it easier today.",
    TodayRecommendation.CATCH_UP: "You're behind your weekly goal. A time-efficient session will get you back on track.",
}


def describe_recommendation(recommendation: TodayRecommendation) -> str:
    """Short user-facing explanation of a recommendation."""
    return RECOMMENDATION_MESSAGES[recommendation]
