"""
Auto Today parameter builder.

Derives every plan parameter (energy, time, focus areas, goal text) from
the user's stored goals and history, so a workout can be generated without
asking the user anything.
"""

import logging
import math
from collections import Counter
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional, Sequence

from ..analysis.metrics import (
    build_history_snapshot,
    compute_adaptation_metrics,
    count_workouts_this_week,
    sort_newest_first,
)
from ..db.repositories.base import GoalsStore, HistoryStore
from ..models.history import PlannerHistorySnapshot, PrimaryGoal, WeeklyGoals, WorkoutHistoryEntry
from ..models.plan_request import PlanRequest
from ..models.workouts import EnergyLevel, FocusArea
from ..utils.dates import now_local
from .today import PUSH_MAX_RPE, TodayRecommendation, recommend_from_metrics


logger = logging.getLogger(__name__)

MIN_SESSION_MINUTES = 15
MAX_SESSION_MINUTES = 60
RECENT_SESSIONS_WINDOW = 3
MAX_AUTO_FOCUS_AREAS = 2

FIRST_WORKOUT_GOAL_TEXT = (
    "Let's start with a balanced session to introduce you to your fitness journey!"
)


@dataclass
class RecentFocusSummary:
    """Focus areas trained in the most recent sessions."""
    last_sessions: List[Dict[str, Any]] = field(default_factory=list)
    focus_counts: Dict[str, int] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "last_sessions": [dict(s) for s in self.last_sessions],
            "focus_counts": dict(self.focus_counts),
        }


@dataclass
class AutoPlanInput:
    """Fully derived parameters for an Auto Today plan request."""
    energy: EnergyLevel
    time_minutes: int
    focus_areas: List[str]
    goal_text: str
    primary_goal: PrimaryGoal
    history: PlannerHistorySnapshot
    today_recommendation: TodayRecommendation
    recent_focus_summary: RecentFocusSummary

    def to_plan_request(self, equipment: Optional[List[str]] = None) -> PlanRequest:
        return PlanRequest(
            energy=self.energy,
            time_minutes=self.time_minutes,
            focus_areas=list(self.focus_areas),
            goal_text=self.goal_text,
            equipment=list(equipment or []),
            history=self.history,
            primary_goal=self.primary_goal,
            today_recommendation=self.today_recommendation.value,
            recent_focus_summary=self.recent_focus_summary.to_dict(),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "energy": self.energy.value,
            "time_minutes": self.time_minutes,
            "focus_areas": list(self.focus_areas),
            "goal_text": self.goal_text,
            "primary_goal": self.primary_goal.value,
            "history": self.history.to_dict(),
            "today_recommendation": self.today_recommendation.value,
            "recent_focus_summary": self.recent_focus_summary.to_dict(),
        }


def select_energy(recommendation: TodayRecommendation, last_rpe: Optional[int]) -> EnergyLevel:
    """recovery -> low; push with headroom -> high; everything else -> medium."""
    if recommendation == TodayRecommendation.RECOVERY:
        return EnergyLevel.LOW
    if recommendation == TodayRecommendation.PUSH and (last_rpe is None or last_rpe <= PUSH_MAX_RPE):
        return EnergyLevel.HIGH
    return EnergyLevel.MEDIUM


def select_session_minutes(goals: WeeklyGoals) -> int:
    """Weekly minutes spread over weekly workouts, clamped to [15, 60]."""
    per_session = goals.target_minutes_per_week / goals.target_workouts_per_week
    # Half-up rounding: 22.5 -> 23, not Python's round-half-even 22
    rounded = int(math.floor(per_session + 0.5))
    return max(MIN_SESSION_MINUTES, min(MAX_SESSION_MINUTES, rounded))


def summarize_recent_focus(entries: Sequence[WorkoutHistoryEntry]) -> RecentFocusSummary:
    """
    Count focus areas over the most recent sessions.

    Every FocusArea starts at 0; tags that are not a FocusArea are ignored.
    """
    recent = sort_newest_first(entries)[:RECENT_SESSIONS_WINDOW]
    known = {area.value for area in FocusArea}

    counts = Counter({area.value: 0 for area in FocusArea})
    for entry in recent:
        for tag in entry.focus_areas:
            if tag in known:
                counts[tag] += 1

    return RecentFocusSummary(
        last_sessions=[
            {"date": entry.date.isoformat(), "focus_areas": list(entry.focus_areas)}
            for entry in recent
        ],
        focus_counts={area.value: counts[area.value] for area in FocusArea},
    )


def select_focus_areas(summary: RecentFocusSummary, has_history: bool) -> List[str]:
    """Least-trained focus areas, ties broken by FocusArea declaration order."""
    if not has_history:
        return [FocusArea.FULL_BODY.value]

    min_count = min(summary.focus_counts.values())
    least_trained = [
        area.value for area in FocusArea
        if summary.focus_counts[area.value] == min_count
    ]
    return least_trained[:MAX_AUTO_FOCUS_AREAS]


def build_goal_text(primary_goal: PrimaryGoal, focus_areas: List[str], is_first_workout: bool) -> str:
    if is_first_workout:
        return FIRST_WORKOUT_GOAL_TEXT
    goal_name = primary_goal.value.replace("_", " ")
    return f"Auto-balanced session to support {goal_name} with focus on {', '.join(focus_areas)}."


def build_auto_plan_input_from(
    goals: WeeklyGoals,
    entries: Sequence[WorkoutHistoryEntry],
    now: Optional[datetime] = None,
) -> AutoPlanInput:
    """Pure core of build_auto_plan_input: goals + history -> AutoPlanInput."""
    now = now or now_local()
    metrics = compute_adaptation_metrics(entries)
    recommendation = recommend_from_metrics(
        metrics, count_workouts_this_week(entries, now), goals, now
    )

    summary = summarize_recent_focus(entries)
    has_history = bool(entries)
    focus_areas = select_focus_areas(summary, has_history)

    return AutoPlanInput(
        energy=select_energy(recommendation, metrics.last_rpe),
        time_minutes=select_session_minutes(goals),
        focus_areas=focus_areas,
        goal_text=build_goal_text(goals.primary_goal, focus_areas, not has_history),
        primary_goal=goals.primary_goal,
        history=build_history_snapshot(metrics, now),
        today_recommendation=recommendation,
        recent_focus_summary=summary,
    )


def build_auto_plan_input(
    user_id: str,
    goals_store: GoalsStore,
    history_store: HistoryStore,
    now: Optional[datetime] = None,
) -> AutoPlanInput:
    """
    Build Auto Today parameters for a user.

    Args:
        user_id: The user to plan for
        goals_store: Source of the user's weekly goals
        history_store: Source of the user's workout history
        now: Reference time (defaults to the current local time)

    Returns:
        AutoPlanInput ready to be turned into a PlanRequest

    Raises:
        StoreError: If either store cannot be read
    """
    goals = goals_store.get(user_id)
    entries = history_store.list(user_id)
    auto_input = build_auto_plan_input_from(goals, entries, now)
    logger.info(
        f"Auto plan for user {user_id}: {auto_input.today_recommendation.value}, "
        f"energy={auto_input.energy.value}, time={auto_input.time_minutes}min, "
        f"focus={auto_input.focus_areas}"
    )
    return auto_input
