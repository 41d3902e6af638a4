"""Recommendation engine and Auto Today parameter builder."""

from .today import (
    TodayRecommendation,
    RecommendationInputs,
    decide_recommendation,
    recommend_from_metrics,
    recommend_today,
    describe_recommendation,
)
from .auto_plan import (
    AutoPlanInput,
    RecentFocusSummary,
    build_auto_plan_input,
    build_auto_plan_input_from,
)

__all__ = [
    "TodayRecommendation",
    "RecommendationInputs",
    "decide_recommendation",
    "recommend_from_metrics",
    "recommend_today",
    "describe_recommendation",
    "AutoPlanInput",
    "RecentFocusSummary",
    "build_auto_plan_input",
    "build_auto_plan_input_from",
]
