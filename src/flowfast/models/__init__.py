"""Data models for the FlowFast coaching app."""

from .workouts import (
    # Enums
    EnergyLevel,
    FocusArea,
    ExerciseType,
    ExerciseMode,
    GroupType,
    # Dataclasses
    Exercise,
    AdaptedFor,
    PlanContext,
    WorkoutPlan,
)

from .history import (
    # Enums
    DifficultyFeedback,
    PrimaryGoal,
    # Dataclasses
    WorkoutHistoryEntry,
    WeeklyGoals,
    AdaptationMetrics,
    PlannerHistorySnapshot,
    WorkoutStats,
    DEFAULT_WEEKLY_GOALS,
)

from .plan_request import PlanRequest

from .session import (
    StepType,
    WorkoutStep,
    WorkoutSession,
)

__all__ = [
    "EnergyLevel",
    "FocusArea",
    "ExerciseType",
    "ExerciseMode",
    "GroupType",
    "Exercise",
    "AdaptedFor",
    "PlanContext",
    "WorkoutPlan",
    "DifficultyFeedback",
    "PrimaryGoal",
    "WorkoutHistoryEntry",
    "WeeklyGoals",
    "AdaptationMetrics",
    "PlannerHistorySnapshot",
    "WorkoutStats",
    "DEFAULT_WEEKLY_GOALS",
    "PlanRequest",
    "StepType",
    "WorkoutStep",
    "WorkoutSession",
]
