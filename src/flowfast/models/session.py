"""Workout session models: the steppable sequence played by the player."""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

from .workouts import GroupType, WorkoutPlan


class StepType(str, Enum):
    """How a step is completed."""
    TIME = "time"
    REPS = "reps"


@dataclass
class WorkoutStep:
    """
    One player screen: a single set of a single exercise.

    rest_after_seconds carries the plan's suggested rest for display only.
    WorkoutPlayer always rests for its own configured rest_seconds.
    """
    id: str
    exercise_name: str
    type: StepType
    set_index: int
    total_sets: int
    duration_seconds: Optional[int] = None
    reps: Optional[int] = None
    group_type: Optional[GroupType] = None
    group_label: Optional[str] = None
    animation_asset_id: Optional[str] = None
    tooltip_instructions: Optional[str] = None
    rest_after_seconds: Optional[int] = None

    def __post_init__(self):
        if isinstance(self.type, str):
            self.type = StepType(self.type)
        if isinstance(self.group_type, str):
            self.group_type = GroupType(self.group_type)

    @property
    def is_timed(self) -> bool:
        return self.type == StepType.TIME and bool(self.duration_seconds)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "exercise_name": self.exercise_name,
            "type": self.type.value,
            "set_index": self.set_index,
            "total_sets": self.total_sets,
            "duration_seconds": self.duration_seconds,
            "reps": self.reps,
            "group_type": self.group_type.value if self.group_type else None,
            "group_label": self.group_label,
            "animation_asset_id": self.animation_asset_id,
            "tooltip_instructions": self.tooltip_instructions,
            "rest_after_seconds": self.rest_after_seconds,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "WorkoutStep":
        return cls(
            id=data["id"],
            exercise_name=data["exercise_name"],
            type=StepType(data["type"]),
            set_index=data["set_index"],
            total_sets=data["total_sets"],
            duration_seconds=data.get("duration_seconds"),
            reps=data.get("reps"),
            group_type=GroupType(data["group_type"]) if data.get("group_type") else None,
            group_label=data.get("group_label"),
            animation_asset_id=data.get("animation_asset_id"),
            tooltip_instructions=data.get("tooltip_instructions"),
            rest_after_seconds=data.get("rest_after_seconds"),
        )


@dataclass
class WorkoutSession:
    """An ordered list of steps built from one workout plan."""
    id: str
    title: str
    workout_plan: WorkoutPlan
    steps: List[WorkoutStep] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.steps)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "title": self.title,
            "steps": [s.to_dict() for s in self.steps],
            "workout_plan": self.workout_plan.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: dict) -> "WorkoutSession":
        return cls(
            id=data["id"],
            title=data["title"],
            steps=[WorkoutStep.from_dict(s) for s in data.get("steps", [])],
            workout_plan=WorkoutPlan.from_dict(data["workout_plan"]),
        )
