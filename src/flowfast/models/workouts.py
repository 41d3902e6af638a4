"""Workout plan data models: exercises, plans and the request context."""

from dataclasses import dataclass, field, replace
from datetime import datetime
from enum import Enum
from typing import List, Optional
import uuid

from ..utils.dates import now_local, parse_datetime


class EnergyLevel(str, Enum):
    """Self-reported energy, also used as plan intensity."""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class FocusArea(str, Enum):
    """Training emphasis tags.

    Declaration order is the canonical order used to break ties when
    picking under-trained areas.
    """
    UPPER_BODY = "upper-body"
    LOWER_BODY = "lower-body"
    CORE = "core"
    CARDIO = "cardio"
    FULL_BODY = "full-body"
    STRENGTH = "strength"
    FLEXIBILITY = "flexibility"
    RECOVERY = "recovery"


class ExerciseType(str, Enum):
    """Exercise categories."""
    CARDIO = "cardio"
    STRENGTH = "strength"
    STRETCH = "stretch"
    BREATHING = "breathing"


class ExerciseMode(str, Enum):
    """How an exercise is measured."""
    REPS = "reps"
    TIME = "time"


class GroupType(str, Enum):
    """Exercise grouping."""
    SUPERSET = "superset"
    CIRCUIT = "circuit"


@dataclass
class Exercise:
    """
    A single exercise within a workout plan.

    Expected shape is sets+reps OR duration (seconds). Only duration is
    significant downstream: anything with a duration runs as a timed step.
    """
    id: str
    name: str
    type: ExerciseType
    mode: Optional[ExerciseMode] = None
    sets: Optional[int] = None
    reps: Optional[int] = None
    duration: Optional[int] = None
    notes: Optional[str] = None
    calories_estimate: Optional[float] = None
    equipment: List[str] = field(default_factory=list)
    rest_between_sets_seconds: Optional[int] = None
    rest_after_exercise_seconds: Optional[int] = None
    group_type: Optional[GroupType] = None
    group_label: Optional[str] = None
    tooltip: Optional[str] = None

    def __post_init__(self):
        if isinstance(self.type, str):
            self.type = ExerciseType(self.type)
        if isinstance(self.mode, str):
            self.mode = ExerciseMode(self.mode)
        if isinstance(self.group_type, str):
            self.group_type = GroupType(self.group_type)

    @property
    def is_timed(self) -> bool:
        return bool(self.duration)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "type": self.type.value,
            "mode": self.mode.value if self.mode else None,
            "sets": self.sets,
            "reps": self.reps,
            "duration": self.duration,
            "notes": self.notes,
            "calories_estimate": self.calories_estimate,
            "equipment": list(self.equipment),
            "rest_between_sets_seconds": self.rest_between_sets_seconds,
            "rest_after_exercise_seconds": self.rest_after_exercise_seconds,
            "group_type": self.group_type.value if self.group_type else None,
            "group_label": self.group_label,
            "tooltip": self.tooltip,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Exercise":
        return cls(
            id=str(data["id"]),
            name=data["name"],
            type=ExerciseType(data["type"]),
            mode=ExerciseMode(data["mode"]) if data.get("mode") else None,
            sets=data.get("sets"),
            reps=data.get("reps"),
            duration=data.get("duration"),
            notes=data.get("notes"),
            calories_estimate=data.get("calories_estimate"),
            equipment=list(data.get("equipment") or []),
            rest_between_sets_seconds=data.get("rest_between_sets_seconds"),
            rest_after_exercise_seconds=data.get("rest_after_exercise_seconds"),
            group_type=GroupType(data["group_type"]) if data.get("group_type") else None,
            group_label=data.get("group_label"),
            tooltip=data.get("tooltip"),
        )


@dataclass
class AdaptedFor:
    """What the plan was adapted to."""
    energy: EnergyLevel
    available_time: int

    def to_dict(self) -> dict:
        return {"energy": EnergyLevel(self.energy).value, "available_time": self.available_time}

    @classmethod
    def from_dict(cls, data: dict) -> "AdaptedFor":
        return cls(energy=EnergyLevel(data["energy"]), available_time=data["available_time"])


@dataclass
class PlanContext:
    """The request inputs a plan was generated for.

    Kept on the plan so the history entry can be rebuilt after the session.
    """
    energy: EnergyLevel
    time_minutes: int
    focus_areas: List[str]
    equipment: List[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "energy": EnergyLevel(self.energy).value,
            "time_minutes": self.time_minutes,
            "focus_areas": list(self.focus_areas),
            "equipment": list(self.equipment),
        }

    @classmethod
    def from_dict(cls, data: dict) -> "PlanContext":
        return cls(
            energy=EnergyLevel(data["energy"]),
            time_minutes=data["time_minutes"],
            focus_areas=list(data.get("focus_areas") or []),
            equipment=list(data.get("equipment") or []),
        )


@dataclass
class WorkoutPlan:
    """
    A generated workout plan.

    Produced by a plan generator (or the local fallback), consumed by the
    session builder and discarded once its history entry is written.
    """
    id: str
    date: datetime
    exercises: List[Exercise]
    total_time: int
    intensity: EnergyLevel
    focus_areas: List[str]
    adapted_for: Optional[AdaptedFor] = None
    context: Optional[PlanContext] = None
    is_fallback: bool = False

    def __post_init__(self):
        if isinstance(self.intensity, str):
            self.intensity = EnergyLevel(self.intensity)

    @classmethod
    def create(
        cls,
        exercises: List[Exercise],
        total_time: int,
        intensity: EnergyLevel,
        focus_areas: List[str],
        is_fallback: bool = False,
    ) -> "WorkoutPlan":
        """Create a new plan with a generated id, adapted to the given inputs."""
        return cls(
            id=f"workout-{uuid.uuid4().hex[:12]}",
            date=now_local(),
            exercises=exercises,
            total_time=total_time,
            intensity=intensity,
            focus_areas=list(focus_areas),
            adapted_for=AdaptedFor(energy=intensity, available_time=total_time),
            is_fallback=is_fallback,
        )

    def with_context(self, context: PlanContext) -> "WorkoutPlan":
        return replace(self, context=context)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "date": self.date.isoformat(),
            "exercises": [e.to_dict() for e in self.exercises],
            "total_time": self.total_time,
            "intensity": self.intensity.value,
            "focus_areas": list(self.focus_areas),
            "adapted_for": self.adapted_for.to_dict() if self.adapted_for else None,
            "context": self.context.to_dict() if self.context else None,
            "is_fallback": self.is_fallback,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "WorkoutPlan":
        return cls(
            id=data["id"],
            date=parse_datetime(data["date"]),
            exercises=[Exercise.from_dict(e) for e in data.get("exercises", [])],
            total_time=data["total_time"],
            intensity=EnergyLevel(data["intensity"]),
            focus_areas=list(data.get("focus_areas") or []),
            adapted_for=AdaptedFor.from_dict(data["adapted_for"]) if data.get("adapted_for") else None,
            context=PlanContext.from_dict(data["context"]) if data.get("context") else None,
            is_fallback=bool(data.get("is_fallback", False)),
        )
