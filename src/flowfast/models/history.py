"""History, goals and derived adaptation models."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import List, Optional

from ..exceptions import GoalsValidationError
from ..utils.dates import isoformat_or_none, parse_datetime
from .workouts import EnergyLevel, Exercise


class DifficultyFeedback(str, Enum):
    """Categorical post-workout difficulty."""
    TOO_EASY = "too_easy"
    JUST_RIGHT = "just_right"
    TOO_HARD = "too_hard"
    COULDNT_FINISH = "couldnt_finish"


class PrimaryGoal(str, Enum):
    """User's primary training goal."""
    GET_STRONGER = "get_stronger"
    GET_TONED = "get_toned"
    LOSE_WEIGHT = "lose_weight"
    GENERAL_FITNESS = "general_fitness"


@dataclass(frozen=True)
class WorkoutHistoryEntry:
    """
    One completed (or logged) session.

    Entries are append-only and never edited after creation.
    """
    id: str
    date: datetime
    energy: EnergyLevel
    time_minutes_planned: int
    focus_areas: List[str]
    equipment: List[str] = field(default_factory=list)
    exercises_count: int = 0
    total_sets: int = 0
    time_minutes_actual: Optional[int] = None
    total_estimated_calories: Optional[float] = None
    feedback_difficulty: Optional[DifficultyFeedback] = None
    rpe: Optional[int] = None
    notes: Optional[str] = None
    exercises: Optional[List[Exercise]] = None

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "date": self.date.isoformat(),
            "energy": EnergyLevel(self.energy).value,
            "time_minutes_planned": self.time_minutes_planned,
            "time_minutes_actual": self.time_minutes_actual,
            "focus_areas": list(self.focus_areas),
            "equipment": list(self.equipment),
            "exercises_count": self.exercises_count,
            "total_sets": self.total_sets,
            "total_estimated_calories": self.total_estimated_calories,
            "feedback_difficulty": (
                DifficultyFeedback(self.feedback_difficulty).value
                if self.feedback_difficulty else None
            ),
            "rpe": self.rpe,
            "notes": self.notes,
            "exercises": [e.to_dict() for e in self.exercises] if self.exercises is not None else None,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "WorkoutHistoryEntry":
        exercises = data.get("exercises")
        return cls(
            id=str(data["id"]),
            date=parse_datetime(data["date"]),
            energy=EnergyLevel(data.get("energy") or EnergyLevel.MEDIUM.value),
            time_minutes_planned=int(data.get("time_minutes_planned") or 0),
            time_minutes_actual=data.get("time_minutes_actual"),
            focus_areas=list(data.get("focus_areas") or []),
            equipment=list(data.get("equipment") or []),
            exercises_count=int(data.get("exercises_count") or 0),
            total_sets=int(data.get("total_sets") or 0),
            total_estimated_calories=data.get("total_estimated_calories"),
            feedback_difficulty=(
                DifficultyFeedback(data["feedback_difficulty"])
                if data.get("feedback_difficulty") else None
            ),
            rpe=data.get("rpe"),
            notes=data.get("notes"),
            exercises=[Exercise.from_dict(e) for e in exercises] if exercises is not None else None,
        )


@dataclass
class WeeklyGoals:
    """Per-user weekly training target."""
    primary_goal: PrimaryGoal = PrimaryGoal.GET_TONED
    target_workouts_per_week: int = 3
    target_minutes_per_week: int = 90

    def __post_init__(self):
        if isinstance(self.primary_goal, str):
            try:
                self.primary_goal = PrimaryGoal(self.primary_goal)
            except ValueError:
                raise GoalsValidationError(
                    f"Unknown primary goal: {self.primary_goal}", field="primary_goal"
                )
        if not 1 <= self.target_workouts_per_week <= 7:
            raise GoalsValidationError(
                "target_workouts_per_week must be between 1 and 7",
                field="target_workouts_per_week",
                details={"value": self.target_workouts_per_week},
            )
        if not 30 <= self.target_minutes_per_week <= 500:
            raise GoalsValidationError(
                "target_minutes_per_week must be between 30 and 500",
                field="target_minutes_per_week",
                details={"value": self.target_minutes_per_week},
            )

    def to_dict(self) -> dict:
        return {
            "primary_goal": self.primary_goal.value,
            "target_workouts_per_week": self.target_workouts_per_week,
            "target_minutes_per_week": self.target_minutes_per_week,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "WeeklyGoals":
        # Missing or zero values fall back to defaults, like unset profile columns
        defaults = cls()
        return cls(
            primary_goal=data.get("primary_goal") or defaults.primary_goal,
            target_workouts_per_week=data.get("target_workouts_per_week") or defaults.target_workouts_per_week,
            target_minutes_per_week=data.get("target_minutes_per_week") or defaults.target_minutes_per_week,
        )


DEFAULT_WEEKLY_GOALS = WeeklyGoals()


@dataclass
class AdaptationMetrics:
    """
    Summary statistics derived from a user's history.

    Never persisted; always recomputed from the entry list.
    """
    total_sessions: int = 0
    too_easy_count: int = 0
    too_hard_count: int = 0
    couldnt_finish_count: int = 0
    last_feedback: Optional[DifficultyFeedback] = None
    last_rpe: Optional[int] = None
    avg_rpe: Optional[float] = None
    last_workout_date: Optional[datetime] = None
    difficulty_bias: int = 0

    def to_dict(self) -> dict:
        return {
            "total_sessions": self.total_sessions,
            "too_easy_count": self.too_easy_count,
            "too_hard_count": self.too_hard_count,
            "couldnt_finish_count": self.couldnt_finish_count,
            "last_feedback": self.last_feedback.value if self.last_feedback else None,
            "last_rpe": self.last_rpe,
            "avg_rpe": round(self.avg_rpe, 2) if self.avg_rpe is not None else None,
            "last_workout_date": isoformat_or_none(self.last_workout_date),
            "difficulty_bias": self.difficulty_bias,
        }


@dataclass
class PlannerHistorySnapshot:
    """History summary sent along with a plan request."""
    sessions_completed: int
    difficulty_bias: int
    days_since_last_workout: Optional[int]
    last_feedback: Optional[DifficultyFeedback] = None
    avg_rpe: Optional[float] = None
    last_rpe: Optional[int] = None

    def to_dict(self) -> dict:
        result = {
            "sessions_completed": self.sessions_completed,
            "difficulty_bias": self.difficulty_bias,
            "days_since_last_workout": self.days_since_last_workout,
        }
        if self.last_feedback:
            result["last_feedback"] = self.last_feedback.value
        if self.avg_rpe is not None:
            result["avg_rpe"] = round(self.avg_rpe, 2)
        if self.last_rpe is not None:
            result["last_rpe"] = self.last_rpe
        return result


@dataclass
class WorkoutStats:
    """Dashboard statistics."""
    total_workouts: int = 0
    current_streak: int = 0
    this_week_workouts: int = 0
    total_minutes_planned: int = 0
    total_calories: float = 0.0

    def to_dict(self) -> dict:
        return {
            "total_workouts": self.total_workouts,
            "current_streak": self.current_streak,
            "this_week_workouts": self.this_week_workouts,
            "total_minutes_planned": self.total_minutes_planned,
            "total_calories": self.total_calories,
        }
