"""Plan request: the inputs sent to a plan generator."""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from ..exceptions import PlanRequestValidationError
from .history import PlannerHistorySnapshot, PrimaryGoal
from .workouts import EnergyLevel, PlanContext


MIN_TIME_MINUTES = 5
MAX_TIME_MINUTES = 120


@dataclass
class PlanRequest:
    """Everything a plan generator needs to build one workout."""
    energy: EnergyLevel
    time_minutes: int
    focus_areas: List[str]
    goal_text: str = ""
    equipment: List[str] = field(default_factory=list)
    history: Optional[PlannerHistorySnapshot] = None
    primary_goal: Optional[PrimaryGoal] = None
    today_recommendation: Optional[str] = None
    recent_focus_summary: Optional[Dict[str, Any]] = None

    def validate(self) -> "PlanRequest":
        """
        Check the request before any network call.

        Enum-like fields given as strings are coerced in place.

        Raises:
            PlanRequestValidationError: On the first invalid field
        """
        try:
            self.energy = EnergyLevel(self.energy)
        except ValueError:
            raise PlanRequestValidationError(
                f"Invalid energy level: {self.energy}",
                field="energy",
                details={"allowed": [e.value for e in EnergyLevel]},
            )

        if (
            isinstance(self.time_minutes, bool)
            or not isinstance(self.time_minutes, int)
            or not MIN_TIME_MINUTES <= self.time_minutes <= MAX_TIME_MINUTES
        ):
            raise PlanRequestValidationError(
                f"Time must be between {MIN_TIME_MINUTES} and {MAX_TIME_MINUTES} minutes",
                field="time_minutes",
                details={"value": self.time_minutes},
            )

        if not isinstance(self.focus_areas, list) or not self.focus_areas:
            raise PlanRequestValidationError(
                "At least one focus area is required", field="focus_areas"
            )

        if not isinstance(self.equipment, list):
            raise PlanRequestValidationError(
                "Equipment must be a list", field="equipment"
            )

        if self.primary_goal is not None:
            try:
                self.primary_goal = PrimaryGoal(self.primary_goal)
            except ValueError:
                raise PlanRequestValidationError(
                    f"Invalid primary goal: {self.primary_goal}", field="primary_goal"
                )

        return self

    def to_context(self) -> PlanContext:
        return PlanContext(
            energy=EnergyLevel(self.energy),
            time_minutes=self.time_minutes,
            focus_areas=list(self.focus_areas),
            equipment=list(self.equipment),
        )

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {
            "energy": EnergyLevel(self.energy).value,
            "time_minutes": self.time_minutes,
            "focus_areas": list(self.focus_areas),
            "goal_text": self.goal_text,
            "equipment": list(self.equipment),
        }
        if self.history is not None:
            result["history"] = self.history.to_dict()
        if self.primary_goal is not None:
            result["primary_goal"] = PrimaryGoal(self.primary_goal).value
        if self.today_recommendation is not None:
            result["today_recommendation"] = self.today_recommendation
        if self.recent_focus_summary is not None:
            result["recent_focus_summary"] = self.recent_focus_summary
        return result
