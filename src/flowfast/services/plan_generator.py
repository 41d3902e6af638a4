"""
Plan generation.

Three generators share the PlanGenerator interface:

- LLMPlanGenerator asks an OpenAI-compatible model for a plan through a
  forced tool call.
- FallbackPlanGenerator picks one of the bundled workouts and trims it to
  the available time. It never raises.
- ResilientPlanGenerator tries a primary generator and falls back to the
  bundled workouts on any app error.
"""

import logging
import math
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

from ..data.fallback_exercises import (
    FLEXIBILITY_FOCUS,
    HIGH_ENERGY_FULL_BODY,
    MEDIUM_ENERGY_STRENGTH,
    RECOVERY_LIGHT,
    get_fallback_exercises,
)
from ..exceptions import FlowFastError, LLMResponseInvalidError, PlanGenerationError
from ..llm.prompts import WORKOUT_TOOL_SCHEMA, build_system_prompt, build_user_prompt
from ..llm.providers import LLMClient
from ..models.plan_request import PlanRequest
from ..models.workouts import EnergyLevel, Exercise, FocusArea, PlanContext, WorkoutPlan


logger = logging.getLogger(__name__)

DEFAULT_REST_BETWEEN_SETS = 30
DEFAULT_REST_AFTER_EXERCISE = 60

# Below this share of the estimated duration the fallback list is shortened
TIME_FIT_RATIO = 0.8
MINUTES_PER_SET = 1.5
DEFAULT_EXERCISE_MINUTES = 2.0

FALLBACK_NOTICE = "Using a quick workout while the AI coach is unavailable."


class PlanGenerator(ABC):
    """Turns a PlanRequest into a WorkoutPlan."""

    @abstractmethod
    async def generate(self, request: PlanRequest) -> WorkoutPlan:
        """
        Generate a plan.

        Raises:
            PlanRequestValidationError: If the request is invalid
            PlanGenerationError / LLMError: If generation fails
        """
        pass


# ============================================================================
# LLM-backed generator
# ============================================================================

def validate_workout_response(arguments: Dict[str, Any]) -> None:
    """Reject tool output the app cannot turn into a plan."""
    exercises = arguments.get("exercises")
    if not isinstance(exercises, list):
        raise LLMResponseInvalidError(message="LLM response missing exercises array")
    if not exercises:
        raise LLMResponseInvalidError(message="LLM returned zero exercises")
    for index, exercise in enumerate(exercises):
        if not isinstance(exercise, dict):
            raise LLMResponseInvalidError(message=f"Exercise at position {index} is not an object")
        if not exercise.get("mode") or not exercise.get("name") or not exercise.get("category"):
            raise LLMResponseInvalidError(
                message=f"Exercise {exercise.get('id', index)} missing required fields",
                details={"exercise": exercise},
            )


def map_llm_exercise(data: Dict[str, Any], index: int) -> Exercise:
    """Map one tool-call exercise onto an Exercise."""
    mode = data["mode"]
    return Exercise(
        id=str(data.get("id") or f"ex-{index + 1}"),
        name=data["name"],
        type=data["category"],
        mode=mode,
        sets=data.get("sets"),
        reps=data.get("reps") if mode == "reps" else None,
        duration=data.get("duration_seconds") if mode == "time" else None,
        notes=data.get("note"),
        calories_estimate=data.get("calories_estimate") or 0,
        equipment=list(data.get("equipment") or []),
        rest_between_sets_seconds=data.get("rest_between_sets_seconds") or DEFAULT_REST_BETWEEN_SETS,
        rest_after_exercise_seconds=data.get("rest_after_exercise_seconds") or DEFAULT_REST_AFTER_EXERCISE,
        group_type=data.get("group_type") or None,
        group_label=data.get("group_label") or None,
        tooltip=data.get("tooltip"),
    )


def map_llm_response(arguments: Dict[str, Any], request: PlanRequest) -> WorkoutPlan:
    """Build a WorkoutPlan from validated tool-call arguments."""
    try:
        exercises = [map_llm_exercise(e, i) for i, e in enumerate(arguments["exercises"])]
    except (KeyError, ValueError, TypeError) as e:
        raise PlanGenerationError(
            f"Could not map LLM exercises: {e}",
            details={"exercise_count": len(arguments.get("exercises", []))},
        )
    plan = WorkoutPlan.create(
        exercises=exercises,
        total_time=request.time_minutes,
        intensity=request.energy,
        focus_areas=request.focus_areas,
    )
    return plan.with_context(request.to_context())


class LLMPlanGenerator(PlanGenerator):
    """Plan generator backed by an OpenAI-compatible chat model."""

    def __init__(self, client: LLMClient):
        self.client = client

    async def generate(self, request: PlanRequest) -> WorkoutPlan:
        request.validate()
        logger.info(
            f"Generating LLM plan: energy={request.energy.value}, "
            f"time={request.time_minutes}min, focus={request.focus_areas}"
        )
        arguments = await self.client.tool_call(
            system=build_system_prompt(request),
            user=build_user_prompt(request),
            tool=WORKOUT_TOOL_SCHEMA,
            validate=validate_workout_response,
        )
        plan = map_llm_response(arguments, request)
        logger.info(
            f"LLM plan {plan.id} generated with {len(plan.exercises)} exercises "
            f"by {self.client.get_model_name()}; usage: {self.client.metrics.to_dict()}"
        )
        return plan


# ============================================================================
# Local fallback
# ============================================================================

def estimate_exercise_minutes(exercise: Exercise) -> float:
    """Rough duration of one exercise in minutes."""
    if exercise.duration:
        return exercise.duration / 60
    if exercise.sets and exercise.reps:
        return exercise.sets * MINUTES_PER_SET
    return DEFAULT_EXERCISE_MINUTES


def select_fallback_workout(energy: EnergyLevel, focus_areas: List[str]) -> str:
    """Pick the bundled workout that best matches energy and focus."""
    if energy == EnergyLevel.LOW or FocusArea.RECOVERY.value in focus_areas:
        return RECOVERY_LIGHT
    if FocusArea.FLEXIBILITY.value in focus_areas:
        return FLEXIBILITY_FOCUS
    if energy == EnergyLevel.HIGH:
        return HIGH_ENERGY_FULL_BODY
    return MEDIUM_ENERGY_STRENGTH


def fit_to_time(exercises: List[Exercise], time_minutes: int) -> List[Exercise]:
    """Shorten the list when the available time is well below its estimate.

    Keeps the first ceil(len * ratio) exercises, and never fewer than one.
    """
    estimated = sum(estimate_exercise_minutes(e) for e in exercises)
    if not exercises or estimated <= 0:
        return exercises
    ratio = time_minutes / estimated
    if ratio >= TIME_FIT_RATIO:
        return exercises
    keep = max(1, math.ceil(len(exercises) * ratio))
    return exercises[:keep]


class FallbackPlanGenerator(PlanGenerator):
    """Deterministic generator using only bundled workouts."""

    async def generate(self, request: PlanRequest) -> WorkoutPlan:
        return self.generate_sync(request)

    def generate_sync(self, request: PlanRequest) -> WorkoutPlan:
        """Build a fallback plan; tolerant of unvalidated input."""
        try:
            energy = EnergyLevel(request.energy)
        except ValueError:
            energy = EnergyLevel.MEDIUM
        focus_areas = list(request.focus_areas or [])
        time_minutes = request.time_minutes if isinstance(request.time_minutes, int) else 0

        workout_key = select_fallback_workout(energy, focus_areas)
        exercises = fit_to_time(get_fallback_exercises(workout_key), time_minutes)
        logger.info(
            f"Fallback plan '{workout_key}' with {len(exercises)} exercises "
            f"for {time_minutes}min"
        )

        plan = WorkoutPlan.create(
            exercises=exercises,
            total_time=time_minutes,
            intensity=energy,
            focus_areas=focus_areas,
            is_fallback=True,
        )
        return plan.with_context(PlanContext(
            energy=energy,
            time_minutes=time_minutes,
            focus_areas=focus_areas,
            equipment=list(request.equipment or []),
        ))


# ============================================================================
# Primary + fallback
# ============================================================================

class ResilientPlanGenerator(PlanGenerator):
    """
    Tries the primary generator, then the bundled fallback.

    Request validation errors are raised before either generator runs.
    """

    def __init__(
        self,
        primary: Optional[PlanGenerator],
        fallback: Optional[FallbackPlanGenerator] = None,
    ):
        self.primary = primary
        self.fallback = fallback or FallbackPlanGenerator()

    async def generate(self, request: PlanRequest) -> WorkoutPlan:
        request.validate()
        if self.primary is None:
            logger.info("No primary plan generator configured, using fallback")
            return await self.fallback.generate(request)
        try:
            return await self.primary.generate(request)
        except FlowFastError as e:
            logger.warning(
                f"Plan generation failed ({e.code.value}: {e.message}); "
                f"using fallback for energy={request.energy.value}, "
                f"time={request.time_minutes}min, focus={request.focus_areas}"
            )
            return await self.fallback.generate(request)
