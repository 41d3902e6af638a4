"""Turns a WorkoutPlan into the flat list of steps played by the player."""

import itertools
from typing import Iterator, List

from ..models.session import StepType, WorkoutSession, WorkoutStep
from ..models.workouts import Exercise, WorkoutPlan


DEFAULT_REST_BETWEEN_SETS = 30
DEFAULT_REST_AFTER_EXERCISE = 60


def default_tooltip(exercise_name: str) -> str:
    return f"Perform {exercise_name} with proper form. Focus on controlled movements."


def build_exercise_steps(exercise: Exercise, counter: Iterator[int]) -> List[WorkoutStep]:
    """One step per set; an exercise without sets gets a single step."""
    total_sets = exercise.sets or 1
    step_type = StepType.TIME if exercise.duration else StepType.REPS
    tooltip = exercise.notes or exercise.tooltip or default_tooltip(exercise.name)

    steps = []
    for set_index in range(1, total_sets + 1):
        if set_index < total_sets:
            rest = exercise.rest_between_sets_seconds or DEFAULT_REST_BETWEEN_SETS
        else:
            rest = exercise.rest_after_exercise_seconds or DEFAULT_REST_AFTER_EXERCISE
        steps.append(WorkoutStep(
            id=f"step-{next(counter)}",
            exercise_name=exercise.name,
            type=step_type,
            set_index=set_index,
            total_sets=total_sets,
            duration_seconds=exercise.duration if step_type == StepType.TIME else None,
            reps=exercise.reps if step_type == StepType.REPS else None,
            group_type=exercise.group_type,
            group_label=exercise.group_label,
            animation_asset_id=f"anim-{exercise.type.value}",
            tooltip_instructions=tooltip,
            rest_after_seconds=rest,
        ))
    return steps


def session_title(plan: WorkoutPlan) -> str:
    return f"{plan.intensity.value.capitalize()} Intensity Workout"


def build_workout_session(plan: WorkoutPlan) -> WorkoutSession:
    """
    Build a session from a plan.

    Steps follow plan order, set by set. Step ids come from one counter
    for the whole session ("step-0", "step-1", ...). A plan without
    exercises yields a session without steps.

    Args:
        plan: The workout plan to play

    Returns:
        WorkoutSession whose id is the plan id
    """
    counter = itertools.count()
    steps: List[WorkoutStep] = []
    for exercise in plan.exercises:
        steps.extend(build_exercise_steps(exercise, counter))

    return WorkoutSession(
        id=plan.id,
        title=session_title(plan),
        workout_plan=plan,
        steps=steps,
    )
