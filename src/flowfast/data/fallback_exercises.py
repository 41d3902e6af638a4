"""Bundled workouts used when the plan generator service is unavailable."""

from typing import Dict, List

from ..models.workouts import Exercise, ExerciseMode, ExerciseType


RECOVERY_LIGHT = "recoveryLight"
FLEXIBILITY_FOCUS = "flexibilityFocus"
HIGH_ENERGY_FULL_BODY = "highEnergyFullBody"
MEDIUM_ENERGY_STRENGTH = "mediumEnergyStrength"


def _timed(id: str, name: str, type: ExerciseType, duration: int, **kwargs) -> dict:
    return dict(id=id, name=name, type=type, mode=ExerciseMode.TIME, duration=duration, **kwargs)


def _reps(id: str, name: str, type: ExerciseType, sets: int, reps: int, **kwargs) -> dict:
    return dict(id=id, name=name, type=type, mode=ExerciseMode.REPS, sets=sets, reps=reps, **kwargs)


FALLBACK_WORKOUTS: Dict[str, List[dict]] = {
    RECOVERY_LIGHT: [
        _timed("1", "Gentle Yoga Flow", ExerciseType.STRETCH, 900, notes="Focus on relaxation"),
        _timed("2", "Breathing Practice", ExerciseType.BREATHING, 300),
        _timed("3", "Light Walking", ExerciseType.CARDIO, 600),
    ],
    FLEXIBILITY_FOCUS: [
        _timed("1", "Dynamic Warm-up", ExerciseType.STRETCH, 300),
        _timed("2", "Hip Openers", ExerciseType.STRETCH, 420),
        _timed("3", "Shoulder Mobility", ExerciseType.STRETCH, 360),
        _timed("4", "Hamstring Stretches", ExerciseType.STRETCH, 360),
        _timed("5", "Breathing Exercise", ExerciseType.BREATHING, 240),
    ],
    HIGH_ENERGY_FULL_BODY: [
        _reps("1", "Burpees", ExerciseType.CARDIO, 4, 10, calories_estimate=50),
        _reps("2", "Jump Squats", ExerciseType.STRENGTH, 4, 12, calories_estimate=45),
        _timed("3", "Mountain Climbers", ExerciseType.CARDIO, 240, calories_estimate=60),
        _reps("4", "Pull-ups", ExerciseType.STRENGTH, 3, 8, calories_estimate=40),
        _timed("5", "Cool Down Stretch", ExerciseType.STRETCH, 300, notes="Deep breathing"),
    ],
    MEDIUM_ENERGY_STRENGTH: [
        _reps("1", "Push-ups", ExerciseType.STRENGTH, 3, 12, calories_estimate=30),
        _reps("2", "Bodyweight Squats", ExerciseType.STRENGTH, 3, 15, calories_estimate=35),
        _timed("3", "Plank Hold", ExerciseType.STRENGTH, 180, calories_estimate=25),
        _reps("4", "Lunges", ExerciseType.STRENGTH, 3, 10, calories_estimate=30),
    ],
}


def get_fallback_exercises(workout_key: str) -> List[Exercise]:
    """Fresh Exercise objects for a bundled workout."""
    return [Exercise(**fields) for fields in FALLBACK_WORKOUTS[workout_key]]
