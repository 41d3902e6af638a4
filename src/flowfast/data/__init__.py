"""Static workout data bundled with the app."""

from .fallback_exercises import FALLBACK_WORKOUTS, get_fallback_exercises

__all__ = ["FALLBACK_WORKOUTS", "get_fallback_exercises"]
