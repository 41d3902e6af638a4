"""Pytest configuration and fixtures."""

from datetime import datetime, timedelta, timezone
import uuid

import pytest

from flowfast.config import Settings
from flowfast.db.repositories import (
    InMemoryGoalsStore,
    InMemoryHistoryStore,
    InMemorySessionStore,
)
from flowfast.models.history import DifficultyFeedback, WorkoutHistoryEntry
from flowfast.models.workouts import (
    EnergyLevel,
    Exercise,
    ExerciseType,
    PlanContext,
    WorkoutPlan,
)
from flowfast.services.coach import CoachService
from flowfast.services.plan_generator import ResilientPlanGenerator


# Thursday
NOW = datetime(2025, 6, 12, 10, 0, tzinfo=timezone.utc)


@pytest.fixture
def now():
    """Fixed reference time (a Thursday, UTC)."""
    return NOW


@pytest.fixture
def make_entry(now):
    """Factory for history entries dated relative to ``now``."""

    def _make(
        days_ago: float = 0,
        focus_areas=None,
        rpe=None,
        feedback=None,
        energy=EnergyLevel.MEDIUM,
        time_minutes=30,
        entry_id=None,
    ) -> WorkoutHistoryEntry:
        return WorkoutHistoryEntry(
            id=entry_id or f"workout-{uuid.uuid4().hex[:8]}",
            date=now - timedelta(days=days_ago),
            energy=energy,
            time_minutes_planned=time_minutes,
            focus_areas=list(focus_areas or ["full-body"]),
            exercises_count=4,
            total_sets=10,
            feedback_difficulty=DifficultyFeedback(feedback) if feedback else None,
            rpe=rpe,
        )

    return _make


@pytest.fixture
def sample_plan():
    """A small plan mixing a reps exercise and a timed exercise."""
    plan = WorkoutPlan(
        id="workout-abc123",
        date=NOW,
        exercises=[
            Exercise(
                id="1",
                name="Push-ups",
                type=ExerciseType.STRENGTH,
                mode="reps",
                sets=2,
                reps=12,
                calories_estimate=30,
                rest_between_sets_seconds=45,
                rest_after_exercise_seconds=90,
            ),
            Exercise(
                id="2",
                name="Plank Hold",
                type=ExerciseType.STRENGTH,
                mode="time",
                duration=5,
                notes="Keep your hips level",
            ),
        ],
        total_time=20,
        intensity=EnergyLevel.MEDIUM,
        focus_areas=["core"],
    )
    return plan.with_context(PlanContext(
        energy=EnergyLevel.HIGH,
        time_minutes=25,
        focus_areas=["core", "upper-body"],
        equipment=["mat"],
    ))


@pytest.fixture
def settings(tmp_path):
    """Settings pointing storage at a temporary directory."""
    return Settings(
        data_dir=tmp_path,
        openai_api_key="",
        pre_countdown_seconds=3,
        rest_between_sets_seconds=30,
    )


@pytest.fixture
def history_store():
    return InMemoryHistoryStore()


@pytest.fixture
def goals_store():
    return InMemoryGoalsStore()


@pytest.fixture
def session_store():
    return InMemorySessionStore()


@pytest.fixture
def coach_service(history_store, goals_store, session_store, settings):
    """CoachService on in-memory stores, using only the bundled fallback plans."""
    return CoachService(
        history_store=history_store,
        goals_store=goals_store,
        session_store=session_store,
        plan_generator=ResilientPlanGenerator(primary=None),
        settings=settings,
    )
