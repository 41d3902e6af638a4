"""Tests for building a steppable session from a workout plan."""

from flowfast.models.session import StepType, WorkoutSession
from flowfast.models.workouts import EnergyLevel, Exercise, ExerciseType, GroupType, WorkoutPlan
from flowfast.services.session_builder import (
    DEFAULT_REST_AFTER_EXERCISE,
    DEFAULT_REST_BETWEEN_SETS,
    build_workout_session,
    default_tooltip,
)


class TestBuildWorkoutSession:
    """Tests for build_workout_session."""

    def test_one_step_per_set(self, sample_plan):
        session = build_workout_session(sample_plan)

        assert session.id == sample_plan.id
        assert session.title == "Medium Intensity Workout"
        assert len(session) == 3
        assert [s.id for s in session.steps] == ["step-0", "step-1", "step-2"]
        assert [s.exercise_name for s in session.steps] == ["Push-ups", "Push-ups", "Plank Hold"]
        assert [(s.set_index, s.total_sets) for s in session.steps] == [(1, 2), (2, 2), (1, 1)]

    def test_reps_and_timed_steps(self, sample_plan):
        push_up, _, plank = build_workout_session(sample_plan).steps

        assert push_up.type == StepType.REPS
        assert push_up.reps == 12
        assert push_up.duration_seconds is None
        assert not push_up.is_timed

        assert plank.type == StepType.TIME
        assert plank.duration_seconds == 5
        assert plank.reps is None
        assert plank.is_timed

    def test_rest_between_sets_then_after_exercise(self, sample_plan):
        first, second, last = build_workout_session(sample_plan).steps
        assert first.rest_after_seconds == 45
        assert second.rest_after_seconds == 90
        assert last.rest_after_seconds == DEFAULT_REST_AFTER_EXERCISE

    def test_tooltip_prefers_notes(self, sample_plan):
        push_up, _, plank = build_workout_session(sample_plan).steps
        assert plank.tooltip_instructions == "Keep your hips level"
        assert push_up.tooltip_instructions == default_tooltip("Push-ups")

    def test_animation_asset_from_exercise_type(self, sample_plan):
        step = build_workout_session(sample_plan).steps[0]
        assert step.animation_asset_id == "anim-strength"

    def test_exercise_without_sets_gets_one_step(self, now):
        plan = WorkoutPlan(
            id="workout-1",
            date=now,
            exercises=[
                Exercise(id="1", name="Jumping Jacks", type=ExerciseType.CARDIO, duration=60,
                         group_type=GroupType.CIRCUIT, group_label="Circuit A",
                         tooltip="Land softly"),
            ],
            total_time=10,
            intensity=EnergyLevel.HIGH,
            focus_areas=["cardio"],
        )
        session = build_workout_session(plan)

        assert len(session) == 1
        step = session.steps[0]
        assert step.total_sets == 1
        assert step.group_label == "Circuit A"
        assert step.group_type == GroupType.CIRCUIT
        assert step.tooltip_instructions == "Land softly"
        assert session.title == "High Intensity Workout"

    def test_multi_set_defaults(self, now):
        plan = WorkoutPlan(
            id="workout-2",
            date=now,
            exercises=[Exercise(id="1", name="Squats", type=ExerciseType.STRENGTH, sets=3, reps=10)],
            total_time=10,
            intensity=EnergyLevel.LOW,
            focus_areas=["lower-body"],
        )
        rests = [s.rest_after_seconds for s in build_workout_session(plan).steps]
        assert rests == [DEFAULT_REST_BETWEEN_SETS, DEFAULT_REST_BETWEEN_SETS, DEFAULT_REST_AFTER_EXERCISE]

    def test_empty_plan_has_no_steps(self, now):
        plan = WorkoutPlan(
            id="workout-3", date=now, exercises=[], total_time=5,
            intensity=EnergyLevel.MEDIUM, focus_areas=[],
        )
        assert len(build_workout_session(plan)) == 0

    def test_session_survives_serialization(self, sample_plan):
        session = build_workout_session(sample_plan)
        restored = WorkoutSession.from_dict(session.to_dict())
        assert restored.steps == session.steps
        assert restored.workout_plan.context == sample_plan.context
