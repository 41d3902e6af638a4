"""Tests for the CoachService facade."""

import pytest

from flowfast.config import get_settings
from flowfast.db.repositories import (
    InMemoryGoalsStore,
    InMemoryHistoryStore,
    LocalCache,
    TieredGoalsStore,
    TieredHistoryStore,
)
from flowfast.exceptions import PlanRequestValidationError, SessionNotFoundError, StoreError
from flowfast.models.history import DifficultyFeedback, WeeklyGoals
from flowfast.models.workouts import EnergyLevel
from flowfast.services.coach import CoachService, StepRedirect, create_coach_service
from flowfast.services.plan_generator import FALLBACK_NOTICE, ResilientPlanGenerator


class TestTodaySummary:

    def test_new_user(self, coach_service, now):
        summary = coach_service.get_today_summary("u1", now)

        assert summary.recommendation == "catch_up"
        assert summary.message
        assert summary.goals == WeeklyGoals()
        assert summary.stats["total_workouts"] == 0
        assert summary.history["sessions_completed"] == 0

    def test_with_history(self, coach_service, history_store, make_entry, now):
        for days_ago in (0.1, 1, 2):
            history_store.append("u1", make_entry(days_ago=days_ago, rpe=5))

        summary = coach_service.get_today_summary("u1", now)

        assert summary.recommendation == "push"
        assert summary.stats["this_week_workouts"] == 3
        assert summary.stats["current_streak"] == 3


class OfflineHistoryStore(InMemoryHistoryStore):
    def list(self, user_id):
        raise StoreError("history unavailable", user_id=user_id)


class OfflineGoalsStore(InMemoryGoalsStore):
    def get(self, user_id):
        raise StoreError("goals unavailable", user_id=user_id)

    def get_equipment(self, user_id):
        raise StoreError("goals unavailable", user_id=user_id)


class TestStoreOutage:
    """Reads with the primary store down and nothing cached locally."""

    @pytest.fixture
    def offline_coach(self, tmp_path, session_store, settings):
        cache = LocalCache(tmp_path / "cache.json")
        return CoachService(
            history_store=TieredHistoryStore(OfflineHistoryStore(), cache),
            goals_store=TieredGoalsStore(OfflineGoalsStore(), cache),
            session_store=session_store,
            plan_generator=ResilientPlanGenerator(primary=None),
            settings=settings,
        )

    def test_auto_plan_input_raises(self, offline_coach, now):
        with pytest.raises(StoreError):
            offline_coach.get_auto_plan_input("u1", now)

    def test_today_summary_raises(self, offline_coach, now):
        with pytest.raises(StoreError):
            offline_coach.get_today_summary("u1", now)


class TestPlans:

    @pytest.mark.asyncio
    async def test_auto_plan_uses_fallback_notice(self, coach_service, goals_store, now):
        goals_store.set_equipment("u1", ["mat"])
        result = await coach_service.generate_auto_plan("u1", now)

        assert result.plan.is_fallback
        assert result.notice == FALLBACK_NOTICE
        assert result.plan.context.time_minutes == 30
        assert result.plan.context.focus_areas == ["full-body"]
        assert result.plan.context.equipment == ["mat"]

    @pytest.mark.asyncio
    async def test_explicit_plan(self, coach_service):
        result = await coach_service.generate_plan(
            "u1", energy="low", time_minutes=20, focus_areas=["flexibility"],
        )
        assert result.plan.intensity == EnergyLevel.LOW
        assert result.plan.exercises[0].name == "Gentle Yoga Flow"

    @pytest.mark.asyncio
    async def test_explicit_plan_validation(self, coach_service):
        with pytest.raises(PlanRequestValidationError):
            await coach_service.generate_plan("u1", energy="medium", time_minutes=3, focus_areas=["core"])


class TestSessions:

    def test_start_and_load_steps(self, coach_service, sample_plan):
        session = coach_service.start_workout("u1", sample_plan)

        lookup = coach_service.load_step("u1", session.id, 1)
        assert lookup.step.id == "step-1"
        assert lookup.step_count == 3
        assert lookup.redirect is None

    def test_load_step_redirects(self, coach_service, sample_plan):
        session = coach_service.start_workout("u1", sample_plan)

        assert coach_service.load_step("u1", session.id, -1).redirect == StepRedirect.FIRST_STEP
        assert coach_service.load_step("u1", session.id, 3).redirect == StepRedirect.COMPLETE
        assert coach_service.load_step("u1", "workout-stale", 0).redirect == StepRedirect.START
        assert coach_service.load_step("u2", session.id, 0).redirect == StepRedirect.START

    def test_new_session_replaces_old(self, coach_service, sample_plan):
        first = coach_service.start_workout("u1", sample_plan)
        sample_plan.id = "workout-second"
        coach_service.start_workout("u1", sample_plan)

        with pytest.raises(SessionNotFoundError):
            coach_service.get_session("u1", first.id)

    def test_player_exit_clears_session(self, coach_service, session_store, sample_plan):
        session = coach_service.start_workout("u1", sample_plan)
        player = coach_service.create_player("u1", session)

        player.exit()

        assert session_store.load("u1") is None

    def test_player_uses_settings(self, coach_service, sample_plan):
        session = coach_service.start_workout("u1", sample_plan)
        player = coach_service.create_player("u1", session)
        player.next()
        assert player.rest_remaining == 30


class TestFeedback:

    def test_feedback_records_history_and_clears_session(
        self, coach_service, history_store, session_store, sample_plan, now,
    ):
        session = coach_service.start_workout("u1", sample_plan)

        result = coach_service.submit_feedback(
            "u1", rating=2, post_energy="medium", rpe=8, session_id=session.id, now=now,
        )

        assert result.saved
        assert result.entry.feedback_difficulty == DifficultyFeedback.TOO_HARD
        assert [e.id for e in history_store.list("u1")] == [sample_plan.id]
        assert session_store.load("u1") is None

    def test_feedback_uses_current_session(self, coach_service, sample_plan):
        coach_service.start_workout("u1", sample_plan)
        result = coach_service.submit_feedback("u1", rating=4, post_energy="high", rpe=4)
        assert result.entry.id == sample_plan.id

    def test_feedback_without_session(self, coach_service):
        with pytest.raises(SessionNotFoundError):
            coach_service.submit_feedback("u1", rating=3, post_energy="medium", rpe=5)

    def test_feedback_changes_next_recommendation(self, coach_service, goals_store, sample_plan, now):
        goals_store.set("u1", WeeklyGoals(target_workouts_per_week=1))
        coach_service.start_workout("u1", sample_plan)
        coach_service.submit_feedback("u1", rating=1, post_energy="low", rpe=9, now=now)

        assert coach_service.get_today_summary("u1", now).recommendation == "recovery"


class TestProfile:

    def test_goals(self, coach_service):
        goals = WeeklyGoals(target_workouts_per_week=5, target_minutes_per_week=150)
        coach_service.set_goals("u1", goals)
        assert coach_service.get_goals("u1") == goals

    def test_equipment_is_cleaned(self, coach_service):
        assert coach_service.set_equipment("u1", [" dumbbells ", "", "  ", "mat"]) == ["dumbbells", "mat"]
        assert coach_service.get_equipment("u1") == ["dumbbells", "mat"]

    def test_history_newest_first_with_limit(self, coach_service, history_store, make_entry):
        entries = [make_entry(days_ago=d) for d in (5, 1, 3)]
        for entry in entries:
            history_store.append("u1", entry)

        history = coach_service.get_history("u1", limit=2)
        assert [e.id for e in history] == [entries[1].id, entries[2].id]


def test_create_coach_service_without_api_key(settings, sample_plan, monkeypatch):
    monkeypatch.delenv("OPENAI_API_KEY", raising=False)
    monkeypatch.delenv("FLOWFAST_OPENAI_API_KEY", raising=False)
    get_settings.cache_clear()
    coach = create_coach_service(settings)
    get_settings.cache_clear()

    assert isinstance(coach.plan_generator, ResilientPlanGenerator)
    assert coach.plan_generator.primary is None

    session = coach.start_workout("u1", sample_plan)
    result = coach.submit_feedback("u1", rating=3, post_energy="medium", rpe=6, session_id=session.id)
    assert result.saved
    assert [e.id for e in coach.get_history("u1")] == [sample_plan.id]
    assert settings.history_db_path.exists()
