"""Tests for the Auto Today parameter builder."""

import pytest

from flowfast.models.history import PrimaryGoal, WeeklyGoals
from flowfast.models.workouts import EnergyLevel, FocusArea
from flowfast.recommendations.auto_plan import (
    FIRST_WORKOUT_GOAL_TEXT,
    build_auto_plan_input,
    build_auto_plan_input_from,
    select_energy,
    select_focus_areas,
    select_session_minutes,
    summarize_recent_focus,
)
from flowfast.recommendations.today import TodayRecommendation


class TestSelectSessionMinutes:
    """Weekly minutes divided by weekly workouts."""

    def test_default_goals(self):
        assert select_session_minutes(WeeklyGoals()) == 30

    def test_rounds_half_up(self):
        goals = WeeklyGoals(target_workouts_per_week=4, target_minutes_per_week=90)
        assert select_session_minutes(goals) == 23

    def test_clamped_to_minimum(self):
        goals = WeeklyGoals(target_workouts_per_week=7, target_minutes_per_week=30)
        assert select_session_minutes(goals) == 15

    def test_clamped_to_maximum(self):
        goals = WeeklyGoals(target_workouts_per_week=1, target_minutes_per_week=500)
        assert select_session_minutes(goals) == 60


class TestSelectEnergy:

    def test_recovery_is_low(self):
        assert select_energy(TodayRecommendation.RECOVERY, 9) == EnergyLevel.LOW

    def test_push_with_headroom_is_high(self):
        assert select_energy(TodayRecommendation.PUSH, 5) == EnergyLevel.HIGH
        assert select_energy(TodayRecommendation.PUSH, None) == EnergyLevel.HIGH

    @pytest.mark.parametrize("recommendation", [
        TodayRecommendation.MAINTAIN,
        TodayRecommendation.CATCH_UP,
    ])
    def test_everything_else_is_medium(self, recommendation):
        assert select_energy(recommendation, 5) == EnergyLevel.MEDIUM


class TestFocusSelection:
    """Least-trained focus areas over the last three sessions."""

    def test_no_history_is_full_body(self):
        summary = summarize_recent_focus([])
        assert select_focus_areas(summary, has_history=False) == ["full-body"]

    def test_counts_start_at_zero_for_every_area(self):
        summary = summarize_recent_focus([])
        assert summary.focus_counts == {area.value: 0 for area in FocusArea}

    def test_picks_untrained_areas_in_declaration_order(self, make_entry):
        entries = [
            make_entry(days_ago=1, focus_areas=["upper-body"]),
            make_entry(days_ago=2, focus_areas=["lower-body"]),
            make_entry(days_ago=3, focus_areas=["core"]),
        ]
        summary = summarize_recent_focus(entries)
        assert select_focus_areas(summary, has_history=True) == ["cardio", "full-body"]

    def test_only_three_most_recent_sessions_count(self, make_entry):
        entries = [
            make_entry(days_ago=10, focus_areas=["cardio"]),
            make_entry(days_ago=1, focus_areas=["upper-body", "lower-body"]),
            make_entry(days_ago=2, focus_areas=["core", "full-body"]),
            make_entry(days_ago=3, focus_areas=["strength", "flexibility", "recovery"]),
        ]
        summary = summarize_recent_focus(entries)
        assert len(summary.last_sessions) == 3
        assert summary.focus_counts["cardio"] == 0
        assert select_focus_areas(summary, has_history=True) == ["cardio"]

    def test_unknown_tags_are_ignored(self, make_entry):
        summary = summarize_recent_focus([make_entry(focus_areas=["yoga", "core"])])
        assert "yoga" not in summary.focus_counts
        assert summary.focus_counts["core"] == 1

    def test_last_sessions_newest_first(self, make_entry):
        older = make_entry(days_ago=4, focus_areas=["core"])
        newer = make_entry(days_ago=1, focus_areas=["cardio"])
        summary = summarize_recent_focus([older, newer])
        assert [s["focus_areas"] for s in summary.last_sessions] == [["cardio"], ["core"]]


class TestBuildAutoPlanInput:
    """Full parameter derivation."""

    def test_first_workout(self, now):
        auto_input = build_auto_plan_input_from(WeeklyGoals(), [], now)

        assert auto_input.today_recommendation == TodayRecommendation.CATCH_UP
        assert auto_input.energy == EnergyLevel.MEDIUM
        assert auto_input.time_minutes == 30
        assert auto_input.focus_areas == ["full-body"]
        assert auto_input.goal_text == FIRST_WORKOUT_GOAL_TEXT
        assert auto_input.history.sessions_completed == 0
        assert auto_input.history.days_since_last_workout is None

    def test_goal_text_names_goal_and_focus(self, make_entry, now):
        goals = WeeklyGoals(primary_goal=PrimaryGoal.GET_STRONGER)
        entries = [make_entry(days_ago=1, focus_areas=["upper-body"])]
        auto_input = build_auto_plan_input_from(goals, entries, now)

        assert "get stronger" in auto_input.goal_text
        assert "lower-body" in auto_input.goal_text
        assert auto_input.primary_goal == PrimaryGoal.GET_STRONGER

    def test_push_day_gets_high_energy(self, make_entry, now):
        entries = [
            make_entry(days_ago=0.1, rpe=5),
            make_entry(days_ago=1, rpe=5),
            make_entry(days_ago=2, rpe=6),
        ]
        auto_input = build_auto_plan_input_from(WeeklyGoals(), entries, now)
        assert auto_input.today_recommendation == TodayRecommendation.PUSH
        assert auto_input.energy == EnergyLevel.HIGH

    def test_independent_of_entry_order(self, make_entry, now):
        entries = [
            make_entry(days_ago=2, focus_areas=["core"], rpe=7, feedback="too_hard"),
            make_entry(days_ago=0.2, focus_areas=["cardio"], rpe=5, feedback="too_easy"),
            make_entry(days_ago=6, focus_areas=["upper-body"], rpe=4),
            make_entry(days_ago=1, focus_areas=["lower-body", "core"], rpe=6),
        ]
        forward = build_auto_plan_input_from(WeeklyGoals(), entries, now)
        backward = build_auto_plan_input_from(WeeklyGoals(), entries[::-1], now)
        assert forward.to_dict() == backward.to_dict()

    def test_reads_from_stores(self, goals_store, history_store, make_entry, now):
        goals_store.set("u1", WeeklyGoals(target_workouts_per_week=2, target_minutes_per_week=120))
        history_store.append("u1", make_entry(days_ago=1, focus_areas=["core"], rpe=9))

        auto_input = build_auto_plan_input("u1", goals_store, history_store, now)

        assert auto_input.today_recommendation == TodayRecommendation.RECOVERY
        assert auto_input.energy == EnergyLevel.LOW
        assert auto_input.time_minutes == 60

    def test_to_plan_request_is_valid(self, now):
        auto_input = build_auto_plan_input_from(WeeklyGoals(), [], now)
        request = auto_input.to_plan_request(["dumbbells"]).validate()

        assert request.equipment == ["dumbbells"]
        assert request.today_recommendation == "catch_up"
        assert request.recent_focus_summary["focus_counts"]["full-body"] == 0
