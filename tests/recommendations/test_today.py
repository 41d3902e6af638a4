"""Tests for the Today recommendation engine."""

import pytest

from flowfast.models.history import WeeklyGoals
from flowfast.recommendations.today import (
    NO_HISTORY_GAP_DAYS,
    RecommendationInputs,
    TodayRecommendation,
    decide_recommendation,
    describe_recommendation,
    recommend_today,
)


def inputs(workouts=3, target=3, last_rpe=None, avg_rpe=None, days=1):
    return RecommendationInputs(
        workouts_this_week=workouts,
        target_workouts_per_week=target,
        last_rpe=last_rpe,
        avg_rpe=avg_rpe,
        days_since_last_workout=days,
    )


class TestDecideRecommendation:
    """Rule evaluation in priority order."""

    def test_behind_by_two_is_catch_up(self):
        assert decide_recommendation(inputs(workouts=1, target=3)) == TodayRecommendation.CATCH_UP

    def test_behind_by_one_is_not_catch_up(self):
        assert decide_recommendation(inputs(workouts=2, target=3)) != TodayRecommendation.CATCH_UP

    def test_catch_up_beats_high_rpe(self):
        result = decide_recommendation(inputs(workouts=0, target=4, last_rpe=10, avg_rpe=9))
        assert result == TodayRecommendation.CATCH_UP

    @pytest.mark.parametrize("last_rpe,avg_rpe", [(8, None), (9, 5.0), (None, 8.0), (5, 8.5)])
    def test_high_rpe_is_recovery(self, last_rpe, avg_rpe):
        result = decide_recommendation(inputs(last_rpe=last_rpe, avg_rpe=avg_rpe))
        assert result == TodayRecommendation.RECOVERY

    def test_recovery_beats_layoff(self):
        assert decide_recommendation(inputs(last_rpe=9, days=10)) == TodayRecommendation.RECOVERY

    def test_layoff_is_maintain(self):
        assert decide_recommendation(inputs(last_rpe=4, days=3)) == TodayRecommendation.MAINTAIN

    def test_on_target_with_headroom_is_push(self):
        assert decide_recommendation(inputs(last_rpe=6, days=1)) == TodayRecommendation.PUSH

    def test_missing_rpe_defaults_to_push_headroom(self):
        assert decide_recommendation(inputs(last_rpe=None, days=0)) == TodayRecommendation.PUSH

    def test_on_target_with_rpe_seven_is_maintain(self):
        assert decide_recommendation(inputs(last_rpe=7, days=1)) == TodayRecommendation.MAINTAIN

    def test_slightly_behind_is_maintain(self):
        assert decide_recommendation(inputs(workouts=2, target=3, last_rpe=5)) == TodayRecommendation.MAINTAIN


class TestRecommendToday:
    """End-to-end recommendations from history entries."""

    def test_empty_history_is_catch_up(self, now):
        assert recommend_today([], WeeklyGoals(), now) == TodayRecommendation.CATCH_UP

    def test_empty_history_with_one_workout_goal(self, now):
        """With nothing to catch up on, no history reads as a long layoff."""
        goals = WeeklyGoals(target_workouts_per_week=1)
        assert recommend_today([], goals, now) == TodayRecommendation.MAINTAIN
        assert NO_HISTORY_GAP_DAYS >= 3

    def test_single_hard_session_three_days_ago_behind_goal(self, make_entry, now):
        """One workout this week against a goal of 3 is still behind."""
        entries = [make_entry(days_ago=3, rpe=9)]
        assert recommend_today(entries, WeeklyGoals(), now) == TodayRecommendation.CATCH_UP

    def test_hard_session_three_days_ago_on_pace_is_recovery(self, make_entry, now):
        """Two sessions this week clears catch-up, so the RPE 9 wins."""
        entries = [make_entry(days_ago=3.05, rpe=5), make_entry(days_ago=3, rpe=9)]
        assert recommend_today(entries, WeeklyGoals(), now) == TodayRecommendation.RECOVERY

    def test_single_hard_session_with_low_goal(self, make_entry, now):
        entries = [make_entry(days_ago=1, rpe=9)]
        goals = WeeklyGoals(target_workouts_per_week=2)
        assert recommend_today(entries, goals, now) == TodayRecommendation.RECOVERY

    def test_on_track_and_fresh_is_push(self, make_entry, now):
        entries = [
            make_entry(days_ago=0.1, rpe=5),
            make_entry(days_ago=1, rpe=6),
            make_entry(days_ago=2, rpe=5),
        ]
        assert recommend_today(entries, WeeklyGoals(), now) == TodayRecommendation.PUSH

    def test_entry_order_does_not_matter(self, make_entry, now):
        entries = [
            make_entry(days_ago=2, rpe=5),
            make_entry(days_ago=0.1, rpe=8),
            make_entry(days_ago=1, rpe=4),
        ]
        goals = WeeklyGoals()
        assert recommend_today(entries, goals, now) == recommend_today(entries[::-1], goals, now)


def test_every_recommendation_has_a_message():
    for recommendation in TodayRecommendation:
        assert describe_recommendation(recommendation)
