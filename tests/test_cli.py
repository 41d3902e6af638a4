"""Tests for the command-line interface."""

from types import SimpleNamespace

from flowfast.cli import cmd_auto_plan, cmd_goals, cmd_history, cmd_play, cmd_today
from flowfast.models.history import PrimaryGoal


def test_today(coach_service, capsys):
    cmd_today(SimpleNamespace(user="u1"), coach_service)
    out = capsys.readouterr().out
    assert "CATCH_UP" in out
    assert "0/3 workouts" in out


def test_goals_update(coach_service, capsys):
    args = SimpleNamespace(user="u1", workouts=4, minutes=None, goal="get_stronger")
    cmd_goals(args, coach_service)

    goals = coach_service.get_goals("u1")
    assert goals.primary_goal == PrimaryGoal.GET_STRONGER
    assert goals.target_workouts_per_week == 4
    assert goals.target_minutes_per_week == 90
    assert "Goals updated" in capsys.readouterr().out


def test_history_empty(coach_service, capsys):
    cmd_history(SimpleNamespace(user="u1", limit=10), coach_service)
    assert "No workouts yet" in capsys.readouterr().out


def test_auto_plan_and_play(coach_service, session_store, monkeypatch, capsys):
    cmd_auto_plan(SimpleNamespace(user="u1", start=True), coach_service)
    session = session_store.load("u1")
    assert session is not None

    answers = {"[n]ext": "n", "How was": "3", "Energy now": "medium", "Effort": "6"}

    def fake_input(prompt=""):
        # Blank prompts are rest screens; Enter skips them
        for marker, answer in answers.items():
            if marker in prompt:
                return answer
        return ""

    monkeypatch.setattr("builtins.input", fake_input)
    cmd_play(SimpleNamespace(user="u1", fast=True), coach_service)

    out = capsys.readouterr().out
    assert "Great work" in out
    assert session_store.load("u1") is None
    assert len(coach_service.get_history("u1")) == 1
