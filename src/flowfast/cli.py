#!/usr/bin/env python3
"""
FlowFast Coach CLI.

Adaptive workout recommendations and a terminal workout player.

Usage:
    flowfast today
    flowfast auto-plan --start
    flowfast goals --workouts 4 --minutes 120 --goal get_stronger
    flowfast history --limit 10
    flowfast play
"""

import argparse
import asyncio
import sys
import time
from typing import Optional

from .config import get_settings
from .exceptions import FlowFastError
from .models.history import PrimaryGoal, WeeklyGoals
from .models.workouts import EnergyLevel, WorkoutPlan
from .services.coach import CoachService, create_coach_service
from .services.player import ManualTicker, RestStatus, SessionStatus, TimerStatus, WorkoutPlayer
from .utils.log_sanitizer import configure_logging


# ANSI color codes
class Colors:
    RED = "\033[91m"
    YELLOW = "\033[93m"
    GREEN = "\033[92m"
    BLUE = "\033[94m"
    CYAN = "\033[96m"
    BOLD = "\033[1m"
    RESET = "\033[0m"


def get_recommendation_color(recommendation: str) -> str:
    colors = {
        "push": Colors.GREEN,
        "maintain": Colors.BLUE,
        "recovery": Colors.YELLOW,
        "catch_up": Colors.RED,
    }
    return colors.get(recommendation, Colors.RESET)


def print_header(title: str) -> None:
    print()
    print(f"{Colors.BOLD}FlowFast - {title}{Colors.RESET}")
    print("=" * 40)
    print()


def print_plan(plan: WorkoutPlan, notice: Optional[str] = None) -> None:
    if notice:
        print(f"{Colors.YELLOW}{notice}{Colors.RESET}")
        print()
    print(f"Plan {plan.id}: {plan.intensity.value} intensity, {plan.total_time} min")
    print(f"Focus: {', '.join(plan.focus_areas)}")
    print()
    for i, exercise in enumerate(plan.exercises, 1):
        if exercise.duration:
            volume = f"{exercise.sets or 1} x {exercise.duration}s"
        else:
            volume = f"{exercise.sets or 1} x {exercise.reps or '-'} reps"
        label = f" [{exercise.group_label}]" if exercise.group_label else ""
        print(f"  {i}. {exercise.name:<24} {volume}{label}")
    print()


def cmd_today(args, coach: CoachService):
    """Show today's recommendation and weekly stats."""
    print_header("Today")
    summary = coach.get_today_summary(args.user)
    color = get_recommendation_color(summary.recommendation)
    print(f"Recommendation: {color}{summary.recommendation.upper()}{Colors.RESET}")
    print(f"  {summary.message}")
    print()
    stats = summary.stats
    goals = summary.goals
    print(f"This week:      {stats['this_week_workouts']}/{goals.target_workouts_per_week} workouts")
    print(f"Current streak: {stats['current_streak']} days")
    print(f"Total workouts: {stats['total_workouts']}")
    print()


def cmd_auto_plan(args, coach: CoachService):
    """Generate an Auto Today plan."""
    print_header("Auto Today")
    auto_input = coach.get_auto_plan_input(args.user)
    print(f"Recommendation: {auto_input.today_recommendation.value}")
    print(f"Energy: {auto_input.energy.value}, time: {auto_input.time_minutes} min")
    print(f"Focus: {', '.join(auto_input.focus_areas)}")
    print(f"{auto_input.goal_text}")
    print()

    result = asyncio.run(coach.generate_auto_plan(args.user))
    print_plan(result.plan, result.notice)

    if args.start:
        session = coach.start_workout(args.user, result.plan)
        print(f"{Colors.GREEN}Session {session.id} ready ({len(session)} steps).{Colors.RESET}")
        print("Run 'flowfast play' to start.")
        print()


def cmd_goals(args, coach: CoachService):
    """Show or update weekly goals."""
    print_header("Weekly Goals")
    goals = coach.get_goals(args.user)
    if any(v is not None for v in (args.workouts, args.minutes, args.goal)):
        goals = coach.set_goals(args.user, WeeklyGoals(
            primary_goal=args.goal or goals.primary_goal,
            target_workouts_per_week=args.workouts or goals.target_workouts_per_week,
            target_minutes_per_week=args.minutes or goals.target_minutes_per_week,
        ))
        print(f"{Colors.GREEN}Goals updated.{Colors.RESET}")
    print(f"  Primary goal: {goals.primary_goal.value.replace('_', ' ')}")
    print(f"  Workouts/week: {goals.target_workouts_per_week}")
    print(f"  Minutes/week: {goals.target_minutes_per_week}")
    print()


def cmd_history(args, coach: CoachService):
    """List recent workouts."""
    print_header("History")
    entries = coach.get_history(args.user, args.limit)
    if not entries:
        print("No workouts yet.")
        print()
        return
    for entry in entries:
        feedback = entry.feedback_difficulty.value if entry.feedback_difficulty else "-"
        rpe = entry.rpe if entry.rpe is not None else "-"
        print(
            f"  {entry.date:%Y-%m-%d %H:%M}  {entry.energy.value:<6} "
            f"{entry.time_minutes_planned:>3} min  {', '.join(entry.focus_areas):<28} "
            f"{feedback:<15} RPE {rpe}"
        )
    print()


def _run_timer(player: WorkoutPlayer, fast: bool) -> None:
    """Drive the player's ManualTicker once per second until the timer stops."""
    player.start()
    while player.timer_status in (TimerStatus.PRE_COUNTDOWN, TimerStatus.RUNNING):
        if player.timer_status == TimerStatus.PRE_COUNTDOWN:
            print(f"  {player.countdown}...")
        elif player.time_remaining % 10 == 0:
            print(f"  {player.time_remaining}s left")
        if not fast:
            time.sleep(1)
        player.ticker.tick()


def _prompt_int(prompt: str, low: int, high: int) -> int:
    while True:
        raw = input(f"{prompt} ({low}-{high}): ").strip()
        if raw.isdigit() and low <= int(raw) <= high:
            return int(raw)
        print(f"{Colors.RED}Please enter a number from {low} to {high}.{Colors.RESET}")


def _collect_feedback(args, coach: CoachService, session_id: str) -> None:
    print_header("Feedback")
    rating = _prompt_int("How was the workout", 1, 5)
    energy = ""
    while energy not in {e.value for e in EnergyLevel}:
        energy = input("Energy now (low/medium/high): ").strip().lower()
    rpe = _prompt_int("Effort (RPE)", 1, 10)
    notes = input("Notes (optional): ").strip() or None

    result = coach.submit_feedback(
        args.user, rating=rating, post_energy=energy, rpe=rpe, notes=notes, session_id=session_id
    )
    if result.warning:
        print(f"{Colors.YELLOW}{result.warning}{Colors.RESET}")
    print(f"{Colors.GREEN}Great work! Logged as {result.entry.feedback_difficulty.value}.{Colors.RESET}")
    print()


def cmd_play(args, coach: CoachService):
    """Play the current session in the terminal."""
    session = coach.session_store.load(args.user)
    if session is None:
        print(f"{Colors.YELLOW}No workout session. Run 'flowfast auto-plan --start' first.{Colors.RESET}")
        return

    print_header(session.title)
    player = coach.create_player(
        args.user,
        session,
        ticker_factory=ManualTicker,
        on_chime=lambda step: print(f"{Colors.GREEN}  Done: {step.exercise_name}!{Colors.RESET}"),
    )

    while player.session_status == SessionStatus.ACTIVE:
        state = player.state()
        step = state.step
        print(f"{Colors.BOLD}Step {state.step_index + 1}/{state.step_count}: {step.exercise_name}{Colors.RESET}"
              f"  (set {step.set_index}/{step.total_sets})")
        if step.group_label:
            print(f"  {step.group_label}")
        if step.is_timed:
            print(f"  {step.duration_seconds}s")
        else:
            print(f"  {step.reps or '-'} reps")
        print(f"  {step.tooltip_instructions}")

        choices = "[n]ext  [b]ack  [q]uit"
        if step.is_timed and player.timer_status == TimerStatus.IDLE:
            choices = "[s]tart  " + choices
        command = input(f"{choices}: ").strip().lower()

        if command == "s" and step.is_timed and player.timer_status == TimerStatus.IDLE:
            _run_timer(player, args.fast)
        elif command == "n":
            player.next()
            if player.rest_status == RestStatus.RUNNING:
                print(f"  Rest {player.rest_remaining}s (press Enter to skip)")
                input()
                player.skip_rest()
        elif command == "b":
            player.back()
        elif command == "q":
            player.exit()
            print("Workout abandoned.")
            return
        print()

    if player.session_status == SessionStatus.COMPLETE:
        _collect_feedback(args, coach, session.id)


def main():
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description="FlowFast Coach - adaptive workouts",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  flowfast today
  flowfast auto-plan --start
  flowfast goals --workouts 4 --minutes 120 --goal get_stronger
  flowfast history --limit 10
  flowfast play --fast
        """,
    )
    parser.add_argument("--user", "-u", default="local", help="User id (default: local)")

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    subparsers.add_parser("today", help="Show today's recommendation")

    auto_p = subparsers.add_parser("auto-plan", help="Generate an Auto Today plan")
    auto_p.add_argument("--start", action="store_true", help="Make it the current session")

    goals_p = subparsers.add_parser("goals", help="Show or update weekly goals")
    goals_p.add_argument("--workouts", type=int, help="Target workouts per week (1-7)")
    goals_p.add_argument("--minutes", type=int, help="Target minutes per week (30-500)")
    goals_p.add_argument("--goal", choices=[g.value for g in PrimaryGoal], help="Primary goal")

    history_p = subparsers.add_parser("history", help="List recent workouts")
    history_p.add_argument("--limit", "-n", type=int, default=10, help="Number of workouts to show")

    play_p = subparsers.add_parser("play", help="Play the current session")
    play_p.add_argument("--fast", action="store_true", help="Do not wait in real time")

    args = parser.parse_args()

    settings = get_settings()
    configure_logging(settings.log_level)
    coach = create_coach_service(settings)

    commands = {
        "today": cmd_today,
        "auto-plan": cmd_auto_plan,
        "goals": cmd_goals,
        "history": cmd_history,
        "play": cmd_play,
    }
    command = commands.get(args.command)
    if command is None:
        parser.print_help()
        return

    try:
        command(args, coach)
    except FlowFastError as e:
        print(f"{Colors.RED}Error: {e.message}{Colors.RESET}")
        sys.exit(1)


if __name__ == "__main__":
    main()
