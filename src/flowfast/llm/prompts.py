"""LLM prompt templates and tool schema for workout plan generation."""

from typing import Any, Dict

from ..models.history import PlannerHistorySnapshot
from ..models.plan_request import PlanRequest


WORKOUT_TOOL_NAME = "generate_workout"

# ============================================================================
# ADAPTATION SECTION (only when history is available)
# ============================================================================

ADAPTATION_SECTION = """
## ADAPTATION RULES (APPLY THESE FIRST)
User workout history:
- Total sessions completed: {sessions_completed}
- Difficulty trend: {difficulty_trend}
- Days since last workout: {days_since_last}
- Last feedback: {last_feedback}
- Average RPE: {avg_rpe}
- Last RPE: {last_rpe}

Adaptation guidelines:
0. RPE-based intensity control (highest priority):
   - avg_rpe >= 8 or last_rpe >= 9: reduce volume by 10-15% or add rest time,
     even if the difficulty trend says "too easy".
   - avg_rpe <= 4 and trend "too easy": add 1-2 reps per set or one extra set,
     shorten rest by 5-10 seconds.
   - last_rpe >= 8 and 3+ days off: moderate intensity (target RPE 5-6),
     focus on technique and rebuild gradually.
   RPE takes precedence over the difficulty trend when they conflict.
1. Too easy: +2-3 reps per set, +1 set on key exercises, 10-15s less rest.
2. Too hard: -2-3 reps per set, -1 set, 10-15s more rest, easier variations.
3. Last feedback "couldnt_finish": significantly fewer sets/exercises, more rest,
   fundamental movements.
4. More than 7 days off: easier variations, mobility, shorter session.
5. 0-1 days since last workout: avoid yesterday's muscle groups, consider active
   recovery.
"""

# ============================================================================
# SYSTEM PROMPT
# ============================================================================

PLAN_GENERATION_SYSTEM = """You are a certified fitness trainer creating personalized workout plans.
{adaptation_section}
Given the user's energy level, available time, focus areas, goal and equipment,
generate an appropriate workout plan.

ENERGY LEVELS:
- low: recovery-focused, gentle movement, stretching, easy pace.
- medium: moderate intensity, balanced cardio and strength.
- high: high intensity, challenging exercises, minimal rest.

TIME MANAGEMENT:
- Fit everything, including a 3-5 minute warm-up and cool-down, into the time window.
- Account for rest periods in the total time.

REST PERIODS:
- Between sets: 20-45s (high), 30-60s (medium), 45-90s (low).
- Between exercises: 30-60s (high), 45-75s (medium), 60-120s (low).

TODAY'S COACHING RECOMMENDATION: {today_recommendation}
- push: user is on track and recovered. +1-2 reps or +1 set on key exercises,
  harder variations, 10-15s less rest.
- maintain: balanced session, standard rep ranges and rest.
- recovery: high RPE or fatigue. Lighter variations, 6-10 reps, 15-30s more rest,
  more mobility, stretching and breathing work.
- catch_up: behind weekly goals. Time-efficient circuits and full-body compound
  movements at moderate intensity.

SAFETY RULES:
- Energy level and RPE always win over the recommendation.
- "push" with low energy means slightly more challenging within a low-intensity envelope.
- "push" with recent RPE >= 8 means recovery.

PRIMARY GOAL: {primary_goal}
- lose_weight: higher work volume, circuits and cardio blocks, 12-20 reps, short rest.
- get_stronger: 4-8 reps on compound lifts, 60-120s rest, fewer but harder exercises.
- get_toned: 8-15 reps with time under tension, supersets or short circuits.
- general_fitness: balanced strength, cardio and mobility, 8-12 reps.

EXERCISE SELECTION:
- Only use the available equipment; bodyweight only if the list is empty.
- Put step-by-step instructions in "tooltip" and form cues in "note".
- Estimate calories realistically: 5-15 cal/min strength, 8-20 cal/min cardio.
- Mark supersets (2 exercises) and circuits (3+) with a shared group_label.
- Use "time" mode for cardio, stretches, holds and breathing; "reps" for strength.

Return a complete, balanced workout the user will enjoy and can finish."""

PLAN_GENERATION_USER = """Create a workout plan for:
- Energy level: {energy}
- Available time: {time_minutes} minutes
- Focus areas: {focus_areas}
- Primary training goal: {primary_goal}
- Today's coaching recommendation: {today_recommendation}
- User goal description: {goal_text}
- Available equipment: {equipment}

Generate a complete, balanced workout that fits within the time constraint and
aligns with today's recommendation while respecting the user's energy level."""


# ============================================================================
# TOOL SCHEMA
# ============================================================================

WORKOUT_TOOL_SCHEMA: Dict[str, Any] = {
    "name": WORKOUT_TOOL_NAME,
    "description": "Generate a personalized workout plan with exercises, rest periods, and instructions",
    "parameters": {
        "type": "object",
        "additionalProperties": False,
        "properties": {
            "version": {"type": "number", "description": "Schema version, always 1"},
            "context": {
                "type": "object",
                "additionalProperties": False,
                "description": "Echo of the request context",
                "properties": {
                    "energy": {"type": "string"},
                    "time_minutes": {"type": "number"},
                    "focus_areas": {"type": "array", "items": {"type": "string"}},
                    "goal": {"type": "string"},
                    "equipment": {"type": "array", "items": {"type": "string"}},
                },
            },
            "exercises": {
                "type": "array",
                "description": "Exercises in workout order",
                "items": {
                    "type": "object",
                    "additionalProperties": False,
                    "properties": {
                        "id": {"type": "string", "description": "Unique id: ex-1, ex-2, ..."},
                        "name": {"type": "string"},
                        "category": {
                            "type": "string",
                            "enum": ["cardio", "strength", "stretch", "breathing"],
                        },
                        "mode": {"type": "string", "enum": ["reps", "time"]},
                        "sets": {"type": "number", "description": "Number of sets, minimum 1"},
                        "reps": {"type": ["number", "null"], "description": "Required if mode is 'reps'"},
                        "duration_seconds": {
                            "type": ["number", "null"],
                            "description": "Required if mode is 'time'",
                        },
                        "rest_between_sets_seconds": {"type": ["number", "null"]},
                        "rest_after_exercise_seconds": {"type": ["number", "null"]},
                        "group_type": {"type": ["string", "null"], "enum": ["superset", "circuit", None]},
                        "group_label": {"type": ["string", "null"]},
                        "equipment": {"type": "array", "items": {"type": "string"}},
                        "note": {"type": "string"},
                        "tooltip": {"type": "string"},
                        "calories_estimate": {"type": ["number", "null"]},
                    },
                },
            },
        },
    },
}


def _describe_difficulty(bias: int) -> str:
    if bias == 1:
        return "Workouts have been TOO EASY - increase intensity/volume"
    if bias == -1:
        return "Workouts have been TOO HARD - reduce intensity/volume"
    return "Difficulty is balanced - maintain current level"


def _describe_days_since(days) -> str:
    if days is None:
        return "First workout"
    if days == 0:
        return "Today (same day)"
    return f"{days} days ago"


def build_adaptation_section(history: PlannerHistorySnapshot) -> str:
    return ADAPTATION_SECTION.format(
        sessions_completed=history.sessions_completed,
        difficulty_trend=_describe_difficulty(history.difficulty_bias),
        days_since_last=_describe_days_since(history.days_since_last_workout),
        last_feedback=history.last_feedback.value if history.last_feedback else "none yet",
        avg_rpe=f"{history.avg_rpe:.1f}/10" if history.avg_rpe is not None else "unknown",
        last_rpe=f"{history.last_rpe}/10" if history.last_rpe is not None else "unknown",
    )


def build_system_prompt(request: PlanRequest) -> str:
    """System prompt for a plan request; the adaptation rules need history."""
    return PLAN_GENERATION_SYSTEM.format(
        adaptation_section=build_adaptation_section(request.history) if request.history else "",
        today_recommendation=request.today_recommendation or "maintain",
        primary_goal=request.primary_goal.value if request.primary_goal else "general_fitness",
    )


def build_user_prompt(request: PlanRequest) -> str:
    return PLAN_GENERATION_USER.format(
        energy=request.energy.value,
        time_minutes=request.time_minutes,
        focus_areas=", ".join(request.focus_areas),
        primary_goal=request.primary_goal.value if request.primary_goal else "general_fitness",
        today_recommendation=request.today_recommendation or "maintain",
        goal_text=request.goal_text,
        equipment=", ".join(request.equipment) if request.equipment else "None (bodyweight only)",
    )
