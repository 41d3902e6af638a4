"""Services for the FlowFast coaching flows."""

from .plan_generator import (
    PlanGenerator,
    LLMPlanGenerator,
    FallbackPlanGenerator,
    ResilientPlanGenerator,
)
from .session_builder import build_workout_session
from .player import (
    Ticker,
    ManualTicker,
    AsyncioTicker,
    PlayerState,
    WorkoutPlayer,
)
from .feedback import FeedbackProcessor, FeedbackResult, map_difficulty
from .coach import CoachService, create_coach_service

__all__ = [
    # Plan generation
    "PlanGenerator",
    "LLMPlanGenerator",
    "FallbackPlanGenerator",
    "ResilientPlanGenerator",
    # Sessions & player
    "build_workout_session",
    "Ticker",
    "ManualTicker",
    "AsyncioTicker",
    "PlayerState",
    "WorkoutPlayer",
    # Feedback
    "FeedbackProcessor",
    "FeedbackResult",
    "map_difficulty",
    # Facade
    "CoachService",
    "create_coach_service",
]
