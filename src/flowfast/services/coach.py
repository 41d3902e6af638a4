"""
Coach Service - orchestrates the user-facing coaching flows.

This service wires the stores, the recommendation engine, the Auto Today
builder, plan generation, session building and feedback together:

- Today summary (recommendation, stats, history snapshot)
- Auto Today plan and explicitly adjusted plans
- Starting, loading and abandoning a workout session
- Recording post-workout feedback
- Profile (goals, equipment) and history access
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Callable, Dict, List, Optional

from ..analysis.metrics import (
    build_history_snapshot,
    compute_adaptation_metrics,
    compute_workout_stats,
    count_workouts_this_week,
    sort_newest_first,
)
from ..config import Settings, get_settings
from ..db.repositories import (
    GoalsStore,
    HistoryStore,
    LocalCache,
    PendingEntryQueue,
    SessionStore,
    SQLiteDatabase,
    SQLiteGoalsStore,
    SQLiteHistoryStore,
    SQLiteSessionStore,
    TieredGoalsStore,
    TieredHistoryStore,
)
from ..exceptions import LLMServiceUnavailableError, SessionNotFoundError
from ..llm.providers import LLMClient
from ..models.history import WeeklyGoals, WorkoutHistoryEntry
from ..models.plan_request import PlanRequest
from ..models.session import WorkoutSession, WorkoutStep
from ..models.workouts import EnergyLevel, WorkoutPlan
from ..recommendations.auto_plan import AutoPlanInput, build_auto_plan_input
from ..recommendations.today import describe_recommendation, recommend_from_metrics
from ..utils.dates import now_local
from .feedback import FeedbackProcessor, FeedbackResult
from .plan_generator import (
    FALLBACK_NOTICE,
    LLMPlanGenerator,
    PlanGenerator,
    ResilientPlanGenerator,
)
from .player import ManualTicker, Ticker, WorkoutPlayer
from .session_builder import build_workout_session


logger = logging.getLogger(__name__)


class StepRedirect(str, Enum):
    """Where the player should go instead of rendering a step."""
    START = "start"            # No matching session: back to the home screen
    FIRST_STEP = "first_step"  # Index below zero
    COMPLETE = "complete"      # Index past the last step


@dataclass
class PlanResult:
    """A generated plan plus the notice shown when the fallback was used."""
    plan: WorkoutPlan
    notice: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {"plan": self.plan.to_dict(), "notice": self.notice}


@dataclass
class StepLookup:
    """Result of loading a player step by index."""
    session_id: str
    index: int
    step_count: int
    step: Optional[WorkoutStep] = None
    redirect: Optional[StepRedirect] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "session_id": self.session_id,
            "index": self.index,
            "step_count": self.step_count,
            "step": self.step.to_dict() if self.step else None,
            "redirect": self.redirect.value if self.redirect else None,
        }


@dataclass
class TodaySummary:
    """Dashboard data for today."""
    recommendation: str
    message: str
    goals: WeeklyGoals
    stats: Dict[str, Any] = field(default_factory=dict)
    history: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "recommendation": self.recommendation,
            "message": self.message,
            "goals": self.goals.to_dict(),
            "stats": dict(self.stats),
            "history": dict(self.history),
        }


class CoachService:
    """
    Facade over the coaching core.

    All collaborators are injected; nothing here holds process-wide state.
    """

    def __init__(
        self,
        history_store: HistoryStore,
        goals_store: GoalsStore,
        session_store: SessionStore,
        plan_generator: PlanGenerator,
        pending: Optional[PendingEntryQueue] = None,
        settings: Optional[Settings] = None,
    ):
        self.history_store = history_store
        self.goals_store = goals_store
        self.session_store = session_store
        self.plan_generator = plan_generator
        self.settings = settings or get_settings()
        self.feedback = FeedbackProcessor(history_store, pending)

    # ------------------------------------------------------------------
    # Recommendation
    # ------------------------------------------------------------------

    def get_today_summary(self, user_id: str, now: Optional[datetime] = None) -> TodaySummary:
        """Recommendation, stats and history snapshot for the dashboard."""
        now = now or now_local()
        goals = self.goals_store.get(user_id)
        entries = self.history_store.list(user_id)
        metrics = compute_adaptation_metrics(entries)
        recommendation = recommend_from_metrics(
            metrics, count_workouts_this_week(entries, now), goals, now
        )
        return TodaySummary(
            recommendation=recommendation.value,
            message=describe_recommendation(recommendation),
            goals=goals,
            stats=compute_workout_stats(entries, now).to_dict(),
            history=build_history_snapshot(metrics, now).to_dict(),
        )

    def get_auto_plan_input(self, user_id: str, now: Optional[datetime] = None) -> AutoPlanInput:
        return build_auto_plan_input(user_id, self.goals_store, self.history_store, now)

    # ------------------------------------------------------------------
    # Plans
    # ------------------------------------------------------------------

    async def _generate(self, request: PlanRequest) -> PlanResult:
        plan = await self.plan_generator.generate(request)
        return PlanResult(plan=plan, notice=FALLBACK_NOTICE if plan.is_fallback else None)

    async def generate_auto_plan(self, user_id: str, now: Optional[datetime] = None) -> PlanResult:
        """Auto Today: derive every parameter from goals and history."""
        auto_input = self.get_auto_plan_input(user_id, now)
        request = auto_input.to_plan_request(self.goals_store.get_equipment(user_id))
        return await self._generate(request)

    async def generate_plan(
        self,
        user_id: str,
        energy: EnergyLevel,
        time_minutes: int,
        focus_areas: List[str],
        goal_text: str = "",
        equipment: Optional[List[str]] = None,
        now: Optional[datetime] = None,
    ) -> PlanResult:
        """
        Generate a plan for explicitly chosen parameters.

        The history snapshot and primary goal are still attached so the
        generator can adapt intensity.

        Raises:
            PlanRequestValidationError: If the parameters are invalid
        """
        now = now or now_local()
        goals = self.goals_store.get(user_id)
        entries = self.history_store.list(user_id)
        metrics = compute_adaptation_metrics(entries)
        recommendation = recommend_from_metrics(
            metrics, count_workouts_this_week(entries, now), goals, now
        )
        request = PlanRequest(
            energy=energy,
            time_minutes=time_minutes,
            focus_areas=list(focus_areas),
            goal_text=goal_text,
            equipment=equipment if equipment is not None else self.goals_store.get_equipment(user_id),
            history=build_history_snapshot(metrics, now),
            primary_goal=goals.primary_goal,
            today_recommendation=recommendation.value,
        )
        return await self._generate(request.validate())

    # ------------------------------------------------------------------
    # Sessions
    # ------------------------------------------------------------------

    def start_workout(self, user_id: str, plan: WorkoutPlan) -> WorkoutSession:
        """Build a session from a plan and store it, replacing any stale one."""
        session = build_workout_session(plan)
        self.session_store.save(user_id, session)
        logger.info(f"Started session {session.id} for user {user_id} with {len(session)} steps")
        return session

    def get_session(self, user_id: str, session_id: str) -> WorkoutSession:
        """
        Raises:
            SessionNotFoundError: If the stored session has another id
        """
        session = self.session_store.load(user_id)
        if session is None or session.id != session_id:
            raise SessionNotFoundError(session_id)
        return session

    def load_step(self, user_id: str, session_id: str, index: int) -> StepLookup:
        """Load one step, or say where the player should go instead."""
        session = self.session_store.load(user_id)
        if session is None or session.id != session_id:
            logger.warning(f"load_step: no session {session_id} for user {user_id}, redirecting to start")
            return StepLookup(session_id=session_id, index=index, step_count=0, redirect=StepRedirect.START)
        if index < 0:
            return StepLookup(session_id, 0, len(session), redirect=StepRedirect.FIRST_STEP)
        if index >= len(session):
            return StepLookup(session_id, index, len(session), redirect=StepRedirect.COMPLETE)
        return StepLookup(session_id, index, len(session), step=session.steps[index])

    def abandon_session(self, user_id: str) -> None:
        self.session_store.clear(user_id)
        logger.info(f"Session abandoned for user {user_id}")

    def create_player(
        self,
        user_id: str,
        session: WorkoutSession,
        ticker_factory: Callable[[], Ticker] = ManualTicker,
        on_chime: Optional[Callable[[WorkoutStep], None]] = None,
        on_complete: Optional[Callable[[WorkoutSession], None]] = None,
    ) -> WorkoutPlayer:
        """Player whose exit clears the user's session slot."""
        return WorkoutPlayer(
            session,
            ticker_factory=ticker_factory,
            on_chime=on_chime,
            on_complete=on_complete,
            on_exit=lambda _session: self.abandon_session(user_id),
            pre_countdown_seconds=self.settings.pre_countdown_seconds,
            rest_seconds=self.settings.rest_between_sets_seconds,
        )

    # ------------------------------------------------------------------
    # Feedback
    # ------------------------------------------------------------------

    def submit_feedback(
        self,
        user_id: str,
        rating: int,
        post_energy: EnergyLevel,
        rpe: int,
        notes: Optional[str] = None,
        session_id: Optional[str] = None,
        plan: Optional[WorkoutPlan] = None,
        now: Optional[datetime] = None,
    ) -> FeedbackResult:
        """
        Record feedback for a completed workout.

        The plan comes from ``plan`` or from the stored session. The
        session slot is cleared once the entry is saved.

        Raises:
            SessionNotFoundError: If neither a plan nor a matching session exists
            FeedbackValidationError: If the feedback values are invalid
        """
        if plan is None:
            if session_id is not None:
                plan = self.get_session(user_id, session_id).workout_plan
            else:
                session = self.session_store.load(user_id)
                if session is None:
                    raise SessionNotFoundError("current")
                plan = session.workout_plan
        result = self.feedback.submit(user_id, plan, rating, post_energy, rpe, notes, now)
        if result.saved:
            self.session_store.clear(user_id)
        return result

    def retry_pending(self, user_id: str) -> int:
        return self.feedback.retry_pending(user_id)

    # ------------------------------------------------------------------
    # Profile & history
    # ------------------------------------------------------------------

    def get_goals(self, user_id: str) -> WeeklyGoals:
        return self.goals_store.get(user_id)

    def set_goals(self, user_id: str, goals: WeeklyGoals) -> WeeklyGoals:
        self.goals_store.set(user_id, goals)
        return goals

    def get_equipment(self, user_id: str) -> List[str]:
        return self.goals_store.get_equipment(user_id)

    def set_equipment(self, user_id: str, equipment: List[str]) -> List[str]:
        cleaned = [item.strip() for item in equipment if item and item.strip()]
        self.goals_store.set_equipment(user_id, cleaned)
        return cleaned

    def get_history(self, user_id: str, limit: Optional[int] = None) -> List[WorkoutHistoryEntry]:
        entries = sort_newest_first(self.history_store.list(user_id))
        return entries[:limit] if limit else entries


def create_plan_generator(settings: Settings) -> PlanGenerator:
    """LLM generator with fallback, or fallback only when no API key is set."""
    try:
        client = LLMClient(
            api_key=settings.openai_api_key or None,
            model=settings.llm_model,
            base_url=settings.llm_base_url,
        )
    except LLMServiceUnavailableError as e:
        logger.warning(f"LLM plan generator disabled: {e.message}")
        return ResilientPlanGenerator(primary=None)
    return ResilientPlanGenerator(primary=LLMPlanGenerator(client))


def create_coach_service(settings: Optional[Settings] = None) -> CoachService:
    """Build a CoachService from settings: SQLite primary, JSON-file local cache."""
    settings = settings or get_settings()
    db = SQLiteDatabase(settings.history_db_path)
    cache = LocalCache(settings.local_cache_path)
    pending = PendingEntryQueue(cache)
    return CoachService(
        history_store=TieredHistoryStore(SQLiteHistoryStore(db), cache, pending),
        goals_store=TieredGoalsStore(SQLiteGoalsStore(db), cache),
        session_store=SQLiteSessionStore(db),
        plan_generator=create_plan_generator(settings),
        pending=pending,
        settings=settings,
    )
