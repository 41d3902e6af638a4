"""
Workout player state machine.

Drives the per-step timers (pre-countdown, exercise timer, rest timer) and
step navigation for one WorkoutSession.

Exercise timer: idle -> pre_countdown -> running -> {paused, completed}
Rest timer:     idle -> running -> completed

Timers are driven by a Ticker that calls back once per second. The player
owns at most one active ticker; starting a timer cancels whatever ticker
was running before. Tests drive the machine with ManualTicker.
"""

import asyncio
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional

from ..exceptions import PlayerStateError
from ..models.session import WorkoutSession, WorkoutStep


logger = logging.getLogger(__name__)

DEFAULT_PRE_COUNTDOWN_SECONDS = 3
DEFAULT_REST_SECONDS = 30


# ============================================================================
# Tickers
# ============================================================================

class Ticker(ABC):
    """Calls a callback once per tick until cancelled."""

    @abstractmethod
    def start(self, callback: Callable[[], None]) -> None:
        pass

    @abstractmethod
    def cancel(self) -> None:
        """Stop ticking. No callback fires after this returns."""
        pass

    @property
    @abstractmethod
    def active(self) -> bool:
        pass


class ManualTicker(Ticker):
    """Ticker advanced explicitly with tick(); used in tests and the CLI."""

    def __init__(self):
        self._callback: Optional[Callable[[], None]] = None

    def start(self, callback: Callable[[], None]) -> None:
        self._callback = callback

    def cancel(self) -> None:
        self._callback = None

    @property
    def active(self) -> bool:
        return self._callback is not None

    def tick(self, count: int = 1) -> None:
        """Deliver up to ``count`` ticks, stopping early if cancelled."""
        for _ in range(count):
            if self._callback is None:
                return
            self._callback()


class AsyncioTicker(Ticker):
    """Wall-clock ticker running on the current asyncio event loop."""

    def __init__(self, interval: float = 1.0):
        self.interval = interval
        self._task: Optional[asyncio.Task] = None
        self._cancelled = False

    def start(self, callback: Callable[[], None]) -> None:
        self._cancelled = False
        self._task = asyncio.get_running_loop().create_task(self._run(callback))

    async def _run(self, callback: Callable[[], None]) -> None:
        while not self._cancelled:
            await asyncio.sleep(self.interval)
            if self._cancelled:
                return
            callback()

    def cancel(self) -> None:
        self._cancelled = True
        if self._task is not None and not self._task.done():
            self._task.cancel()
        self._task = None

    @property
    def active(self) -> bool:
        return self._task is not None and not self._cancelled


# ============================================================================
# State
# ============================================================================

class TimerStatus(str, Enum):
    IDLE = "idle"
    PRE_COUNTDOWN = "pre_countdown"
    RUNNING = "running"
    PAUSED = "paused"
    COMPLETED = "completed"


class RestStatus(str, Enum):
    IDLE = "idle"
    RUNNING = "running"
    COMPLETED = "completed"


class SessionStatus(str, Enum):
    ACTIVE = "active"
    COMPLETE = "complete"
    ABANDONED = "abandoned"


@dataclass
class PlayerState:
    """Read-only snapshot of the player."""
    session_id: str
    step_index: int
    step_count: int
    step: Optional[WorkoutStep]
    timer_status: TimerStatus
    countdown: int
    time_remaining: Optional[int]
    step_completed: bool
    rest_status: RestStatus
    rest_remaining: int
    session_status: SessionStatus

    @property
    def is_first_step(self) -> bool:
        return self.step_index == 0

    @property
    def is_last_step(self) -> bool:
        return self.step_index >= self.step_count - 1

    def to_dict(self) -> dict:
        return {
            "session_id": self.session_id,
            "step_index": self.step_index,
            "step_count": self.step_count,
            "step": self.step.to_dict() if self.step else None,
            "timer_status": self.timer_status.value,
            "countdown": self.countdown,
            "time_remaining": self.time_remaining,
            "step_completed": self.step_completed,
            "rest_status": self.rest_status.value,
            "rest_remaining": self.rest_remaining,
            "session_status": self.session_status.value,
        }


# ============================================================================
# Player
# ============================================================================

class WorkoutPlayer:
    """
    State machine for playing one WorkoutSession.

    Args:
        session: The session to play
        ticker_factory: Creates a fresh Ticker for each timer run
        on_chime: Called once when an exercise timer reaches zero
        on_complete: Called once when the user moves past the last step
        on_exit: Called when the session is abandoned
        pre_countdown_seconds: Length of the countdown before a timed step
        rest_seconds: Rest offered between sets
    """

    def __init__(
        self,
        session: WorkoutSession,
        ticker_factory: Callable[[], Ticker] = ManualTicker,
        on_chime: Optional[Callable[[WorkoutStep], None]] = None,
        on_complete: Optional[Callable[[WorkoutSession], None]] = None,
        on_exit: Optional[Callable[[WorkoutSession], None]] = None,
        pre_countdown_seconds: int = DEFAULT_PRE_COUNTDOWN_SECONDS,
        rest_seconds: int = DEFAULT_REST_SECONDS,
        start_index: int = 0,
    ):
        self.session = session
        self.ticker_factory = ticker_factory
        self.on_chime = on_chime
        self.on_complete = on_complete
        self.on_exit = on_exit
        self.pre_countdown_seconds = pre_countdown_seconds
        self.rest_seconds = rest_seconds

        self._ticker: Optional[Ticker] = None
        self.session_status = SessionStatus.ACTIVE
        self.step_index = 0
        self._reset_step_state()
        self.go_to(start_index)

    # ------------------------------------------------------------------
    # Introspection
    # ------------------------------------------------------------------

    @property
    def ticker(self) -> Optional[Ticker]:
        """The currently active ticker, if any."""
        return self._ticker

    @property
    def current_step(self) -> Optional[WorkoutStep]:
        if 0 <= self.step_index < len(self.session.steps):
            return self.session.steps[self.step_index]
        return None

    def state(self) -> PlayerState:
        return PlayerState(
            session_id=self.session.id,
            step_index=self.step_index,
            step_count=len(self.session.steps),
            step=self.current_step,
            timer_status=self.timer_status,
            countdown=self.countdown,
            time_remaining=self.time_remaining,
            step_completed=self.step_completed,
            rest_status=self.rest_status,
            rest_remaining=self.rest_remaining,
            session_status=self.session_status,
        )

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _require_active(self, action: str) -> None:
        if self.session_status != SessionStatus.ACTIVE:
            raise PlayerStateError(action, f"session {self.session_status.value}")

    def _cancel_ticker(self) -> None:
        if self._ticker is not None:
            self._ticker.cancel()
            self._ticker = None

    def _start_ticker(self, callback: Callable[[], None]) -> None:
        self._cancel_ticker()
        self._ticker = self.ticker_factory()
        self._ticker.start(callback)

    def _step_duration(self) -> Optional[int]:
        step = self.current_step
        return step.duration_seconds if step and step.is_timed else None

    def _reset_step_state(self) -> None:
        self.timer_status = TimerStatus.IDLE
        self.countdown = self.pre_countdown_seconds
        self.time_remaining = self._step_duration()
        self.step_completed = False
        self.rest_status = RestStatus.IDLE
        self.rest_remaining = 0

    def _move_to(self, index: int) -> None:
        self._cancel_ticker()
        self.step_index = index
        self._reset_step_state()

    def _complete_session(self) -> None:
        self._cancel_ticker()
        self.rest_status = RestStatus.IDLE
        self.session_status = SessionStatus.COMPLETE
        logger.info(f"Workout session {self.session.id} complete")
        if self.on_complete is not None:
            self.on_complete(self.session)

    def _on_countdown_tick(self) -> None:
        self.countdown -= 1
        if self.countdown <= 0:
            self.countdown = self.pre_countdown_seconds
            self.timer_status = TimerStatus.RUNNING
            self._start_ticker(self._on_timer_tick)

    def _on_timer_tick(self) -> None:
        self.time_remaining -= 1
        if self.time_remaining <= 0:
            self.time_remaining = 0
            self.timer_status = TimerStatus.COMPLETED
            self.step_completed = True
            self._cancel_ticker()
            if self.on_chime is not None:
                self.on_chime(self.current_step)

    def _on_rest_tick(self) -> None:
        self.rest_remaining -= 1
        if self.rest_remaining <= 0:
            self.rest_remaining = 0
            self.rest_status = RestStatus.COMPLETED
            self._move_to(self.step_index + 1)

    # ------------------------------------------------------------------
    # Timer actions
    # ------------------------------------------------------------------

    def start(self) -> PlayerState:
        """Begin the pre-countdown for a timed step."""
        self._require_active("start")
        if self._step_duration() is None:
            raise PlayerStateError("start", "not available for a reps step")
        if self.timer_status != TimerStatus.IDLE:
            raise PlayerStateError("start", self.timer_status.value)
        self.timer_status = TimerStatus.PRE_COUNTDOWN
        self.countdown = self.pre_countdown_seconds
        self.time_remaining = self._step_duration()
        self._start_ticker(self._on_countdown_tick)
        return self.state()

    def pause(self) -> PlayerState:
        self._require_active("pause")
        if self.timer_status != TimerStatus.RUNNING:
            raise PlayerStateError("pause", self.timer_status.value)
        self._cancel_ticker()
        self.timer_status = TimerStatus.PAUSED
        return self.state()

    def resume(self) -> PlayerState:
        self._require_active("resume")
        if self.timer_status != TimerStatus.PAUSED:
            raise PlayerStateError("resume", self.timer_status.value)
        self.timer_status = TimerStatus.RUNNING
        self._start_ticker(self._on_timer_tick)
        return self.state()

    def restart(self) -> PlayerState:
        """From paused, go back to a full pre-countdown with the full duration."""
        self._require_active("restart")
        if self.timer_status != TimerStatus.PAUSED:
            raise PlayerStateError("restart", self.timer_status.value)
        self.timer_status = TimerStatus.IDLE
        return self.start()

    def exit(self) -> PlayerState:
        """Abandon the session and stop every timer."""
        self._cancel_ticker()
        if self.session_status == SessionStatus.ACTIVE:
            self.session_status = SessionStatus.ABANDONED
            logger.info(f"Workout session {self.session.id} abandoned at step {self.step_index}")
            if self.on_exit is not None:
                self.on_exit(self.session)
        return self.state()

    # ------------------------------------------------------------------
    # Navigation
    # ------------------------------------------------------------------

    def next(self) -> PlayerState:
        """
        Finish the current step.

        Reps steps are marked completed. Between sets of a multi-set
        exercise a rest timer starts; the next step follows when it runs
        out or is skipped. Past the last step the session completes.
        """
        self._require_active("advance")
        if self.rest_status == RestStatus.RUNNING:
            return self.skip_rest()

        step = self.current_step
        if step is not None and not step.is_timed:
            self.step_completed = True

        if self.step_index >= len(self.session.steps) - 1:
            self._complete_session()
        elif step is not None and step.total_sets > 1:
            self._cancel_ticker()
            self.timer_status = TimerStatus.IDLE
            self.rest_status = RestStatus.RUNNING
            self.rest_remaining = self.rest_seconds
            self._start_ticker(self._on_rest_tick)
        else:
            self._move_to(self.step_index + 1)
        return self.state()

    def skip_rest(self) -> PlayerState:
        self._require_active("skip rest")
        if self.rest_status != RestStatus.RUNNING:
            raise PlayerStateError("skip rest", f"rest {self.rest_status.value}")
        self._move_to(self.step_index + 1)
        return self.state()

    def back(self) -> PlayerState:
        """Go to the previous step with fresh timer state; no-op on the first step."""
        self._require_active("go back")
        if self.step_index > 0:
            self._move_to(self.step_index - 1)
        return self.state()

    def go_to(self, index: int) -> PlayerState:
        """
        Jump to a step by index.

        Negative indexes land on the first step; indexes at or past the
        step count complete the session.
        """
        self._require_active("navigate")
        if index < 0:
            index = 0
        if index >= len(self.session.steps):
            self._complete_session()
        else:
            self._move_to(index)
        return self.state()
