"""
Countdown engine for meditation sessions.

Remaining time is always recomputed from the captured start instant
rather than accumulated tick by tick, so a suspended or backgrounded
process catches up on the next tick instead of drifting.
"""

import logging
import math
import time
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Optional

import config
from tracking.scheduler import SchedulerProtocol

logger = logging.getLogger(__name__)


class TimerStatus(str, Enum):
    IDLE = "idle"
    RUNNING = "running"
    REVIEW = "review"  # Stopped, waiting for the user to save or discard


@dataclass
class TimerState:
    """Mutable clock state. Only the engine writes to it."""

    duration_minutes: int = config.DEFAULT_DURATION_MINUTES
    remaining_seconds: int = config.DEFAULT_DURATION_MINUTES * 60
    elapsed_seconds: int = 0
    status: TimerStatus = TimerStatus.IDLE

    @property
    def target_seconds(self) -> int:
        return self.duration_minutes * 60

    @property
    def is_running(self) -> bool:
        return self.status == TimerStatus.RUNNING


def elapsed_minutes(elapsed_seconds: int) -> int:
    """Whole minutes for a stopped session, rounded up, never less than 1."""
    return max(1, math.ceil(elapsed_seconds / 60))


class CountdownEngine:
    """
    Runs the session clock and rings bells at milestones.

    Callbacks (set by the owner):
        on_tick(remaining_seconds: int)
        on_interval(elapsed_seconds: int)
        on_stopped(duration_minutes: int, completed: bool)
    """

    def __init__(
        self,
        scheduler: SchedulerProtocol,
        cue_player,
        clock: Callable[[], float] = time.time,
        duration_minutes: int = config.DEFAULT_DURATION_MINUTES,
    ):
        """
        Args:
            scheduler: Schedules the recurring tick
            cue_player: Anything with play_sequence(count, cue_name)
            clock: Wall-clock source in seconds
            duration_minutes: Initial configured duration
        """
        self.scheduler = scheduler
        self.cue_player = cue_player
        self.clock = clock

        if not self._duration_in_bounds(duration_minutes):
            raise ValueError(f"Duration must be between {config.MIN_DURATION_MINUTES} "
                             f"and {config.MAX_DURATION_MINUTES} minutes")
        self.state = TimerState(
            duration_minutes=duration_minutes,
            remaining_seconds=duration_minutes * 60,
        )

        self._started_at: Optional[float] = None
        self._tick_handle: Any = None
        self._last_interval_index = 0
        self.last_duration_minutes: Optional[int] = None

        self.on_tick: Optional[Callable[[int], None]] = None
        self.on_interval: Optional[Callable[[int], None]] = None
        self.on_stopped: Optional[Callable[[int, bool], None]] = None

    @staticmethod
    def _duration_in_bounds(minutes: int) -> bool:
        return config.MIN_DURATION_MINUTES <= minutes <= config.MAX_DURATION_MINUTES

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def set_duration(self, minutes: int) -> bool:
        """
        Change the configured duration. Only allowed while idle.

        Returns:
            True if the duration was changed
        """
        if self.state.status != TimerStatus.IDLE:
            logger.warning("Duration can only be changed while the timer is idle")
            return False
        if not self._duration_in_bounds(minutes):
            logger.warning(f"Duration out of range ignored: {minutes}")
            return False

        self.state.duration_minutes = minutes
        self.state.remaining_seconds = minutes * 60
        self.state.elapsed_seconds = 0
        return True

    def start(self) -> bool:
        """
        Start the clock and ring the opening bells.

        Returns:
            True if started, False if the timer was not idle
        """
        if self.state.status != TimerStatus.IDLE:
            logger.warning(f"Cannot start timer while {self.state.status.value}")
            return False

        self._started_at = self.clock()
        self._last_interval_index = 0
        self.last_duration_minutes = None
        self.state.status = TimerStatus.RUNNING
        self.state.elapsed_seconds = 0
        self.state.remaining_seconds = self.state.target_seconds

        self.cue_player.play_sequence(config.START_CUE_COUNT, config.CUE_START)
        self._schedule_tick()

        logger.info(f"Timer started ({self.state.duration_minutes} min)")
        return True

    def stop(self) -> Optional[int]:
        """
        Stop the clock early.

        Returns:
            Elapsed duration in whole minutes (rounded up), the configured
            duration if the target has already passed, or None if not running
        """
        if self.state.status != TimerStatus.RUNNING:
            return None

        elapsed = self._elapsed_seconds()
        if self.state.target_seconds - elapsed <= 0:
            # Target passed before the next tick ran: treat as completion
            self.state.elapsed_seconds = self.state.target_seconds
            self.state.remaining_seconds = 0
            self._finish(self.state.duration_minutes, completed=True)
            return self.last_duration_minutes

        self.state.elapsed_seconds = elapsed
        self.state.remaining_seconds = self.state.target_seconds - elapsed
        self._finish(elapsed_minutes(elapsed), completed=False)
        return self.last_duration_minutes

    def tick(self) -> None:
        """Recompute remaining time and handle milestones. Runs once per second."""
        self._tick_handle = None
        if self.state.status != TimerStatus.RUNNING:
            return

        elapsed = self._elapsed_seconds()
        remaining = self.state.target_seconds - elapsed

        if remaining <= 0:
            self.state.elapsed_seconds = self.state.target_seconds
            self.state.remaining_seconds = 0
            self._emit(self.on_tick, 0)
            self._finish(self.state.duration_minutes, completed=True)
            return

        self.state.elapsed_seconds = elapsed
        self.state.remaining_seconds = remaining

        # Count boundaries crossed so a late tick can't skip a bell
        interval_index = elapsed // config.INTERVAL_CUE_SECONDS
        if interval_index > self._last_interval_index:
            self._last_interval_index = interval_index
            self.cue_player.play_sequence(config.INTERVAL_CUE_COUNT, config.CUE_INTERVAL)
            logger.info(f"Interval bell at {elapsed}s")
            self._emit(self.on_interval, elapsed)

        self._emit(self.on_tick, remaining)
        self._schedule_tick()

    def reset(self) -> None:
        """Return to idle with the full configured duration on the clock."""
        if self.state.status == TimerStatus.RUNNING:
            self._cancel_tick()

        self._started_at = None
        self.state.status = TimerStatus.IDLE
        self.state.elapsed_seconds = 0
        self.state.remaining_seconds = self.state.target_seconds

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _elapsed_seconds(self) -> int:
        if self._started_at is None:
            return 0
        return max(0, int(self.clock() - self._started_at))

    def _schedule_tick(self) -> None:
        self._tick_handle = self.scheduler.call_later(config.TICK_INTERVAL_SECONDS, self.tick)

    def _cancel_tick(self) -> None:
        if self._tick_handle is not None:
            self.scheduler.cancel(self._tick_handle)
            self._tick_handle = None

    def _finish(self, duration_minutes: int, completed: bool) -> None:
        self._cancel_tick()
        self.state.status = TimerStatus.REVIEW
        self.last_duration_minutes = duration_minutes

        self.cue_player.play_sequence(config.END_CUE_COUNT, config.CUE_END)

        how = "completed" if completed else "stopped"
        logger.info(f"Timer {how} after {duration_minutes} min")
        self._emit(self.on_stopped, duration_minutes, completed)

    def _emit(self, callback, *args) -> None:
        if callback is None:
            return
        try:
            callback(*args)
        except Exception as e:
            logger.debug(f"Timer callback error: {e}")
