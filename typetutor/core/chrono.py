# core/chrono.py
from __future__ import annotations

import logging
from typing import Callable, Optional

from PySide6.QtCore import QElapsedTimer, QObject, QTimer, Signal

from typetutor.core.config import COUNTDOWN_INTERVAL_MS, METRICS_TICK_MS
from typetutor.core.models import SessionPhase

logger = logging.getLogger(__name__)


class SessionClock(QObject):
    """
    Session state machine: NotStarted -> Active <-> Paused -> Complete.

    Owns the countdown and metrics-tick timers. Both run only while Active
    and are stopped together on every transition out of Active, so a late
    timeout can never touch a paused or finished session. Paused time is
    kept in an accumulator and excluded from elapsed time.
    """
    phaseChanged = Signal(object)
    ticked = Signal(int)            # active elapsed ms
    remainingChanged = Signal(int)  # ms left in the time budget
    expired = Signal()

    def __init__(
        self,
        time_limit_ms: Optional[int] = None,
        tick_ms: int = METRICS_TICK_MS,
        countdown_ms: int = COUNTDOWN_INTERVAL_MS,
        now_fn: Optional[Callable[[], float]] = None,
        parent=None,
    ):
        super().__init__(parent)
        if now_fn is None:
            self._wall = QElapsedTimer()
            self._wall.start()
            now_fn = self._wall.elapsed
        self._now = now_fn
        self._countdown_ms = countdown_ms

        self._countdown = QTimer(self)
        self._countdown.setInterval(countdown_ms)
        self._countdown.timeout.connect(self._on_countdown)

        self._tick = QTimer(self)
        self._tick.setInterval(tick_ms)
        self._tick.timeout.connect(self._on_tick)

        self.reset(time_limit_ms)

    def reset(self, time_limit_ms: Optional[int] = None):
        self._stop_timers()
        self.phase = SessionPhase.NOT_STARTED
        self.time_limit_ms = time_limit_ms
        self.remaining_ms = time_limit_ms
        self.start_ms: Optional[float] = None
        self.paused_accumulated_ms = 0.0
        self._paused_at: Optional[float] = None
        self.total_ms: Optional[int] = None

    # ---------- transitions ----------
    def start(self) -> bool:
        if self.phase is not SessionPhase.NOT_STARTED:
            return False
        self.start_ms = self._now()
        self._set_phase(SessionPhase.ACTIVE)
        self._start_timers()
        return True

    def pause(self) -> bool:
        if self.phase is not SessionPhase.ACTIVE:
            return False
        self._stop_timers()
        self._paused_at = self._now()
        if self.time_limit_ms is not None:
            self.remaining_ms = max(0, self.time_limit_ms - self.elapsed_ms())
        self._set_phase(SessionPhase.PAUSED)
        return True

    def resume(self) -> bool:
        if self.phase is not SessionPhase.PAUSED:
            return False
        self.paused_accumulated_ms += self._now() - self._paused_at
        self._paused_at = None
        self._set_phase(SessionPhase.ACTIVE)
        self._start_timers()
        return True

    def finish(self) -> bool:
        """Freeze elapsed time. Returns False if there was nothing to finish."""
        if self.phase not in (SessionPhase.ACTIVE, SessionPhase.PAUSED):
            logger.debug("finish ignored in phase %s", self.phase.value)
            return False
        self._stop_timers()
        self.total_ms = self.elapsed_ms()
        self._paused_at = None
        self._set_phase(SessionPhase.COMPLETE)
        return True

    # ---------- queries ----------
    def elapsed_ms(self) -> int:
        if self.start_ms is None:
            return 0
        if self.total_ms is not None:
            return self.total_ms
        end = self._paused_at if self._paused_at is not None else self._now()
        return int(max(0.0, end - self.start_ms - self.paused_accumulated_ms))

    @property
    def is_active(self) -> bool:
        return self.phase is SessionPhase.ACTIVE

    def timers_running(self) -> bool:
        return self._countdown.isActive() or self._tick.isActive()

    # ---------- timers ----------
    def _start_timers(self):
        if self.remaining_ms is not None:
            self._countdown.start(self._next_countdown_ms())
        self._tick.start()

    def _stop_timers(self):
        self._countdown.stop()
        self._tick.stop()

    def _set_phase(self, phase: SessionPhase):
        logger.debug("clock %s -> %s", self.phase.value, phase.value)
        self.phase = phase
        self.phaseChanged.emit(phase)

    def _on_countdown(self):
        if self.phase is not SessionPhase.ACTIVE or self.remaining_ms is None:
            return
        self.remaining_ms = max(0, self.time_limit_ms - self.elapsed_ms())
        self.remainingChanged.emit(self.remaining_ms)
        if self.remaining_ms == 0:
            self._stop_timers()
            self.expired.emit()
        else:
            self._countdown.setInterval(self._next_countdown_ms())

    def _next_countdown_ms(self) -> int:
        # land on whole intervals of the remaining budget, so a resume
        # mid-interval does not cost the part already used
        return int(self.remaining_ms % self._countdown_ms) or self._countdown_ms

    def _on_tick(self):
        if self.phase is not SessionPhase.ACTIVE:
            return
        self.ticked.emit(self.elapsed_ms())
