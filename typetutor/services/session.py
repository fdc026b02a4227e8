# services/session.py
from __future__ import annotations

import logging
import random
from collections import deque
from typing import Callable, Optional, Sequence

from PySide6.QtCore import QObject, Signal

from typetutor.app.calculation import MetricsCalculator
from typetutor.core import events as ev
from typetutor.core.chrono import SessionClock
from typetutor.core.config import DICTATION_DIFFICULTY
from typetutor.core.models import (
    Comparison, InputState, Metrics, Navigation, PracticeItem, SessionConfig,
    SessionPhase, SessionSummary, Snapshot,
)
from typetutor.services.composition import CompositionGate
from typetutor.services.rotation import ItemRotator
from typetutor.services.speech import SpeechScorer
from typetutor.services.typing_engine import InputDiffEngine, diff_feedback

logger = logging.getLogger(__name__)

CAPABILITIES = frozenset({"recognition", "synthesis"})


class PracticeEngine(QObject):
    """
    One practice session, driven entirely through handle_event().

    Events raised while another event is being handled (timer timeouts,
    slots connected to our own signals) are queued and run in arrival order.
    A snapshot is published after every handled event.
    """
    snapshotChanged = Signal(object)
    keystrokeJudged = Signal(bool)
    itemCompleted = Signal(int, int)     # correct, total
    finished = Signal(object)            # SessionSummary
    speakRequested = Signal(str, str, float)
    speechCancelRequested = Signal()
    capabilityUnavailable = Signal(str)

    def __init__(self, now_fn: Optional[Callable[[], float]] = None,
                 rng: Optional[random.Random] = None, parent=None):
        super().__init__(parent)
        self.gate = CompositionGate()
        self.diff = InputDiffEngine()
        self.calc = MetricsCalculator()
        self.scorer = SpeechScorer()
        self.clock = SessionClock(now_fn=now_fn, parent=self)
        self.clock.ticked.connect(lambda _ms: self.handle_event(ev.Tick()))
        self.clock.expired.connect(lambda: self.handle_event(ev.Finish("time")))
        self.clock.remainingChanged.connect(self._on_remaining)

        self._rng = rng
        self._queue = deque()
        self._draining = False

        self.config: Optional[SessionConfig] = None
        self.rotator: Optional[ItemRotator] = None
        self.input = InputState()
        self.capabilities = set(CAPABILITIES)
        self.item_completed = False
        self.speech_result = None
        self.speech_attempts = 0
        self.summary: Optional[SessionSummary] = None
        self._plays_left = 0
        self._empty_streak = 0
        self._completed: dict = {}   # browse index -> committed text

        self._handlers = {
            ev.RawChange: self._on_raw_change,
            ev.CompositionStart: self._on_composition_start,
            ev.CompositionEnd: self._on_composition_end,
            ev.Backspace: self._on_backspace,
            ev.Tick: self._on_tick,
            ev.Advance: self._on_advance,
            ev.Prev: self._on_prev,
            ev.Next: self._on_next,
            ev.Pause: self._on_pause,
            ev.Resume: self._on_resume,
            ev.Finish: self._on_finish,
            ev.Restart: self._on_restart,
            ev.Transcript: self._on_transcript,
            ev.PlaybackDone: self._on_playback_done,
            ev.Replay: self._on_replay,
            ev.CapabilityLost: self._on_capability_lost,
        }

    # ---------- session lifecycle ----------
    def load(self, items: Sequence[PracticeItem], config: SessionConfig):
        config.validate()
        self.config = config
        self.rotator = ItemRotator(items, shuffle=config.shuffle, rng=self._rng)
        self._reset_session()
        logger.info("session loaded: %s, %d items, time_limit=%s, item_limit=%s",
                    config.unit.practice_type, len(self.rotator),
                    config.time_limit_ms, config.item_limit)
        self._enter_item()
        self._publish()

    @property
    def phase(self) -> SessionPhase:
        return self.clock.phase

    @property
    def current_item(self) -> Optional[PracticeItem]:
        return self.rotator.current if self.rotator else None

    def handle_event(self, event):
        self._queue.append(event)
        if self._draining:
            return
        self._draining = True
        try:
            while self._queue:
                e = self._queue.popleft()
                if self.config is None:
                    logger.debug("no session loaded; dropping %s", type(e).__name__)
                    continue
                handler = self._handlers.get(type(e))
                if handler is None:
                    logger.warning("unknown event %r", e)
                    continue
                handler(e)
                self._publish()
        finally:
            self._draining = False

    def snapshot(self) -> Snapshot:
        caps = frozenset(self.capabilities)
        if self.rotator is None:
            return Snapshot(SessionPhase.NOT_STARTED, None, 0, 0, "", False, (),
                            Metrics(), None, capabilities=caps)
        item = self.rotator.current
        feedback = ()
        if self.config.unit.comparison is Comparison.CHARACTER:
            feedback = tuple(diff_feedback(item.content, self.input.committed))
        return Snapshot(
            phase=self.clock.phase,
            item=item,
            item_index=self.rotator.index,
            pool_size=len(self.rotator),
            raw_input=self.input.raw,
            composing=self.gate.composing,
            feedback=feedback,
            metrics=self.calc.metrics,
            remaining_ms=self.clock.remaining_ms,
            item_completed=self.item_completed,
            speech_result=self.speech_result,
            capabilities=caps,
        )

    # ---------- internals ----------
    def _reset_session(self):
        self.clock.reset(self.config.time_limit_ms)
        self.calc.reset()
        self.rotator.reset()
        self.speech_attempts = 0
        self.summary = None
        self._empty_streak = 0
        self._completed.clear()

    def _publish(self):
        self.snapshotChanged.emit(self.snapshot())

    def _on_remaining(self, _ms: int):
        if not self._draining:
            self._publish()

    def _accepting_input(self) -> bool:
        if self.config.unit.comparison is not Comparison.CHARACTER:
            return False
        if self.clock.phase in (SessionPhase.PAUSED, SessionPhase.COMPLETE):
            logger.debug("input ignored while %s", self.clock.phase.value)
            return False
        return not self.item_completed

    def _enter_item(self):
        self._cancel_speech()
        self.input.reset()
        self.gate.reset()
        self.item_completed = False
        self.speech_result = None
        item = self.rotator.current
        self.diff.set_text(item.content)

        nav = self.config.unit.navigation
        if nav is Navigation.BROWSE and self.rotator.index in self._completed:
            # a completed item keeps its score; show it as it was left
            self.input.committed = self._completed[self.rotator.index]
            self.item_completed = True
            return

        if self.config.unit.comparison is Comparison.CHARACTER and not item.content:
            # An empty target is complete on arrival and scores nothing.
            if nav is Navigation.ROTATING:
                self._empty_streak += 1
                if self._empty_streak > len(self.rotator):
                    logger.warning("pool has no typeable items; finishing session")
                    self._finish("empty")
                    return
            self._complete_item(0, 0)
            return
        self._empty_streak = 0

        if self.config.unit.speaks_items:
            repeats = DICTATION_DIFFICULTY[self.config.difficulty.value]["repeats"]
            self._plays_left = repeats - 1
            self._request_speech()

    def _commit(self, value: str):
        self.input.committed = value
        result = self.diff.process_commit(value)
        if result.new_char_correct is not None:
            self.keystrokeJudged.emit(result.new_char_correct)
        if result.completed:
            self._complete_item(result.correct_delta, result.total_delta)

    def _complete_item(self, correct: int, total: int):
        metrics = self.calc.on_item_completed(correct, total, self.clock.elapsed_ms())
        self.itemCompleted.emit(correct, total)
        logger.debug("item %d completed: %d/%d correct, accuracy now %d",
                     self.rotator.index, correct, total, metrics.accuracy)

        limit = self.config.item_limit
        if limit is not None and self.calc.stats.total_items >= limit:
            self._finish("items")
            return

        nav = self.config.unit.navigation
        if nav is Navigation.SINGLE:
            self._finish("completed")
        elif nav is Navigation.ROTATING:
            self.rotator.advance()
            self._enter_item()
        else:
            self.item_completed = True
            self._completed[self.rotator.index] = self.input.committed
            if self.rotator.at_end:
                self._finish("completed")

    def _finish(self, reason: str):
        if self.clock.phase is SessionPhase.NOT_STARTED:
            self.clock.start()
        if not self.clock.finish():
            logger.debug("finish (%s) ignored; session already complete", reason)
            return
        self._cancel_speech()
        self.gate.reset()
        self.input.composition = None
        metrics = self.calc.on_tick(self.clock.total_ms)
        stats = self.calc.stats
        items_done = stats.total_items
        if self.config.unit.comparison is Comparison.TOKEN:
            items_done = self.speech_attempts
        self.summary = SessionSummary(
            practice_type=self.config.unit.practice_type,
            items_completed=items_done,
            total_characters=stats.total_characters,
            correct_characters=stats.correct_characters,
            elapsed_ms=self.clock.total_ms,
            wpm=metrics.wpm,
            accuracy=metrics.accuracy,
        )
        logger.info("session finished (%s): %s", reason, self.summary)
        self.finished.emit(self.summary)

    def _request_speech(self):
        if "synthesis" not in self.capabilities:
            return
        item = self.rotator.current
        rate = DICTATION_DIFFICULTY[self.config.difficulty.value]["rate"]
        self.speakRequested.emit(item.content, item.language, rate)

    def _cancel_speech(self):
        self._plays_left = 0
        if self.config is not None and self.config.unit.speaks_items:
            self.speechCancelRequested.emit()

    # ---------- handlers ----------
    def _on_raw_change(self, e: ev.RawChange):
        if not self._accepting_input():
            return
        if e.value and self.clock.phase is SessionPhase.NOT_STARTED:
            self.clock.start()
        value = self.gate.on_raw_change(e.value)
        if value is None:
            self.input.composition = e.value
            return
        self._commit(value)

    def _on_composition_start(self, _e):
        if not self._accepting_input():
            return
        self.gate.on_composition_start()
        self.input.composition = self.input.committed

    def _on_composition_end(self, e: ev.CompositionEnd):
        if not self._accepting_input():
            return
        value = self.gate.on_composition_end(e.value)
        self.input.composition = None
        if value and self.clock.phase is SessionPhase.NOT_STARTED:
            self.clock.start()
        self._commit(value)

    def _on_backspace(self, _e):
        if not self._accepting_input() or self.gate.composing:
            return
        if not self.input.committed:
            return
        value = self.input.committed[:-1]
        self.input.committed = value
        self.diff.process_backspace(value)

    def _on_tick(self, _e):
        if self.clock.phase is not SessionPhase.ACTIVE:
            logger.debug("late tick ignored")
            return
        self.calc.on_tick(self.clock.elapsed_ms())

    def _can_navigate(self) -> bool:
        return self.clock.phase not in (SessionPhase.PAUSED, SessionPhase.COMPLETE)

    def _on_advance(self, _e):
        if self.config.unit.navigation is not Navigation.ROTATING or not self._can_navigate():
            return
        self.rotator.advance()
        self._enter_item()

    def _on_next(self, _e):
        if self.config.unit.navigation is not Navigation.BROWSE or not self._can_navigate():
            return
        if self.rotator.next():
            self._enter_item()

    def _on_prev(self, _e):
        if self.config.unit.navigation is not Navigation.BROWSE or not self._can_navigate():
            return
        if self.rotator.prev():
            self._enter_item()

    def _on_pause(self, _e):
        if self.clock.pause():
            self._cancel_speech()
            logger.info("session paused at %d ms", self.clock.elapsed_ms())

    def _on_resume(self, _e):
        if self.clock.resume():
            logger.info("session resumed")

    def _on_finish(self, e: ev.Finish):
        if self.clock.phase is SessionPhase.NOT_STARTED:
            logger.debug("finish before start ignored")
            return
        self._finish(e.reason)

    def _on_restart(self, _e):
        logger.info("session restarted")
        self._reset_session()
        self._enter_item()

    def _on_transcript(self, e: ev.Transcript):
        if self.config.unit.comparison is not Comparison.TOKEN:
            return
        if "recognition" not in self.capabilities or not e.final:
            return
        if self.clock.phase in (SessionPhase.PAUSED, SessionPhase.COMPLETE):
            return
        if not e.text.strip():
            return
        if self.clock.phase is SessionPhase.NOT_STARTED:
            self.clock.start()
        self.speech_result = self.scorer.score(e.text, self.rotator.current.content)
        self.speech_attempts += 1
        self.item_completed = True
        limit = self.config.item_limit
        if limit is not None and self.speech_attempts >= limit:
            self._finish("items")

    def _on_playback_done(self, _e):
        if self._plays_left <= 0 or self.clock.phase in (SessionPhase.PAUSED, SessionPhase.COMPLETE):
            return
        self._plays_left -= 1
        self._request_speech()

    def _on_replay(self, _e):
        if self.config.unit.speaks_items and self.clock.phase is not SessionPhase.COMPLETE:
            self._request_speech()

    def _on_capability_lost(self, e: ev.CapabilityLost):
        if e.capability not in self.capabilities:
            return
        logger.warning("%s unavailable: %s", e.capability, e.reason or "no reason given")
        self.capabilities.discard(e.capability)
        if e.capability == "synthesis":
            self._plays_left = 0
        self.capabilityUnavailable.emit(e.capability)
