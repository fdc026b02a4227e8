from __future__ import annotations

import math

from typetutor.core.config import CHARS_PER_WORD
from typetutor.core.models import CumulativeStats, Metrics


def round_half_up(x: float) -> int:
    return int(math.floor(x + 0.5))


def compute_wpm(correct_chars: int, elapsed_ms: float) -> int:
    """
    WPM = (correct_chars / 5) / (elapsed minutes).
    Zero until any time has elapsed.
    """
    if elapsed_ms <= 0 or correct_chars <= 0:
        return 0
    return round_half_up((correct_chars / CHARS_PER_WORD) / (elapsed_ms / 60000.0))


def compute_cpm(correct_chars: int, elapsed_ms: float) -> int:
    if elapsed_ms <= 0 or correct_chars <= 0:
        return 0
    return round_half_up(correct_chars / (elapsed_ms / 60000.0))


def compute_accuracy(correct_chars: int, total_chars: int) -> int:
    if total_chars <= 0:
        return 100
    acc = round_half_up(correct_chars / total_chars * 100)
    return max(0, min(100, acc))


class MetricsCalculator:
    """Folds finalized items into session stats and derives live metrics.

    Accuracy only moves when an item completes; WPM is also refreshed by the
    metrics tick so it stays current mid-item.
    """

    def __init__(self):
        self.stats = CumulativeStats()
        self.metrics = Metrics()

    def reset(self):
        self.stats = CumulativeStats()
        self.metrics = Metrics()

    def on_item_completed(self, correct_delta: int, total_delta: int, elapsed_ms: int) -> Metrics:
        self.stats.total_items += 1
        self.stats.total_characters += total_delta
        self.stats.correct_characters += correct_delta
        self.metrics = self._derive(elapsed_ms)
        return self.metrics

    def on_tick(self, elapsed_ms: int) -> Metrics:
        self.metrics = Metrics(
            elapsed_ms=elapsed_ms,
            wpm=compute_wpm(self.stats.correct_characters, elapsed_ms),
            cpm=compute_cpm(self.stats.correct_characters, elapsed_ms),
            accuracy=self.metrics.accuracy,
            total_items=self.stats.total_items,
            total_characters=self.stats.total_characters,
            correct_characters=self.stats.correct_characters,
        )
        return self.metrics

    def _derive(self, elapsed_ms: int) -> Metrics:
        s = self.stats
        return Metrics(
            elapsed_ms=elapsed_ms,
            wpm=compute_wpm(s.correct_characters, elapsed_ms),
            cpm=compute_cpm(s.correct_characters, elapsed_ms),
            accuracy=compute_accuracy(s.correct_characters, s.total_characters),
            total_items=s.total_items,
            total_characters=s.total_characters,
            correct_characters=s.correct_characters,
        )
