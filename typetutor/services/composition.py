# services/composition.py
from __future__ import annotations

import logging
from typing import Optional

logger = logging.getLogger(__name__)


class CompositionGate:
    """
    Holds back input produced by an IME while a character is still being
    composed (e.g. jamo building a Hangul syllable). Interim values only
    update what is displayed; the final value is released exactly once.
    """

    def __init__(self):
        self.composing = False
        self.buffer: Optional[str] = None

    def reset(self):
        self.composing = False
        self.buffer = None

    def on_composition_start(self):
        self.composing = True
        self.buffer = None

    def on_raw_change(self, value: str) -> Optional[str]:
        """Returns the value to score, or None while composition is pending."""
        if self.composing:
            self.buffer = value
            return None
        return value

    def on_composition_end(self, final_value: str) -> str:
        if not self.composing:
            logger.debug("composition end without start; treating as commit")
        self.composing = False
        self.buffer = None
        return final_value
