# services/typing_engine.py
from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional

from typetutor.core.models import CharacterFeedback, CharStatus


def diff_feedback(target: str, value: str) -> List[CharacterFeedback]:
    """Per-position status of `value` typed against `target`.

    Positions before the caret are correct/incorrect, the caret position is
    current and everything after it is pending. Nothing is remembered between
    calls, so a backspaced error simply disappears.
    """
    typed = min(len(value), len(target))
    out: List[CharacterFeedback] = []
    for i, ch in enumerate(target):
        if i < typed:
            status = CharStatus.CORRECT if value[i] == ch else CharStatus.INCORRECT
        elif i == typed:
            status = CharStatus.CURRENT
        else:
            status = CharStatus.PENDING
        out.append(CharacterFeedback(ch, status, i))
    return out


@dataclass
class CommitResult:
    feedback: List[CharacterFeedback]
    completed: bool = False
    correct_delta: Optional[int] = None
    total_delta: Optional[int] = None
    new_char_correct: Optional[bool] = None  # set when exactly one character was appended


class InputDiffEngine:
    def __init__(self, target_text: str = ""):
        self.set_text(target_text)

    def set_text(self, text: str):
        self.target = text or ""
        self.typed = ""

    def reset(self):
        self.typed = ""

    def process_commit(self, value: str) -> CommitResult:
        value = value or ""
        previous = self.typed
        self.typed = value

        result = CommitResult(diff_feedback(self.target, value))

        if len(value) == len(previous) + 1 and value.startswith(previous):
            idx = len(value) - 1
            result.new_char_correct = idx < len(self.target) and value[idx] == self.target[idx]

        # Over-typed characters beyond the target are tolerated but never scored.
        if len(value) >= len(self.target):
            n = len(self.target)
            result.completed = True
            result.correct_delta = sum(1 for i in range(n) if value[i] == self.target[i])
            result.total_delta = n
        return result

    def process_backspace(self, value: str) -> CommitResult:
        # Feedback is always derived from the full value; nothing to revert.
        return self.process_commit(value)

    def feedback(self) -> List[CharacterFeedback]:
        return diff_feedback(self.target, self.typed)
