# services/speech.py
from __future__ import annotations

from typetutor.app.calculation import round_half_up
from typetutor.core.models import SpeechResult


def tokenize(text: str) -> list:
    return (text or "").lower().split()


class SpeechScorer:
    """Scores a spoken transcript against the target, token by token.

    Tokens are compared by position, so a word said in the wrong place is a
    miss. Case and surrounding whitespace are ignored. The result is a single
    per-attempt score; it never feeds session WPM or accuracy.
    """

    def score(self, transcript: str, target: str) -> SpeechResult:
        spoken = tokenize(transcript)
        expected = tokenize(target)
        matched = sum(1 for i, tok in enumerate(expected) if i < len(spoken) and spoken[i] == tok)
        accuracy = round_half_up(matched / len(expected) * 100) if expected else 0
        return SpeechResult(
            transcript=transcript,
            target_tokens=len(expected),
            matched_tokens=matched,
            accuracy=accuracy,
        )
