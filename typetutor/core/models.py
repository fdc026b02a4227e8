"""Data model shared by the practice engine and its collaborators."""

from __future__ import annotations

from dataclasses import dataclass, field, asdict
from enum import Enum
from typing import Optional, Tuple

from typetutor.app.errors import SessionConfigError


class Difficulty(str, Enum):
    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"


class SessionPhase(str, Enum):
    NOT_STARTED = "not_started"
    ACTIVE = "active"
    PAUSED = "paused"
    COMPLETE = "complete"


class CharStatus(str, Enum):
    CORRECT = "correct"
    INCORRECT = "incorrect"
    CURRENT = "current"
    PENDING = "pending"


class Comparison(str, Enum):
    CHARACTER = "character"
    TOKEN = "token"


class Navigation(str, Enum):
    SINGLE = "single"
    ROTATING = "rotating"
    BROWSE = "browse"


@dataclass(frozen=True)
class PracticeItem:
    content: str
    language: str = "en"
    difficulty: Optional[Difficulty] = None


@dataclass(frozen=True)
class CharacterFeedback:
    char: str
    status: CharStatus
    index: int


@dataclass(frozen=True)
class PracticeUnit:
    """How a practice mode compares input and moves through its items."""
    practice_type: str
    comparison: Comparison = Comparison.CHARACTER
    navigation: Navigation = Navigation.SINGLE
    speaks_items: bool = False


PRACTICE_UNITS = {
    "home-row": PracticeUnit("home-row", Comparison.CHARACTER, Navigation.SINGLE),
    "words": PracticeUnit("words", Comparison.CHARACTER, Navigation.ROTATING),
    "sentences": PracticeUnit("sentences", Comparison.CHARACTER, Navigation.ROTATING),
    "document": PracticeUnit("document", Comparison.CHARACTER, Navigation.BROWSE),
    "summary": PracticeUnit("summary", Comparison.CHARACTER, Navigation.SINGLE),
    "listen-write": PracticeUnit("listen-write", Comparison.CHARACTER, Navigation.BROWSE, speaks_items=True),
    "speak": PracticeUnit("speak", Comparison.TOKEN, Navigation.BROWSE),
}


@dataclass
class SessionConfig:
    unit: PracticeUnit
    time_limit_ms: Optional[int] = None
    item_limit: Optional[int] = None
    shuffle: bool = False
    difficulty: Difficulty = Difficulty.EASY

    def validate(self) -> None:
        if self.time_limit_ms is not None and self.time_limit_ms <= 0:
            raise SessionConfigError(f"time limit must be positive, got {self.time_limit_ms}")
        if self.item_limit is not None and self.item_limit <= 0:
            raise SessionConfigError(f"item limit must be positive, got {self.item_limit}")

    @classmethod
    def for_mode(cls, practice_type: str, **kwargs) -> "SessionConfig":
        try:
            unit = PRACTICE_UNITS[practice_type]
        except KeyError:
            raise SessionConfigError(f"unknown practice type: {practice_type!r}") from None
        return cls(unit=unit, **kwargs)


@dataclass
class InputState:
    committed: str = ""
    composition: Optional[str] = None

    def reset(self):
        self.committed = ""
        self.composition = None

    @property
    def raw(self) -> str:
        return self.composition if self.composition is not None else self.committed


@dataclass
class CumulativeStats:
    total_items: int = 0
    total_characters: int = 0
    correct_characters: int = 0

    @property
    def error_count(self) -> int:
        return self.total_characters - self.correct_characters


@dataclass(frozen=True)
class Metrics:
    elapsed_ms: int = 0
    wpm: int = 0
    cpm: int = 0
    accuracy: int = 100
    total_items: int = 0
    total_characters: int = 0
    correct_characters: int = 0

    @property
    def error_count(self) -> int:
        return self.total_characters - self.correct_characters


@dataclass(frozen=True)
class SpeechResult:
    transcript: str
    target_tokens: int
    matched_tokens: int
    accuracy: int


@dataclass(frozen=True)
class Snapshot:
    phase: SessionPhase
    item: Optional[PracticeItem]
    item_index: int
    pool_size: int
    raw_input: str
    composing: bool
    feedback: Tuple[CharacterFeedback, ...]
    metrics: Metrics
    remaining_ms: Optional[int]
    item_completed: bool = False
    speech_result: Optional[SpeechResult] = None
    capabilities: frozenset = field(default_factory=frozenset)


@dataclass(frozen=True)
class SessionSummary:
    practice_type: str
    items_completed: int
    total_characters: int
    correct_characters: int
    elapsed_ms: int
    wpm: int
    accuracy: int

    def to_dict(self) -> dict:
        return asdict(self)
