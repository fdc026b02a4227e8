# core/events.py
"""Events accepted by PracticeEngine.handle_event."""

from dataclasses import dataclass


@dataclass(frozen=True)
class RawChange:
    value: str


@dataclass(frozen=True)
class CompositionStart:
    pass


@dataclass(frozen=True)
class CompositionEnd:
    value: str


@dataclass(frozen=True)
class Backspace:
    pass


@dataclass(frozen=True)
class Tick:
    pass


@dataclass(frozen=True)
class Advance:
    pass


@dataclass(frozen=True)
class Prev:
    pass


@dataclass(frozen=True)
class Next:
    pass


@dataclass(frozen=True)
class Pause:
    pass


@dataclass(frozen=True)
class Resume:
    pass


@dataclass(frozen=True)
class Finish:
    reason: str = "manual"


@dataclass(frozen=True)
class Restart:
    pass


@dataclass(frozen=True)
class Transcript:
    text: str
    final: bool = True


@dataclass(frozen=True)
class PlaybackDone:
    pass


@dataclass(frozen=True)
class Replay:
    pass


@dataclass(frozen=True)
class CapabilityLost:
    capability: str  # "recognition" or "synthesis"
    reason: str = ""

