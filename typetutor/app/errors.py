class TutorError(Exception):
    """Base class for typing tutor errors."""


class EmptyPoolError(TutorError):
    """An item rotator was given no practice items."""


class SessionConfigError(TutorError):
    """A session was configured with impossible limits."""


class CapabilityUnavailable(TutorError):
    """Speech recognition or synthesis is missing on this system."""

    def __init__(self, capability: str, reason: str = ""):
        self.capability = capability
        self.reason = reason
        super().__init__(f"{capability} unavailable" + (f": {reason}" if reason else ""))


class DatabaseError(TutorError):
    """Reading or writing session results failed."""
