"""
Exceptions for rejected game transitions and invalid session data.
"""

from typing import Any, Optional, Sequence


class GameError(Exception):
    """Base class for every validation failure raised by the game core."""

    def __init__(self, message: str = ""):
        self.message = message
        super().__init__(self.message)


class InsufficientPlayersError(GameError):
    """Raised when a roster submission yields fewer players than required."""

    def __init__(self, count: int, minimum: int, message: str = ""):
        self.count = count
        self.minimum = minimum
        super().__init__(message or f"At least {minimum} players are needed, got {count}")


class EmptyPoolError(GameError):
    """Raised when a word or spy is drawn from an empty list."""

    def __init__(self, pool: str, message: str = ""):
        self.pool = pool
        super().__init__(message or f"Cannot pick from an empty {pool} list")


class MissingVerdictError(GameError):
    """Raised when a round is settled before the group chose who to accuse."""

    def __init__(self, message: str = ""):
        super().__init__(message or "Select who was accused (or nobody) before saving results")


class InvalidTransitionError(GameError):
    """Raised when an event arrives in a view that does not accept it."""

    def __init__(self, event: Any, view: Optional[Any] = None, message: str = ""):
        self.event = event
        self.view = view
        event_name = type(event).__name__ if not isinstance(event, str) else event
        view_name = getattr(view, "value", view)
        super().__init__(message or f"{event_name} is not allowed in view {view_name}")


class MalformedSnapshotError(GameError):
    """Raised when a persisted session snapshot cannot be decoded."""

    def __init__(self, reason: str, missing: Sequence[str] = ()):
        self.reason = reason
        self.missing = list(missing)
        super().__init__(f"Malformed session snapshot: {reason}")
