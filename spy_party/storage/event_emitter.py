"""
Event emitter that re-publishes the session after every inbound event.
"""

import logging
from typing import Any, Callable, List

from ..core.game_engine import SessionState, TransitionResult

logger = logging.getLogger(__name__)

Listener = Callable[[SessionState, Any, TransitionResult], None]


class SnapshotEmitter:
    """Fans the latest session snapshot out to subscribed listeners."""

    def __init__(self):
        self._listeners: List[Listener] = []

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a listener; returns a callable that unsubscribes it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def emit_state(self, event: Any, result: TransitionResult) -> None:
        """Emit the state produced by ``event`` (unchanged if it was rejected)."""
        for listener in list(self._listeners):
            try:
                listener(result.state, event, result)
            except Exception:
                # Don't let a broken listener stop the others or the game
                logger.exception("Error in snapshot listener %r", listener)
