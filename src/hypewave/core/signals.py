"""Synchronous publish/subscribe lists for simulator notifications."""

from __future__ import annotations
import logging
from typing import Callable

logger = logging.getLogger(__name__)


class Signal:
    """
    An ordered list of callbacks invoked synchronously on emit().

    Callbacks run in subscription order inside the emit() call. Exceptions
    raised by a callback propagate to the emitter; later callbacks are not run.
    """

    def __init__(self, name: str):
        self.name = name
        self._listeners: list[Callable[..., None]] = []

    def subscribe(self, callback: Callable[..., None]) -> Callable[..., None]:
        """Add a callback. Returns it so this can be used as a decorator."""
        self._listeners.append(callback)
        logger.debug("Subscribed to %s: %r", self.name, callback)
        return callback

    def unsubscribe(self, callback: Callable[..., None]) -> None:
        """Remove a callback. Unknown callbacks log a warning and are otherwise ignored."""
        try:
            self._listeners.remove(callback)
        except ValueError:
            logger.warning("Callback not subscribed to %s: %r", self.name, callback)

    def emit(self, *args) -> None:
        for callback in list(self._listeners):
            callback(*args)

    def clear(self) -> None:
        self._listeners.clear()

    def __len__(self) -> int:
        return len(self._listeners)
