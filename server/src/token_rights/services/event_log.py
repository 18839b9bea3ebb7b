"""In-memory notification log shared by the registries."""

from __future__ import annotations

import logging
from collections import deque
from typing import Callable

from token_rights.config import get_settings
from token_rights.models.events import RegistryEvent

logger = logging.getLogger(__name__)

Subscriber = Callable[[RegistryEvent], None]


class EventLog:
    """Ordered history of emitted events plus synchronous subscribers.

    Registries emit only after all of an operation's writes are done, so a
    failing subscriber is logged and never rolls anything back. History keeps
    only the most recent ``max_history`` events; older ones are evicted.
    """

    def __init__(self, max_history: int | None = None) -> None:
        if max_history is None:
            max_history = get_settings().event_history_limit
        if max_history < 1:
            raise ValueError(f"max_history must be positive, got {max_history}")
        self._events: deque[RegistryEvent] = deque(maxlen=max_history)
        self._subscribers: list[Subscriber] = []
        self._sequence = 0

    def emit(self, event: RegistryEvent) -> RegistryEvent:
        """Stamp an event with the next sequence number and record it.

        Returns:
            The stored (stamped) event
        """
        self._sequence += 1
        stamped = event.model_copy(update={"sequence": self._sequence})
        self._events.append(stamped)
        logger.debug(f"Event #{stamped.sequence}: {stamped.event}")

        for callback in list(self._subscribers):
            try:
                callback(stamped)
            except Exception:
                logger.exception(
                    f"Event subscriber failed on {stamped.event} #{stamped.sequence}"
                )
        return stamped

    def history(self, event: str | None = None) -> list[RegistryEvent]:
        """All recorded events, optionally only those with a given name."""
        if event is None:
            return list(self._events)
        return [e for e in self._events if e.event == event]

    def last(self, event: str | None = None) -> RegistryEvent | None:
        """Most recent event, optionally of a given name."""
        events = self.history(event)
        return events[-1] if events else None

    def subscribe(self, callback: Subscriber) -> None:
        """Register a callback invoked for every future event."""
        self._subscribers.append(callback)

    def unsubscribe(self, callback: Subscriber) -> None:
        """Remove a subscriber. Idempotent."""
        try:
            self._subscribers.remove(callback)
        except ValueError:
            pass

    def clear(self) -> int:
        """Drop recorded history. Sequence numbers keep increasing.

        Returns the number of events dropped.
        """
        dropped = len(self._events)
        self._events.clear()
        return dropped

    def __len__(self) -> int:
        return len(self._events)
