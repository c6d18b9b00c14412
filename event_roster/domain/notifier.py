"""Synchronous in-process observer registry for event notifications."""

from __future__ import annotations

from collections import defaultdict
from typing import Protocol, runtime_checkable

from event_roster.domain.errors import InvalidArgumentError
from event_roster.logger import get_logger

logger = get_logger(__name__)


@runtime_checkable
class Listener(Protocol):
    """Anything that can receive a text notification."""

    def notify(self, message: str) -> None: ...


class Notifier:
    """Maps event ids to the listeners subscribed to them.

    Listeners are called synchronously in subscription order. With
    ``isolate_failures`` set, a listener that raises is logged and skipped so
    the remaining listeners still receive the message; otherwise the first
    failure propagates to the caller.
    """

    def __init__(self, isolate_failures: bool = True) -> None:
        self.isolate_failures = isolate_failures
        self._subscribers: dict[str, list[Listener]] = defaultdict(list)

    def subscribe(self, event_id: str, listener: Listener) -> None:
        if listener is None or not callable(getattr(listener, "notify", None)):
            raise InvalidArgumentError("Listener must provide a notify(message) method")
        # no dedup: subscribing twice delivers twice
        self._subscribers[event_id].append(listener)

    def unsubscribe(self, event_id: str, listener: Listener) -> None:
        listeners = self._subscribers.get(event_id)
        if listeners and listener in listeners:
            listeners.remove(listener)

    def listeners(self, event_id: str) -> tuple[Listener, ...]:
        return tuple(self._subscribers.get(event_id, ()))

    def broadcast(self, event_id: str, message: str) -> int:
        """Deliver *message* to every listener of *event_id*.

        Returns the number of listeners that accepted the message.
        """
        delivered = 0
        for listener in self.listeners(event_id):
            try:
                listener.notify(message)
            except Exception:
                if not self.isolate_failures:
                    raise
                logger.exception(
                    "listener_failed",
                    event_id=event_id,
                    listener=type(listener).__name__,
                )
                continue
            delivered += 1
        return delivered

    def clear(self, event_id: str | None = None) -> None:
        if event_id is None:
            self._subscribers.clear()
        else:
            self._subscribers.pop(event_id, None)
