"""Exceptions raised by the event aggregate and its collaborators."""

from __future__ import annotations


class EventRosterError(Exception):
    """Base class for every error raised by the event roster domain."""


class InvalidArgumentError(EventRosterError, ValueError):
    """A required reference is missing or a primitive value is malformed."""


class IllegalStateError(EventRosterError):
    """The operation is not allowed in the event's current lifecycle state."""


class CapacityExceededError(EventRosterError):
    """Adding a participant would exceed the event's fixed capacity."""

    def __init__(self, event_name: str, capacity: int, count: int) -> None:
        self.event_name = event_name
        self.capacity = capacity
        self.count = count
        super().__init__(
            f"Capacity reached for event '{event_name}'. "
            f"Capacity: {capacity}, current participants: {count}"
        )


class ParticipantNotFoundError(EventRosterError, LookupError):
    """The participant is not registered to the event."""


class SpeakerNotFoundError(IllegalStateError):
    """The speaker is not part of the conference."""


class EventAlreadyExistsError(EventRosterError):
    """An event with the same id is already in the catalogue."""
