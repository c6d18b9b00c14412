"""In-memory catalogues for events and organizers."""

from __future__ import annotations

from event_roster.config import get_settings
from event_roster.domain.errors import EventAlreadyExistsError, InvalidArgumentError
from event_roster.domain.models import Concert, Conference, EventKind
from event_roster.domain.notifier import Notifier
from event_roster.domain.people import Organisateur, Participant
from event_roster.logger import get_logger

logger = get_logger(__name__)


class EventRepository:
    """Dict-backed store for events, keyed by id.

    Every stored event is bound to the repository's notifier so listeners of
    all catalogued events live in a single registry.
    """

    def __init__(self, notifier: Notifier | None = None) -> None:
        if notifier is None:
            notifier = Notifier(isolate_failures=get_settings().broadcast_isolate_failures)
        self.notifier = notifier
        self._store: dict[str, Conference | Concert] = {}

    def add(self, event: Conference | Concert) -> None:
        if event is None:
            raise InvalidArgumentError("Event cannot be None")
        if event.id in self._store:
            raise EventAlreadyExistsError(f"An event with id '{event.id}' already exists")
        event.bind_notifier(self.notifier)
        self._store[event.id] = event
        logger.debug("event_stored", event_id=event.id, kind=str(event.kind))

    def get(self, event_id: str) -> Conference | Concert | None:
        return self._store.get(event_id)

    def list_all(self) -> list[Conference | Concert]:
        return list(self._store.values())

    def list_by_kind(self, kind: EventKind | str) -> list[Conference | Concert]:
        return [e for e in self._store.values() if e.kind == kind]

    def list_active(self) -> list[Conference | Concert]:
        """Return events that have not been cancelled."""
        return [e for e in self._store.values() if not e.cancelled]

    def find_by_participant(self, participant: Participant) -> list[Conference | Concert]:
        return [e for e in self._store.values() if e.is_participant(participant)]

    def delete(self, event_id: str) -> None:
        self._store.pop(event_id, None)
        self.notifier.clear(event_id)


class OrganizerRepository:
    """Dict-backed store for Organisateur instances, keyed by person id."""

    def __init__(self) -> None:
        self._store: dict[str, Organisateur] = {}

    def add(self, organizer: Organisateur) -> None:
        self._store[organizer.id] = organizer

    def get(self, organizer_id: str) -> Organisateur | None:
        return self._store.get(organizer_id)

    def list_all(self) -> list[Organisateur]:
        return list(self._store.values())

    def events_for(
        self, organizer: Organisateur, events: EventRepository
    ) -> list[Conference | Concert]:
        """Resolve the organizer's event ids, skipping events no longer stored."""
        found = (events.get(event_id) for event_id in organizer.organized_event_ids)
        return [event for event in found if event is not None]
