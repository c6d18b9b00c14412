"""Round-trip events to and from plain data, tagged by ``kind``."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import TypeAdapter

from event_roster.domain.models import Concert, Conference, Event

_EVENT_ADAPTER: TypeAdapter[Conference | Concert] = TypeAdapter(Event)


def _context(now: datetime | None) -> dict[str, Any] | None:
    return {"now": now} if now is not None else None


def dump_event(event: Conference | Concert) -> dict[str, Any]:
    """Return a JSON-compatible dict including roster and cancellation state."""
    return event.model_dump(mode="json")


def dumps_event(event: Conference | Concert) -> str:
    return event.model_dump_json()


def load_event(payload: dict[str, Any], now: datetime | None = None) -> Conference | Concert:
    """Rebuild an event through the same validators as the constructors.

    Unknown keys are ignored. *now* overrides the reference time used for the
    past-date check.
    """
    return _EVENT_ADAPTER.validate_python(payload, context=_context(now))


def loads_event(raw: str | bytes, now: datetime | None = None) -> Conference | Concert:
    return _EVENT_ADAPTER.validate_json(raw, context=_context(now))
