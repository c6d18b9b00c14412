"""Event aggregate: conferences and concerts with a capacity-bounded roster."""

from __future__ import annotations

from datetime import datetime, timezone
from enum import StrEnum
from typing import Annotated, Literal

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    PrivateAttr,
    ValidationInfo,
    field_validator,
    model_validator,
)

from event_roster.config import get_settings
from event_roster.domain.errors import (
    CapacityExceededError,
    IllegalStateError,
    InvalidArgumentError,
    ParticipantNotFoundError,
    SpeakerNotFoundError,
)
from event_roster.domain.notifier import Listener, Notifier
from event_roster.domain.people import Intervenant, Participant, require_text
from event_roster.logger import get_logger

logger = get_logger(__name__)


class EventKind(StrEnum):
    CONFERENCE = "conference"
    CONCERT = "concert"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def _unique_by_id(items: tuple, label: str) -> tuple:
    seen: set[str] = set()
    for item in items:
        if item.id in seen:
            raise InvalidArgumentError(f"Duplicate {label} '{item.id}'")
        seen.add(item.id)
    return items


# ---------------------------------------------------------------------------
# Shared roster behaviour
# ---------------------------------------------------------------------------


class EventBase(BaseModel):
    """State and operations shared by every kind of event.

    Identity fields are frozen. ``participants`` and ``cancelled`` are frozen
    to callers too and only change through the operations below, so the
    roster never exceeds ``capacity`` and an event is cancelled at most once.
    """

    model_config = ConfigDict(extra="ignore")

    id: str = Field(frozen=True)
    name: str = Field(frozen=True)
    date: datetime = Field(frozen=True)
    venue: str = Field(frozen=True)
    capacity: int = Field(frozen=True)
    participants: tuple[Participant, ...] = Field(default=(), frozen=True)
    cancelled: bool = Field(default=False, frozen=True)

    _notifier: Notifier | None = PrivateAttr(default=None)

    @field_validator("id", mode="before")
    @classmethod
    def _check_id(cls, value: object) -> str:
        return require_text(value, "Event identifier")

    @field_validator("name", mode="before")
    @classmethod
    def _check_name(cls, value: object) -> str:
        return require_text(value, "Event name")

    @field_validator("venue", mode="before")
    @classmethod
    def _check_venue(cls, value: object) -> str:
        return require_text(value, "Event venue")

    @field_validator("date", mode="before")
    @classmethod
    def _check_date_present(cls, value: object) -> object:
        if value is None:
            raise InvalidArgumentError("Event date is required")
        return value

    @field_validator("date")
    @classmethod
    def _normalize_date(cls, value: datetime) -> datetime:
        return _as_utc(value)

    @field_validator("capacity", mode="before")
    @classmethod
    def _check_capacity_type(cls, value: object) -> object:
        if isinstance(value, bool):
            raise InvalidArgumentError("Capacity must be a positive integer")
        return value

    @field_validator("capacity")
    @classmethod
    def _check_capacity(cls, value: int) -> int:
        if value <= 0:
            raise InvalidArgumentError("Capacity must be a positive integer")
        return value

    @field_validator("participants")
    @classmethod
    def _check_participants(cls, value: tuple[Participant, ...]) -> tuple[Participant, ...]:
        return _unique_by_id(value, "participant")

    @model_validator(mode="after")
    def _check_event(self, info: ValidationInfo) -> EventBase:
        if type(self) is EventBase:
            raise InvalidArgumentError(
                "EventBase is abstract; build a Conference or a Concert"
            )
        # Only checked when the instance is built, never re-evaluated later.
        now = (info.context or {}).get("now") or _utcnow()
        if self.date < _as_utc(now):
            raise InvalidArgumentError("Event date cannot be in the past")
        if len(self.participants) > self.capacity:
            raise InvalidArgumentError(
                f"Roster of {len(self.participants)} exceeds capacity {self.capacity}"
            )
        return self

    def _set_state(self, **changes: object) -> None:
        # Bypasses the frozen-field guard; only the aggregate's own operations call this.
        self.__dict__.update(changes)

    # ------------------------------------------------------------------
    # Roster
    # ------------------------------------------------------------------

    def add_participant(self, participant: Participant) -> None:
        """Register *participant*.

        Checks run in a fixed order: missing argument, cancellation, capacity,
        then membership. Adding an existing member is a silent no-op.
        """
        if participant is None or not isinstance(participant, Participant):
            raise InvalidArgumentError("A Participant is required")
        if self.cancelled:
            raise IllegalStateError(
                f"Cannot add a participant to cancelled event '{self.name}'"
            )
        if len(self.participants) >= self.capacity:
            raise CapacityExceededError(self.name, self.capacity, len(self.participants))
        if participant in self.participants:
            return

        self._set_state(participants=(*self.participants, participant))
        logger.debug(
            "participant_added",
            event_id=self.id,
            participant_id=participant.id,
            count=len(self.participants),
        )
        self.broadcast(f"new participant added: {participant.name} (event '{self.name}')")

    def remove_participant(self, participant: Participant) -> None:
        """Unregister *participant*. Allowed even after cancellation."""
        if participant is None:
            raise InvalidArgumentError("Participant cannot be None")
        if participant not in self.participants:
            raise ParticipantNotFoundError(
                f"Participant '{participant.name}' is not registered "
                f"to event '{self.name}'"
            )

        self._set_state(
            participants=tuple(p for p in self.participants if p != participant)
        )
        logger.debug(
            "participant_removed",
            event_id=self.id,
            participant_id=participant.id,
            count=len(self.participants),
        )
        self.broadcast(f"participant removed from '{self.name}': {participant.name}")

    def is_participant(self, participant: Participant | None) -> bool:
        return participant is not None and participant in self.participants

    @property
    def participant_count(self) -> int:
        return len(self.participants)

    @property
    def available_places(self) -> int:
        return max(0, self.capacity - len(self.participants))

    @property
    def has_available_places(self) -> bool:
        return len(self.participants) < self.capacity and not self.cancelled

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def cancel(self) -> CancellationReport:
        """Cancel the event once and notify listeners.

        Returns the kind-specific cancellation report for the caller to render.
        """
        if self.cancelled:
            raise IllegalStateError(f"Event '{self.name}' is already cancelled")

        self._set_state(cancelled=True)
        report = cancellation_report(self)
        logger.info(
            "event_cancelled",
            event_id=self.id,
            kind=str(report.kind),
            participants=report.participant_count,
        )
        self.broadcast(
            f"event '{self.name}' has been cancelled. "
            f"Scheduled date: {self.date.isoformat()}"
        )
        return report

    # ------------------------------------------------------------------
    # Observers
    # ------------------------------------------------------------------

    @property
    def notifier(self) -> Notifier:
        if self._notifier is None:
            self._notifier = Notifier(
                isolate_failures=get_settings().broadcast_isolate_failures
            )
        return self._notifier

    def bind_notifier(self, notifier: Notifier) -> None:
        """Attach a shared registry, carrying over any existing subscriptions."""
        previous = self._notifier
        self._notifier = notifier
        if previous is not None and previous is not notifier:
            for listener in previous.listeners(self.id):
                notifier.subscribe(self.id, listener)
            previous.clear(self.id)

    def subscribe(self, listener: Listener) -> None:
        self.notifier.subscribe(self.id, listener)

    def unsubscribe(self, listener: Listener) -> None:
        self.notifier.unsubscribe(self.id, listener)

    def broadcast(self, message: str) -> int:
        return self.notifier.broadcast(self.id, message)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, EventBase):
            return NotImplemented
        return type(self) is type(other) and self.id == other.id

    def __hash__(self) -> int:
        return hash((type(self).__name__, self.id))


# ---------------------------------------------------------------------------
# Event kinds
# ---------------------------------------------------------------------------


class Conference(EventBase):
    kind: Literal["conference"] = Field(default="conference", frozen=True)
    theme: str = Field(frozen=True)
    speakers: tuple[Intervenant, ...] = Field(default=(), frozen=True)

    @field_validator("theme", mode="before")
    @classmethod
    def _check_theme(cls, value: object) -> str:
        return require_text(value, "Conference theme")

    @field_validator("speakers")
    @classmethod
    def _check_speakers(cls, value: tuple[Intervenant, ...]) -> tuple[Intervenant, ...]:
        return _unique_by_id(value, "speaker")

    def add_speaker(self, speaker: Intervenant) -> None:
        """Add *speaker*; the speaker list has no capacity ceiling.

        Re-adding a speaker already on the list is a no-op, even once the
        conference is cancelled.
        """
        if speaker is None or not isinstance(speaker, Intervenant):
            raise InvalidArgumentError("An Intervenant is required")
        if speaker in self.speakers:
            return
        if self.cancelled:
            raise IllegalStateError(
                f"Cannot add a speaker to cancelled conference '{self.name}'"
            )

        self._set_state(speakers=(*self.speakers, speaker))
        logger.debug("speaker_added", event_id=self.id, speaker_id=speaker.id)
        self.broadcast(
            f"new speaker added to '{self.name}': {speaker.name} ({speaker.specialty})"
        )

    def remove_speaker(self, speaker: Intervenant) -> None:
        if speaker is None:
            raise InvalidArgumentError("Speaker cannot be None")
        if speaker not in self.speakers:
            raise SpeakerNotFoundError(
                f"Speaker '{speaker.name}' is not part of conference '{self.name}'"
            )

        self._set_state(speakers=tuple(s for s in self.speakers if s != speaker))
        logger.debug("speaker_removed", event_id=self.id, speaker_id=speaker.id)
        self.broadcast(f"speaker removed from '{self.name}': {speaker.name}")

    def is_speaker(self, speaker: Intervenant | None) -> bool:
        return speaker is not None and speaker in self.speakers

    @property
    def has_speakers(self) -> bool:
        return bool(self.speakers)

    @property
    def speaker_count(self) -> int:
        return len(self.speakers)


class Concert(EventBase):
    kind: Literal["concert"] = Field(default="concert", frozen=True)
    artist: str = Field(frozen=True)
    genre: str = Field(frozen=True)

    @field_validator("artist", mode="before")
    @classmethod
    def _check_artist(cls, value: object) -> str:
        return require_text(value, "Artist")

    @field_validator("genre", mode="before")
    @classmethod
    def _check_genre(cls, value: object) -> str:
        return require_text(value, "Genre")

    def is_genre(self, genre: str | None) -> bool:
        return genre is not None and self.genre.lower() == genre.strip().lower()

    def is_performed_by(self, artist: str | None) -> bool:
        return artist is not None and self.artist.lower() == artist.strip().lower()

    def can_host_group(self, size: int) -> bool:
        return size > 0 and self.available_places >= size and not self.cancelled


Event = Annotated[Conference | Concert, Field(discriminator="kind")]


# ---------------------------------------------------------------------------
# Cancellation reports
# ---------------------------------------------------------------------------


class CancellationReport(BaseModel):
    """What a cancellation affected, for a presentation layer to render."""

    event_id: str
    event_name: str
    kind: EventKind
    date: datetime
    venue: str
    participant_count: int
    theme: str | None = None
    speakers: list[Intervenant] = Field(default_factory=list)
    artist: str | None = None
    genre: str | None = None
    refunds_triggered: bool = False
    notifications_triggered: bool = False


def cancellation_report(event: Conference | Concert) -> CancellationReport:
    """Build the kind-specific report for a cancelled *event*. Never raises."""
    common = dict(
        event_id=event.id,
        event_name=event.name,
        kind=event.kind,
        date=event.date,
        venue=event.venue,
        participant_count=event.participant_count,
    )
    match event.kind:
        case EventKind.CONFERENCE:
            return CancellationReport(
                **common, theme=event.theme, speakers=list(event.speakers)
            )
        case EventKind.CONCERT:
            # refund and notification workflows run outside the aggregate
            has_audience = event.participant_count > 0
            return CancellationReport(
                **common,
                artist=event.artist,
                genre=event.genre,
                refunds_triggered=has_audience,
                notifications_triggered=has_audience,
            )
    return CancellationReport(**common)
