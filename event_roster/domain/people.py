"""People attached to events: participants, speakers and organizers."""

from __future__ import annotations

import hashlib
import re
import uuid

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from event_roster.domain.errors import InvalidArgumentError

EMAIL_PATTERN = re.compile(r"^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$")


def is_valid_email(value: str | None) -> bool:
    return value is not None and EMAIL_PATTERN.match(value) is not None


def normalize_email(value: str) -> str:
    """Trim and lower-case *value*, raising ``ValueError`` if it is not an address."""
    normalized = value.strip().lower()
    if not is_valid_email(normalized):
        raise InvalidArgumentError(f"Email address '{value}' is not valid")
    return normalized


def require_text(value: object, label: str) -> str:
    """Return *value* trimmed, or raise if it is missing or blank."""
    if value is None or not isinstance(value, str) or not value.strip():
        raise InvalidArgumentError(f"{label} cannot be empty")
    return value.strip()


def optional_text(value: object) -> str | None:
    if value is None:
        return None
    if not isinstance(value, str):
        raise InvalidArgumentError(f"Expected text, got {type(value).__name__}")
    return value.strip() or None


def display_name(name: str) -> str:
    """Capitalize each whitespace-delimited word: ``"ada LOVELACE"`` -> ``"Ada Lovelace"``."""
    return " ".join(word[:1].upper() + word[1:] for word in name.lower().split())


def initials(name: str) -> str:
    return "".join(word[0] for word in name.split()).upper()


def _digest(value: str) -> str:
    return hashlib.sha1(value.encode("utf-8")).hexdigest()[:10]


def generate_speaker_id(name: str | None) -> str:
    """Build an id of the form ``INT_<slug>_<suffix>`` for a speaker."""
    suffix = uuid.uuid4().hex[:8]
    if not name or not name.strip():
        return f"INT_{suffix}"
    slug = re.sub(r"[^a-z0-9]", "", name.strip().lower())[:10]
    return f"INT_{slug}_{suffix}"


class _Person(BaseModel):
    """Shared identity rules: trimmed non-empty id and name, equality by id."""

    model_config = ConfigDict(validate_assignment=True, extra="ignore")

    id: str = Field(frozen=True)
    name: str

    @field_validator("id", mode="before")
    @classmethod
    def _check_id(cls, value: object) -> str:
        return require_text(value, "Identifier")

    @field_validator("name", mode="before")
    @classmethod
    def _check_name(cls, value: object) -> str:
        return require_text(value, "Name")

    @property
    def display_name(self) -> str:
        return display_name(self.name)

    @property
    def initials(self) -> str:
        return initials(self.name)

    def update_name(self, value: str) -> None:
        self.name = require_text(value, "Name")

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, _Person):
            return NotImplemented
        return type(self) is type(other) and self.id == other.id

    def __hash__(self) -> int:
        return hash((type(self).__name__, self.id))


class Participant(_Person):
    """Someone attending events. Shared by reference across every event it joins."""

    email: str

    @field_validator("email", mode="before")
    @classmethod
    def _check_email(cls, value: object) -> str:
        return normalize_email(require_text(value, "Email"))

    def update_email(self, value: str) -> None:
        self.email = normalize_email(require_text(value, "Email"))

    def has_email_domain(self, domain: str | None) -> bool:
        if not domain:
            return False
        return self.email.endswith("@" + domain.strip().lower())

    def anonymized(self) -> Participant:
        """Return a detached copy with no personal data left in it."""
        return Participant(
            id=f"ANON_{_digest(self.id)}",
            name=f"Participant {self.initials}",
            email=f"anonymous{_digest(self.email)}@example.com",
        )

    def __str__(self) -> str:
        return f"{self.display_name} <{self.email}>"


class Intervenant(_Person):
    """A speaker or expert invited to a conference."""

    specialty: str
    email: str | None = None
    biography: str | None = None
    institution: str | None = None

    @model_validator(mode="before")
    @classmethod
    def _default_id(cls, data: object) -> object:
        if isinstance(data, dict) and not data.get("id"):
            data = {**data, "id": generate_speaker_id(data.get("name"))}
        return data

    @field_validator("specialty", mode="before")
    @classmethod
    def _check_specialty(cls, value: object) -> str:
        return require_text(value, "Specialty")

    @field_validator("email", mode="before")
    @classmethod
    def _check_email(cls, value: str | None) -> str | None:
        value = optional_text(value)
        return normalize_email(value) if value is not None else None

    @field_validator("biography", "institution", mode="before")
    @classmethod
    def _blank_to_none(cls, value: str | None) -> str | None:
        return optional_text(value)

    def update_email(self, value: str | None) -> None:
        """Set a new address, or clear it when *value* is ``None`` or blank."""
        value = optional_text(value)
        self.email = normalize_email(value) if value is not None else None

    def update_biography(self, value: str | None) -> None:
        self.biography = optional_text(value)

    def update_institution(self, value: str | None) -> None:
        self.institution = optional_text(value)

    def has_specialty_in(self, domain: str | None) -> bool:
        if not domain or not domain.strip():
            return False
        return domain.strip().lower() in self.specialty.lower()

    @property
    def has_email(self) -> bool:
        return self.email is not None

    @property
    def has_biography(self) -> bool:
        return self.biography is not None

    @property
    def has_institution(self) -> bool:
        return self.institution is not None

    def anonymized(self) -> Intervenant:
        # specialty is kept for statistics
        return Intervenant(
            id=f"ANON_INT_{_digest(self.id)}",
            name=f"Speaker {_digest(self.name)}",
            specialty=self.specialty,
        )

    def __str__(self) -> str:
        return f"{self.display_name} ({self.specialty})"


class Organisateur(BaseModel):
    """An organizer: a participant record plus the ids of the events it runs.

    The list of organized events is append-only.
    """

    person: Participant
    organized_event_ids: tuple[str, ...] = Field(default=(), frozen=True)

    @property
    def id(self) -> str:
        return self.person.id

    @property
    def name(self) -> str:
        return self.person.name

    @property
    def email(self) -> str:
        return self.person.email

    def add_event(self, event) -> None:
        if event is None:
            raise InvalidArgumentError("Event cannot be None")
        # the only write path; the field itself is frozen
        self.__dict__["organized_event_ids"] = (*self.organized_event_ids, event.id)

    def organizes(self, event) -> bool:
        return event is not None and event.id in self.organized_event_ids

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Organisateur):
            return NotImplemented
        return self.id == other.id

    def __hash__(self) -> int:
        return hash(("Organisateur", self.id))
