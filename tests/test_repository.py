"""Tests for the in-memory event and organizer repositories."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from event_roster.domain.errors import EventAlreadyExistsError, InvalidArgumentError
from event_roster.domain.models import Concert, Conference, EventKind
from event_roster.domain.notifier import Notifier
from event_roster.domain.people import Organisateur, Participant
from event_roster.repos.memory import EventRepository, OrganizerRepository

_DATE = datetime.now(timezone.utc) + timedelta(days=14)


class Recorder:
    def __init__(self) -> None:
        self.messages: list[str] = []

    def notify(self, message: str) -> None:
        self.messages.append(message)


def _conference(event_id: str = "conf-1") -> Conference:
    return Conference(
        id=event_id, name="PyDay", date=_DATE, venue="Hall", capacity=10, theme="AI"
    )


def _concert(event_id: str = "gig-1") -> Concert:
    return Concert(
        id=event_id,
        name="Late Show",
        date=_DATE,
        venue="Club",
        capacity=10,
        artist="Nina",
        genre="Jazz",
    )


@pytest.fixture()
def repo() -> EventRepository:
    return EventRepository()


# ---------------------------------------------------------------------------
# EventRepository
# ---------------------------------------------------------------------------


def test_add_and_get(repo):
    event = _conference()
    repo.add(event)
    assert repo.get("conf-1") is event
    assert repo.get("missing") is None


def test_duplicate_id_is_rejected(repo):
    repo.add(_conference("same"))
    with pytest.raises(EventAlreadyExistsError):
        repo.add(_concert("same"))
    assert len(repo.list_all()) == 1


def test_add_none_is_rejected(repo):
    with pytest.raises(InvalidArgumentError):
        repo.add(None)


def test_stored_events_share_the_repository_notifier():
    notifier = Notifier()
    repo = EventRepository(notifier=notifier)
    event = _conference()
    recorder = Recorder()
    event.subscribe(recorder)

    repo.add(event)

    assert event.notifier is notifier
    assert notifier.listeners(event.id) == (recorder,)
    event.add_participant(Participant(id="p1", name="Ada", email="ada@example.com"))
    assert len(recorder.messages) == 1


def test_list_by_kind_and_active(repo):
    conference, concert = _conference(), _concert()
    repo.add(conference)
    repo.add(concert)
    concert.cancel()

    assert repo.list_by_kind(EventKind.CONFERENCE) == [conference]
    assert repo.list_by_kind("concert") == [concert]
    assert repo.list_active() == [conference]


def test_find_by_participant(repo):
    ada = Participant(id="p1", name="Ada", email="ada@example.com")
    conference, concert = _conference(), _concert()
    repo.add(conference)
    repo.add(concert)
    concert.add_participant(ada)

    assert repo.find_by_participant(ada) == [concert]


def test_delete_drops_event_and_its_listeners(repo):
    event = _conference()
    repo.add(event)
    event.subscribe(Recorder())

    repo.delete(event.id)
    repo.delete("missing")

    assert repo.get(event.id) is None
    assert repo.notifier.listeners(event.id) == ()


# ---------------------------------------------------------------------------
# OrganizerRepository
# ---------------------------------------------------------------------------


def test_events_for_organizer_skips_deleted_events(repo):
    organizers = OrganizerRepository()
    organizer = Organisateur(
        person=Participant(id="o1", name="Grace", email="grace@example.com")
    )
    organizers.add(organizer)

    kept, dropped = _conference("kept"), _concert("dropped")
    repo.add(kept)
    repo.add(dropped)
    organizer.add_event(kept)
    organizer.add_event(dropped)
    repo.delete("dropped")

    assert organizers.get("o1") is organizer
    assert organizers.events_for(organizer, repo) == [kept]
    assert organizers.list_all() == [organizer]
