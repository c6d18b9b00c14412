"""Tests for conference speakers and concert specifics."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest
from pydantic import ValidationError

from event_roster.domain.errors import (
    IllegalStateError,
    InvalidArgumentError,
    SpeakerNotFoundError,
)
from event_roster.domain.models import Concert, Conference, EventKind, cancellation_report
from event_roster.domain.people import Intervenant, Participant

_DATE = datetime.now(timezone.utc) + timedelta(days=30)


class Recorder:
    def __init__(self) -> None:
        self.messages: list[str] = []

    def notify(self, message: str) -> None:
        self.messages.append(message)


def _make_conference(**overrides) -> Conference:
    defaults = dict(
        id="conf-1",
        name="PyDay",
        date=_DATE,
        venue="Main Hall",
        capacity=100,
        theme="AI",
    )
    defaults.update(overrides)
    return Conference(**defaults)


def _make_concert(**overrides) -> Concert:
    defaults = dict(
        id="gig-1",
        name="Late Show",
        date=_DATE,
        venue="Club",
        capacity=4,
        artist="Nina",
        genre="Jazz",
    )
    defaults.update(overrides)
    return Concert(**defaults)


def _speaker(n: int, specialty: str = "Machine Learning") -> Intervenant:
    return Intervenant(id=f"s{n}", name=f"speaker {n}", specialty=specialty)


# ---------------------------------------------------------------------------
# Conference speakers
# ---------------------------------------------------------------------------


def test_conference_requires_theme():
    with pytest.raises(ValidationError):
        _make_conference(theme=" ")


def test_add_speaker_notifies_with_specialty():
    conference = _make_conference()
    recorder = Recorder()
    conference.subscribe(recorder)

    conference.add_speaker(_speaker(1, "Robotics"))

    assert conference.speakers == (_speaker(1),)
    assert recorder.messages == ["new speaker added to 'PyDay': speaker 1 (Robotics)"]


def test_speakers_are_not_bounded_by_capacity():
    conference = _make_conference(capacity=1)
    for n in range(5):
        conference.add_speaker(_speaker(n))
    assert conference.speaker_count == 5


def test_duplicate_speaker_is_silent():
    conference = _make_conference()
    recorder = Recorder()
    conference.subscribe(recorder)

    conference.add_speaker(_speaker(1))
    conference.add_speaker(_speaker(1))

    assert conference.speaker_count == 1
    assert len(recorder.messages) == 1


def test_add_speaker_none_is_invalid():
    with pytest.raises(InvalidArgumentError):
        _make_conference().add_speaker(None)


def test_cancelled_conference_speaker_scenario():
    """Re-adding a present speaker after cancel is a no-op; a new one fails."""
    conference = _make_conference(theme="AI")
    first, second = _speaker(1), _speaker(2)

    conference.add_speaker(first)
    conference.cancel()

    conference.add_speaker(first)
    assert conference.speakers == (first,)

    with pytest.raises(IllegalStateError):
        conference.add_speaker(second)


def test_remove_speaker():
    conference = _make_conference()
    recorder = Recorder()
    conference.add_speaker(_speaker(1))
    conference.subscribe(recorder)

    conference.remove_speaker(_speaker(1))

    assert not conference.has_speakers
    assert recorder.messages == ["speaker removed from 'PyDay': speaker 1"]


def test_remove_missing_speaker_is_illegal_state():
    conference = _make_conference()
    with pytest.raises(SpeakerNotFoundError) as exc_info:
        conference.remove_speaker(_speaker(9))
    assert isinstance(exc_info.value, IllegalStateError)
    assert "not part of conference" in str(exc_info.value)


def test_remove_speaker_allowed_after_cancel():
    conference = _make_conference()
    conference.add_speaker(_speaker(1))
    conference.cancel()

    conference.remove_speaker(_speaker(1))

    assert conference.speaker_count == 0


def test_is_speaker():
    conference = _make_conference()
    conference.add_speaker(_speaker(1))
    assert conference.is_speaker(_speaker(1))
    assert not conference.is_speaker(_speaker(2))
    assert not conference.is_speaker(None)


def test_conference_cancel_reports_theme_and_speakers():
    conference = _make_conference()
    conference.add_speaker(_speaker(1))
    conference.add_participant(Participant(id="p1", name="Ada", email="ada@example.com"))

    report = conference.cancel()

    assert report.kind == EventKind.CONFERENCE
    assert report.theme == "AI"
    assert report.speakers == [_speaker(1)]
    assert report.participant_count == 1
    assert report.refunds_triggered is False


# ---------------------------------------------------------------------------
# Concert
# ---------------------------------------------------------------------------


@pytest.mark.parametrize("field", ["artist", "genre"])
def test_concert_requires_artist_and_genre(field):
    with pytest.raises(ValidationError):
        _make_concert(**{field: ""})


def test_artist_and_genre_are_immutable():
    concert = _make_concert()
    with pytest.raises(ValidationError):
        concert.artist = "Someone else"
    with pytest.raises(ValidationError):
        concert.genre = "Pop"


def test_genre_and_artist_matching_ignores_case():
    concert = _make_concert()
    assert concert.is_genre(" jazz ")
    assert not concert.is_genre("rock")
    assert concert.is_performed_by("NINA")
    assert not concert.is_performed_by(None)


def test_can_host_group():
    concert = _make_concert(capacity=4)
    concert.add_participant(Participant(id="p1", name="Ada", email="ada@example.com"))

    assert concert.can_host_group(3)
    assert not concert.can_host_group(4)
    assert not concert.can_host_group(0)

    concert.cancel()
    assert not concert.can_host_group(1)


def test_concert_cancel_with_audience_triggers_refunds():
    concert = _make_concert()
    concert.add_participant(Participant(id="p1", name="Ada", email="ada@example.com"))

    report = concert.cancel()

    assert report.kind == EventKind.CONCERT
    assert report.artist == "Nina"
    assert report.genre == "Jazz"
    assert report.refunds_triggered
    assert report.notifications_triggered


def test_concert_cancel_without_audience_triggers_nothing():
    report = _make_concert().cancel()
    assert not report.refunds_triggered
    assert not report.notifications_triggered


def test_report_sees_cancelled_state():
    """The cancellation hook runs after the flag flips."""
    concert = _make_concert()
    concert.cancel()
    report = cancellation_report(concert)
    assert report.event_id == "gig-1"
    assert concert.cancelled
