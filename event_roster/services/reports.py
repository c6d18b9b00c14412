"""Text renderings of events and people for display layers.

Everything here reads the public state of the domain objects; nothing prints.
"""

from __future__ import annotations

from event_roster.domain.models import (
    CancellationReport,
    Concert,
    Conference,
    EventKind,
)
from event_roster.domain.people import Intervenant, Participant

BASE_TICKET_PRICE = 25.0

GENRE_PRICE_FACTORS = {
    "rock": 1.5,
    "pop": 1.5,
    "classical": 1.8,
    "jazz": 1.8,
    "electronic": 1.3,
    "techno": 1.3,
    "folk": 1.1,
    "acoustic": 1.1,
}


def fill_rate(event: Conference | Concert) -> float:
    """Percentage of the capacity already taken."""
    return event.participant_count / event.capacity * 100


def suggested_price(concert: Concert) -> float:
    factor = GENRE_PRICE_FACTORS.get(concert.genre.strip().lower(), 1.0)
    return BASE_TICKET_PRICE * factor


def render_person(person: Participant) -> str:
    return f"{person.display_name} <{person.email}> [ID: {person.id}]"


def render_speaker_intro(speaker: Intervenant) -> str:
    """One-line introduction: name, institution if any, then specialty."""
    intro = speaker.display_name
    if speaker.institution:
        intro += f" ({speaker.institution})"
    return f"{intro} - Specialty: {speaker.specialty}"


def _status(event: Conference | Concert) -> str:
    return "CANCELLED" if event.cancelled else "ACTIVE"


def _specific_lines(event: Conference | Concert) -> list[str]:
    match event.kind:
        case EventKind.CONFERENCE:
            lines = [f"Theme: {event.theme}", f"Speakers: {event.speaker_count}"]
            if event.has_speakers:
                lines.extend(
                    f"  - {s.display_name} - Specialty: {s.specialty}"
                    + (f" - Email: {s.email}" if s.email else "")
                    for s in event.speakers
                )
            else:
                lines.append("No speaker assigned yet")
            return lines
        case EventKind.CONCERT:
            rate = fill_rate(event)
            lines = [
                f"Artist: {event.artist}",
                f"Genre: {event.genre}",
                f"Suggested price: {suggested_price(event):.2f} EUR",
                f"Fill rate: {rate:.1f}%",
            ]
            if rate >= 90:
                lines.append("Almost sold out!")
            elif rate >= 75:
                lines.append("High demand - book soon!")
            elif rate < 25:
                lines.append("Plenty of seats available")
            return lines
    return []


def render_details(event: Conference | Concert) -> str:
    lines = [
        "=== EVENT DETAILS ===",
        f"ID: {event.id}",
        f"Name: {event.name}",
        f"Type: {type(event).__name__}",
        f"Date: {event.date.isoformat()}",
        f"Venue: {event.venue}",
        f"Capacity: {event.capacity}",
        f"Participants: {event.participant_count}",
        f"Status: {_status(event)}",
        *_specific_lines(event),
        "=====================",
    ]
    return "\n".join(lines)


def render_summary(event: Conference | Concert) -> str:
    match event.kind:
        case EventKind.CONFERENCE:
            lines = [
                f"CONFERENCE: {event.name}",
                f"Theme: {event.theme}",
                f"Date: {event.date.isoformat()}",
                f"Venue: {event.venue}",
                f"Participants: {event.participant_count}/{event.capacity}",
            ]
            if event.has_speakers:
                lines.append(
                    "Speakers: "
                    + ", ".join(f"{s.name} ({s.specialty})" for s in event.speakers)
                )
        case _:
            lines = [
                f"CONCERT: {event.name}",
                f"Artist: {event.artist}",
                f"Genre: {event.genre}",
                f"Date: {event.date.isoformat()}",
                f"Venue: {event.venue}",
                f"Audience: {event.participant_count}/{event.capacity}",
            ]
    return "\n".join(lines)


def render_marketing(concert: Concert) -> str:
    lines = [
        concert.name,
        f"With {concert.artist}",
        f"Genre: {concert.genre}",
        f"On {concert.date.date().isoformat()} at {concert.date.strftime('%H:%M')}",
        concert.venue,
        f"Available seats: {concert.available_places}/{concert.capacity}",
    ]
    if concert.cancelled:
        lines.append("CONCERT CANCELLED")
    return "\n".join(lines)


def render_cancellation(report: CancellationReport) -> str:
    if report.kind == EventKind.CONFERENCE:
        lines = [
            "=== CONFERENCE CANCELLED ===",
            f'The conference "{report.event_name}" on "{report.theme}" has been cancelled.',
        ]
        if report.speakers:
            lines.append("Affected speakers:")
            lines.extend(f"- {s.name} ({s.specialty})" for s in report.speakers)
    else:
        lines = [
            "=== CONCERT CANCELLED ===",
            f'The concert "{report.event_name}" by {report.artist} has been cancelled.',
            f"Genre: {report.genre}",
        ]
    lines += [
        f"Scheduled date: {report.date.isoformat()}",
        f"Venue: {report.venue}",
        f"Registered participants: {report.participant_count}",
    ]
    if report.refunds_triggered:
        lines.append("Automatic refunds started for all attendees.")
    if report.notifications_triggered:
        lines.append("Cancellation notices sent to all participants.")
    return "\n".join(lines)
