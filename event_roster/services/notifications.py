"""Delivery collaborators that turn event broadcasts into outgoing messages."""

from __future__ import annotations

from typing import Protocol

from event_roster.domain.people import Participant
from event_roster.logger import get_logger

logger = get_logger(__name__)


class NotificationService(Protocol):
    def send(self, message: str) -> None: ...


class LoggingNotificationService:
    """Writes every message to the structured log."""

    def __init__(self, channel: str = "log") -> None:
        self.channel = channel

    def send(self, message: str) -> None:
        logger.info("notification_sent", channel=self.channel, message=message)


class OutboxNotificationService:
    """Keeps sent messages in memory, in delivery order."""

    def __init__(self) -> None:
        self.sent: list[str] = []

    def send(self, message: str) -> None:
        self.sent.append(message)

    def clear(self) -> None:
        self.sent.clear()


class ParticipantListener:
    """Listener adapter: forwards event broadcasts to one participant."""

    def __init__(self, participant: Participant, service: NotificationService) -> None:
        self.participant = participant
        self.service = service

    def notify(self, message: str) -> None:
        self.service.send(f"Notification for {self.participant}: {message}")


def subscribe_roster(event, service: NotificationService) -> list[ParticipantListener]:
    """Subscribe a ParticipantListener for every participant currently on *event*."""
    listeners = [ParticipantListener(p, service) for p in event.participants]
    for listener in listeners:
        event.subscribe(listener)
    return listeners
