"""Diagnostic subscribers used to observe fan-out."""

from __future__ import annotations

from quackstream.domain.events import DomainEvent


class RecordingSubscriber:
    """Keeps every event it is handed, in order."""

    def __init__(self) -> None:
        self.events: list[DomainEvent] = []

    def handle(self, event: DomainEvent) -> None:
        self.events.append(event)


class InterestSubscriber:
    """Flags whether it has seen an event of one of *event_types*.

    Events of other types are ignored.
    """

    def __init__(self, *event_types: type[DomainEvent]) -> None:
        if not event_types:
            raise ValueError("InterestSubscriber needs at least one event type")
        self._interests = event_types
        self.received: list[DomainEvent] = []

    @property
    def interests(self) -> tuple[type[DomainEvent], ...]:
        return self._interests

    @property
    def called(self) -> bool:
        return bool(self.received)

    def handle(self, event: DomainEvent) -> None:
        if isinstance(event, self._interests):
            self.received.append(event)
