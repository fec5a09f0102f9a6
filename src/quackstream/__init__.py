"""quackstream: a minimal event-sourcing / CQRS core.

An append-only event log, pure projections folded from it, a command
handler that re-derives its decision state before acting, and an event
bus that fans each appended event out to read-model subscribers.
"""

from .core.enums import CommandOutcome, QuackPolicy, TimelinePolicy
from .domain.commands import CommandResult, Delete, Quack
from .domain.events import Deleted, DomainEvent, Quacked, TimelineItem
from .domain.message import Message
from .infrastructure.event_bus import InMemoryEventBus, create_event_bus
from .infrastructure.event_log import EventLog, History
from .readmodels.counter import QuackCounter
from .readmodels.timeline import Timeline

__all__ = [
    "CommandOutcome",
    "CommandResult",
    "Delete",
    "Deleted",
    "DomainEvent",
    "EventLog",
    "History",
    "InMemoryEventBus",
    "Message",
    "Quack",
    "QuackCounter",
    "QuackPolicy",
    "Quacked",
    "Timeline",
    "TimelineItem",
    "TimelinePolicy",
    "create_event_bus",
]
