"""Wiring: run a script of commands against a fresh message."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from typing import assert_never

from .core.config import Settings
from .core.errors import CommandScriptError
from .domain.commands import CommandResult, Delete, MessageCommand, Quack
from .domain.events import DomainEvent, TimelineItem
from .domain.message import Message
from .infrastructure.event_bus import create_event_bus
from .infrastructure.event_log import EventLog
from .observability.logger import get_logger
from .readmodels.counter import QuackCounter
from .readmodels.timeline import Timeline

logger = get_logger(__name__)


@dataclass
class RunReport:
    """Everything a script run produced."""

    events: tuple[DomainEvent, ...] = ()
    results: list[CommandResult] = field(default_factory=list)
    count: int = 0
    timeline: tuple[TimelineItem, ...] = ()


def parse_command(token: str) -> MessageCommand:
    """Parse ``quack:<content>`` or ``delete``."""
    name, sep, arg = token.partition(":")
    name = name.strip().lower()
    if name == "quack":
        if not sep:
            raise CommandScriptError(token, "quack needs content, e.g. quack:Hello")
        return Quack(arg)
    if name == "delete":
        if arg:
            raise CommandScriptError(token, "delete takes no argument")
        return Delete()
    raise CommandScriptError(token, "expected quack:<content> or delete")


def parse_script(tokens: Iterable[str]) -> list[MessageCommand]:
    return [parse_command(token) for token in tokens]


def run(
    commands: Sequence[MessageCommand],
    settings: Settings | None = None,
    history: Iterable[DomainEvent] = (),
) -> RunReport:
    """Execute *commands* in order and collect the read models.

    The counter and timeline are subscribed before the first command;
    whether they also see *history* follows ``policy.replay_on_subscribe``.
    """
    settings = settings or Settings()
    log = EventLog(history)
    bus = create_event_bus(settings, log)

    counter = QuackCounter()
    timeline = Timeline(settings.policy.timeline_policy)
    bus.subscribe(counter)
    bus.subscribe(timeline)

    message = Message(log.snapshot(), quack_policy=settings.policy.quack_policy)
    results: list[CommandResult] = []
    for command in commands:
        match command:
            case Quack(content=content):
                result = message.quack(bus, content)
            case Delete():
                result = message.delete(bus)
            case _:
                assert_never(command)
        logger.info(
            "command_executed",
            command=type(command).__name__,
            outcome=result.outcome.value,
            produced=result.events,
        )
        results.append(result)

    return RunReport(
        events=log.events(),
        results=results,
        count=counter.count,
        timeline=timeline.items,
    )
