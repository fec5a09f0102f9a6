"""Command values and command results.

A command is a request that may or may not be honoured; the events it
produces (possibly none) are recorded in the ``CommandResult``.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TypeAlias

from quackstream.core.enums import CommandOutcome

from .events import DomainEvent


@dataclass(frozen=True)
class Quack:
    """Post a message."""

    content: str = ""


@dataclass(frozen=True)
class Delete:
    """Retract the message."""


MessageCommand: TypeAlias = Quack | Delete


@dataclass(frozen=True)
class CommandResult:
    """What a command handler did with a command.

    ``REJECTED`` means nothing needed to happen: no event was published.
    """

    outcome: CommandOutcome
    events: tuple[DomainEvent, ...] = ()
    reason: str = ""

    @property
    def applied(self) -> bool:
        return self.outcome is CommandOutcome.APPLIED

    @classmethod
    def applied_with(cls, events: tuple[DomainEvent, ...]) -> CommandResult:
        return cls(outcome=CommandOutcome.APPLIED, events=events)

    @classmethod
    def rejected(cls, reason: str) -> CommandResult:
        return cls(outcome=CommandOutcome.REJECTED, reason=reason)
