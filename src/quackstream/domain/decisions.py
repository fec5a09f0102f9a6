"""Pure deciders: which events does a command produce, given the history?

``decide`` works on a folded ``DecisionState``; ``quack`` and ``delete``
are the history-in, history-out form of the same rules and never mutate
their input.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import assert_never

from quackstream.core.enums import QuackPolicy

from .commands import Delete, MessageCommand, Quack
from .events import Deleted, DomainEvent, Quacked
from .projections import DecisionState, decision_state

REASON_ALREADY_DELETED = "message already deleted"


def decide(
    state: DecisionState,
    command: MessageCommand,
    *,
    quack_policy: QuackPolicy = QuackPolicy.ALLOW,
) -> tuple[DomainEvent, ...]:
    """Return the events *command* produces; ``()`` means rejected."""
    match command:
        case Quack(content=content):
            policy = QuackPolicy(quack_policy)
            if state.is_deleted and policy is QuackPolicy.REJECT_AFTER_DELETE:
                return ()
            return (Quacked(content),)
        case Delete():
            if state.is_deleted:
                return ()
            return (Deleted(),)
        case _:
            assert_never(command)


def quack(
    events: Iterable[DomainEvent],
    content: str,
    *,
    quack_policy: QuackPolicy = QuackPolicy.ALLOW,
) -> tuple[DomainEvent, ...]:
    """History after quacking *content*."""
    history = tuple(events)
    return history + decide(
        decision_state(history), Quack(content), quack_policy=quack_policy,
    )


def delete(events: Iterable[DomainEvent]) -> tuple[DomainEvent, ...]:
    """History after deleting; unchanged if a delete already happened."""
    history = tuple(events)
    return history + decide(decision_state(history), Delete())
