"""Pure projections over an event history.

Every projection here is a left fold ``step(state, event) -> state`` with
no hidden mutation, so for any split of a history ``a + b``::

    fold(step, a + b, s) == fold(step, b, fold(step, a, s))

Events outside the ``MessageEvent`` union leave the state unchanged.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from dataclasses import dataclass
from functools import reduce
from typing import TypeVar, assert_never

from quackstream.core.enums import TimelinePolicy

from .events import Deleted, DomainEvent, Quacked, TimelineItem, is_message_event

S = TypeVar("S")

Timeline = tuple[TimelineItem, ...]


def fold(step: Callable[[S, DomainEvent], S], events: Iterable[DomainEvent], initial: S) -> S:
    """Left-fold *events* into a state, oldest first."""
    return reduce(step, events, initial)


# ---------------------------------------------------------------------------
# Decision state
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class DecisionState:
    """The minimal state needed to accept or reject a command."""

    is_deleted: bool = False


def evolve_decision(state: DecisionState, event: DomainEvent) -> DecisionState:
    """Only ``Deleted`` moves the decision state, and only once."""
    if not is_message_event(event):
        return state
    match event:
        case Deleted():
            return state if state.is_deleted else DecisionState(is_deleted=True)
        case Quacked():
            return state
        case _:
            assert_never(event)


def decision_state(events: Iterable[DomainEvent]) -> DecisionState:
    return fold(evolve_decision, events, DecisionState())


def is_deleted(events: Iterable[DomainEvent]) -> bool:
    return decision_state(events).is_deleted


# ---------------------------------------------------------------------------
# Quack count
# ---------------------------------------------------------------------------

def evolve_count(count: int, event: DomainEvent) -> int:
    if not is_message_event(event):
        return count
    match event:
        case Quacked():
            return count + 1
        case Deleted():
            return count - 1
        case _:
            assert_never(event)


def count_quacks(events: Iterable[DomainEvent]) -> int:
    """Quacked events minus Deleted events over the whole history."""
    return fold(evolve_count, events, 0)


# ---------------------------------------------------------------------------
# Timeline
# ---------------------------------------------------------------------------

def remove_previous(items: Timeline) -> Timeline:
    """Drop the most recent item; an empty timeline stays empty."""
    return items[:-1]


def timeline_step(policy: TimelinePolicy) -> Callable[[Timeline, DomainEvent], Timeline]:
    """Build the fold step for *policy*."""

    def step(items: Timeline, event: DomainEvent) -> Timeline:
        if not is_message_event(event):
            return items
        match event:
            case Quacked(content=content):
                return (*items, TimelineItem(content))
            case Deleted():
                if policy is TimelinePolicy.FOLD:
                    return remove_previous(items)
                return items
            case _:
                assert_never(event)

    return step


def timeline(
    events: Iterable[DomainEvent],
    policy: TimelinePolicy = TimelinePolicy.FOLD,
) -> Timeline:
    """Fold *events* into the ordered timeline, oldest first."""
    return fold(timeline_step(TimelinePolicy(policy)), events, ())
