"""Append-only event log, the single source of truth.

Design invariants
-----------------
1.  ``append()`` only ever adds at the tail; an event's position and
    value never change once written.
2.  ``events()`` and ``snapshot()`` return copies taken at read time.
    Later appends never alter a snapshot already handed out.
3.  Once a writer has been claimed, appends from anyone else raise
    ``WriteOwnershipError``.  An unclaimed log accepts any append, which
    is how a caller seeds history before wiring a bus.

This module provides:

*  ``History``: immutable, versioned view of a log prefix.
*  ``EventLog``: list-backed in-memory implementation.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable, Iterable, Iterator, Sequence
from typing import TypeVar, overload

from quackstream.core.errors import WriteOwnershipError
from quackstream.domain.events import DomainEvent
from quackstream.domain.projections import fold

logger = logging.getLogger(__name__)

S = TypeVar("S")


# ---------------------------------------------------------------------------
# Read-only snapshot
# ---------------------------------------------------------------------------

class History(Sequence[DomainEvent]):
    """Immutable view over the first ``version`` events of a log.

    Supports iteration, indexing, ``len`` and ``fold``; there is no way to
    reorder or mutate the underlying events through it.
    """

    __slots__ = ("_events",)

    def __init__(self, events: Iterable[DomainEvent] = ()) -> None:
        self._events: tuple[DomainEvent, ...] = tuple(events)

    @property
    def version(self) -> int:
        """Number of events in the log when this snapshot was taken."""
        return len(self._events)

    @overload
    def __getitem__(self, index: int) -> DomainEvent: ...
    @overload
    def __getitem__(self, index: slice) -> History: ...

    def __getitem__(self, index: int | slice) -> DomainEvent | History:
        if isinstance(index, slice):
            return History(self._events[index])
        return self._events[index]

    def __len__(self) -> int:
        return len(self._events)

    def __iter__(self) -> Iterator[DomainEvent]:
        return iter(self._events)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, History):
            return self._events == other._events
        if isinstance(other, (tuple, list)):
            return self._events == tuple(other)
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self._events)

    def __repr__(self) -> str:
        return f"History({list(self._events)!r})"

    def fold(self, step: Callable[[S, DomainEvent], S], initial: S) -> S:
        """Left-fold the snapshot, oldest first."""
        return fold(step, self._events, initial)

    def as_tuple(self) -> tuple[DomainEvent, ...]:
        return self._events


# ---------------------------------------------------------------------------
# In-memory implementation
# ---------------------------------------------------------------------------

class EventLog:
    """List-backed event log.  No persistence across restarts."""

    def __init__(self, initial: Iterable[DomainEvent] = ()) -> None:
        self._lock = threading.RLock()
        self._events: list[DomainEvent] = list(initial)
        self._writer: object | None = None

    # -- Ownership ---------------------------------------------------------

    def claim_writer(self, owner: object) -> None:
        """Make *owner* the only component allowed to append."""
        with self._lock:
            if self._writer is not None and self._writer is not owner:
                raise WriteOwnershipError(
                    f"Event log already owned by {self._writer!r}, "
                    f"refusing claim from {owner!r}"
                )
            self._writer = owner

    @property
    def writer(self) -> object | None:
        return self._writer

    # -- Writes ------------------------------------------------------------

    def append(self, event: DomainEvent, *, writer: object | None = None) -> None:
        """Append *event* at the tail."""
        with self._lock:
            if self._writer is not None and writer is not self._writer:
                raise WriteOwnershipError(
                    f"Only {self._writer!r} may append to this event log"
                )
            self._events.append(event)
            logger.debug(
                "Appended %s at sequence %d", type(event).__name__, len(self._events),
            )

    # -- Reads -------------------------------------------------------------

    def events(self) -> tuple[DomainEvent, ...]:
        """Full history, oldest first."""
        with self._lock:
            return tuple(self._events)

    def snapshot(self) -> History:
        """Read-only view of the history as of now."""
        with self._lock:
            return History(self._events)

    def read(
        self,
        event_type: type[DomainEvent] | None = None,
        after_sequence: int | None = None,
        limit: int = 10_000,
    ) -> list[DomainEvent]:
        """Read events in append order with optional filters.

        ``after_sequence`` skips that many events from the head.
        """
        start = after_sequence if after_sequence is not None else 0
        out: list[DomainEvent] = []
        for event in self.events()[start:]:
            if event_type is not None and type(event) is not event_type:
                continue
            out.append(event)
            if len(out) >= limit:
                break
        return out

    def replay(self, event_type: type[DomainEvent] | None = None) -> Iterator[DomainEvent]:
        """Yield events lazily from a snapshot taken at call time."""
        snapshot = self.snapshot()
        return (
            event for event in snapshot
            if event_type is None or type(event) is event_type
        )

    def __iter__(self) -> Iterator[DomainEvent]:
        return iter(self.snapshot())

    def __len__(self) -> int:
        with self._lock:
            return len(self._events)

    def __repr__(self) -> str:
        return f"EventLog(len={len(self)})"
