"""Event bus: append to the log, then fan out to subscribers.

Design goals
------------
1.  **Single writer**: the bus claims ownership of its ``EventLog`` on
    construction; nothing else can append to that log afterwards.
2.  **Ordered, synchronous fan-out**: ``publish()`` appends and then
    calls every subscriber in registration order before returning.  The
    whole step runs under one lock, so concurrent publishers are
    serialized and every subscriber sees events in log order.
3.  **Subscribers are read models**: a subscriber publishing from inside
    ``handle()`` raises ``ReentrantPublishError``.
4.  **Configurable failure policy**: by default the first subscriber
    exception aborts the publish (the event stays appended, later
    subscribers are skipped).  With ``isolate_errors=True`` failures are
    logged, counted and dead-lettered and the fan-out carries on.

This module provides:

*  ``EventPublisher`` / ``EventSubscriber``: the protocols.
*  ``InMemoryEventBus``: deterministic in-process implementation.
*  ``create_event_bus``: factory from ``Settings``.
"""

from __future__ import annotations

import logging
import threading
from collections import defaultdict
from collections.abc import Callable
from dataclasses import dataclass
from typing import Protocol, Union, runtime_checkable

from quackstream.core.config import Settings
from quackstream.core.errors import ReentrantPublishError
from quackstream.domain.events import DomainEvent

from .event_log import EventLog

logger = logging.getLogger(__name__)

# Type alias for plain-function subscribers.
EventHandler = Callable[[DomainEvent], None]


# ---------------------------------------------------------------------------
# Protocols
# ---------------------------------------------------------------------------

@runtime_checkable
class EventPublisher(Protocol):
    """Anything a command handler can publish through."""

    def publish(self, event: DomainEvent) -> None: ...


@runtime_checkable
class EventSubscriber(Protocol):
    """A read model updated on each published event.

    Implementations ignore event types they are not interested in.
    """

    def handle(self, event: DomainEvent) -> None: ...


Subscription = Union[EventSubscriber, EventHandler]


@dataclass(frozen=True)
class DeadLetter:
    """Record of a subscriber failure (isolated mode only)."""

    subscriber: str
    event: DomainEvent
    error: str


def _subscriber_name(subscriber: Subscription) -> str:
    if isinstance(subscriber, EventSubscriber):
        return type(subscriber).__name__
    return getattr(subscriber, "__qualname__", repr(subscriber))


def _as_handler(subscriber: Subscription) -> EventHandler:
    if isinstance(subscriber, EventSubscriber):
        return subscriber.handle
    if callable(subscriber):
        return subscriber
    raise TypeError(
        f"Subscriber must expose handle(event) or be callable, got {subscriber!r}"
    )


# ---------------------------------------------------------------------------
# In-memory implementation
# ---------------------------------------------------------------------------

class InMemoryEventBus:
    """Deterministic, in-process event bus.

    Parameters
    ----------
    log
        The ``EventLog`` to own.  A fresh empty log is created if omitted.
    isolate_errors
        When ``True``, a failing subscriber does not stop the others.
    replay_on_subscribe
        Default for ``subscribe(replay=...)``: feed existing history to a
        newly registered subscriber before it sees new events.
    """

    def __init__(
        self,
        log: EventLog | None = None,
        *,
        isolate_errors: bool = False,
        replay_on_subscribe: bool = False,
    ) -> None:
        self._log = log if log is not None else EventLog()
        self._log.claim_writer(self)
        self._lock = threading.RLock()
        self._dispatching = False
        self._subscribers: list[tuple[str, EventHandler]] = []
        self._isolate_errors = isolate_errors
        self._replay_on_subscribe = replay_on_subscribe
        self._error_counts: dict[str, int] = defaultdict(int)
        self._dead_letters: list[DeadLetter] = []
        self._messages_processed: int = 0

    # -- Core API ----------------------------------------------------------

    def publish(self, event: DomainEvent) -> None:
        """Append *event* to the log, then notify every subscriber.

        Raises
        ------
        ReentrantPublishError
            If called from inside a subscriber.
        """
        with self._lock:
            if self._dispatching:
                raise ReentrantPublishError(event)
            self._log.append(event, writer=self)
            self._fan_out(list(self._subscribers), event)

    def subscribe(
        self,
        subscriber: Subscription,
        *,
        replay: bool | None = None,
    ) -> None:
        """Register *subscriber*; notification order is registration order.

        With ``replay`` the subscriber first receives the existing
        history, oldest first.  Defaults to the bus setting.
        """
        handler = _as_handler(subscriber)
        name = _subscriber_name(subscriber)
        if replay is None:
            replay = self._replay_on_subscribe

        with self._lock:
            if replay:
                for event in self._log.snapshot():
                    self._fan_out([(name, handler)], event)
            self._subscribers.append((name, handler))
        logger.debug("Subscribed %s (replay=%s)", name, replay)

    # -- Dispatch ----------------------------------------------------------

    def _fan_out(self, targets: list[tuple[str, EventHandler]], event: DomainEvent) -> None:
        outer = self._dispatching
        self._dispatching = True
        try:
            for name, handler in targets:
                self._dispatch(name, handler, event)
        finally:
            self._dispatching = outer

    def _dispatch(self, name: str, handler: EventHandler, event: DomainEvent) -> None:
        if not self._isolate_errors:
            handler(event)
            self._messages_processed += 1
            return

        try:
            handler(event)
            self._messages_processed += 1
        except ReentrantPublishError:
            raise
        except Exception as exc:
            self._error_counts[name] += 1
            self._dead_letters.append(
                DeadLetter(subscriber=name, event=event, error=str(exc))
            )
            logger.exception(
                "Subscriber error in %s on %s", name, type(event).__name__,
            )

    # -- Observability -----------------------------------------------------

    @property
    def log(self) -> EventLog:
        return self._log

    @property
    def subscribers(self) -> list[str]:
        """Subscriber names in notification order."""
        return [name for name, _ in self._subscribers]

    def get_history(
        self,
        event_type: type[DomainEvent] | None = None,
    ) -> list[DomainEvent]:
        """Return logged events, optionally filtered."""
        events = self._log.events()
        if event_type is None:
            return list(events)
        return [e for e in events if type(e) is event_type]

    def get_error_counts(self) -> dict[str, int]:
        return dict(self._error_counts)

    @property
    def dead_letters(self) -> list[DeadLetter]:
        return list(self._dead_letters)

    def clear_dead_letters(self) -> list[DeadLetter]:
        """Drain and return dead letters."""
        drained = self._dead_letters[:]
        self._dead_letters.clear()
        return drained

    @property
    def messages_processed(self) -> int:
        return self._messages_processed


def create_event_bus(
    settings: Settings | None = None,
    log: EventLog | None = None,
) -> InMemoryEventBus:
    """Create an event bus configured from *settings*."""
    settings = settings or Settings()
    return InMemoryEventBus(
        log,
        isolate_errors=settings.bus.isolate_subscriber_errors,
        replay_on_subscribe=settings.policy.replay_on_subscribe,
    )
