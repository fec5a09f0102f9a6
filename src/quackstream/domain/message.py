"""Command handler for a single quacked message.

``Message`` folds the history it is given into a ``DecisionState`` once,
then keeps that state current by applying every event it publishes.  A
second ``delete()`` on the same instance is therefore rejected without
re-reading the log.

Lifecycle::

    ACTIVE --delete--> DELETED   (terminal)

Rejected commands publish nothing and raise nothing; the returned
``CommandResult`` tells the two cases apart.

If a subscriber raises after an event was appended, the local state still
absorbs that event before the error propagates, so a retry sees what the
log holds.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import TYPE_CHECKING

from quackstream.core.enums import QuackPolicy
from quackstream.core.errors import ReentrantPublishError

from .commands import CommandResult, Delete, MessageCommand, Quack
from .decisions import REASON_ALREADY_DELETED, decide
from .events import DomainEvent
from .projections import DecisionState, decision_state, evolve_decision

if TYPE_CHECKING:
    from quackstream.infrastructure.event_bus import EventPublisher

logger = logging.getLogger(__name__)


class Message:
    """Validates commands against re-derived state, then publishes."""

    def __init__(
        self,
        history: Iterable[DomainEvent],
        *,
        quack_policy: QuackPolicy = QuackPolicy.ALLOW,
    ) -> None:
        self._state: DecisionState = decision_state(history)
        self._quack_policy = QuackPolicy(quack_policy)

    @property
    def state(self) -> DecisionState:
        return self._state

    @property
    def is_deleted(self) -> bool:
        return self._state.is_deleted

    def quack(self, publisher: EventPublisher, content: str) -> CommandResult:
        """Post *content*."""
        return self._execute(publisher, Quack(content))

    def delete(self, publisher: EventPublisher) -> CommandResult:
        """Retract the message.  No-op if it is already deleted."""
        return self._execute(publisher, Delete())

    def _execute(self, publisher: EventPublisher, command: MessageCommand) -> CommandResult:
        produced = decide(self._state, command, quack_policy=self._quack_policy)
        if not produced:
            logger.debug(
                "Rejected %s: %s", type(command).__name__, REASON_ALREADY_DELETED,
            )
            return CommandResult.rejected(REASON_ALREADY_DELETED)

        for event in produced:
            try:
                publisher.publish(event)
            except ReentrantPublishError as exc:
                # only a refusal of this very event means nothing was appended
                if exc.event is not event:
                    self._state = evolve_decision(self._state, event)
                raise
            except Exception:
                # appended; a subscriber failed afterwards
                self._state = evolve_decision(self._state, event)
                raise
            self._state = evolve_decision(self._state, event)
        return CommandResult.applied_with(produced)
