"""Timeline read model."""

from __future__ import annotations

from quackstream.core.enums import TimelinePolicy
from quackstream.domain.events import DomainEvent, TimelineItem
from quackstream.domain.projections import Timeline as TimelineItems
from quackstream.domain.projections import timeline_step


class Timeline:
    """Ordered display items, oldest first.

    Under ``TimelinePolicy.FOLD`` a ``Deleted`` removes the most recently
    added item; under ``APPEND_ONLY`` it is ignored.
    """

    def __init__(self, policy: TimelinePolicy = TimelinePolicy.FOLD) -> None:
        self._policy = TimelinePolicy(policy)
        self._step = timeline_step(self._policy)
        self._items: TimelineItems = ()

    def handle(self, event: DomainEvent) -> None:
        self._items = self._step(self._items, event)

    @property
    def policy(self) -> TimelinePolicy:
        return self._policy

    @property
    def items(self) -> tuple[TimelineItem, ...]:
        return self._items

    def contents(self) -> list[str]:
        return [item.content for item in self._items]

    def __len__(self) -> int:
        return len(self._items)
