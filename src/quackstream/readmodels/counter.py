"""Running count of live quacks, maintained from the event stream."""

from __future__ import annotations

from quackstream.domain.events import DomainEvent
from quackstream.domain.projections import evolve_count


class QuackCounter:
    """+1 per ``Quacked``, -1 per ``Deleted``.

    The count only reflects events this counter was handed.  It is not
    clamped, so a ``Deleted`` seen without its ``Quacked`` (late
    subscription without replay) drives it below zero.
    """

    def __init__(self) -> None:
        self._count = 0

    def handle(self, event: DomainEvent) -> None:
        self._count = evolve_count(self._count, event)

    @property
    def count(self) -> int:
        return self._count
