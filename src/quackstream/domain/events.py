"""Canonical domain events for a quacked message.

Design invariants
-----------------
1.  Every event is **immutable** (``frozen=True``) and compared by value,
    so ``Quacked("Hello") == Quacked("Hello")``.
2.  The event set is **closed**: ``MessageEvent`` is the union of every
    variant, and projections match on it exhaustively.
3.  Events carry no identity or timestamp; their position in the
    ``EventLog`` is their only ordering.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, ClassVar, TypeAlias, TypeGuard

from quackstream.core.errors import UnknownEventError

# ---------------------------------------------------------------------------
# Base
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class DomainEvent:
    """Immutable base for every domain event.

    ``kind`` is the discriminant tag used when an event leaves the process
    as a plain dict.
    """

    kind: ClassVar[str] = ""


# =========================================================================
# Message lifecycle
# =========================================================================

@dataclass(frozen=True)
class Quacked(DomainEvent):
    """A message was posted."""

    kind: ClassVar[str] = "message_quacked"

    content: str = ""


@dataclass(frozen=True)
class Deleted(DomainEvent):
    """A message was retracted ("couic"). Sticky: at most once per message."""

    kind: ClassVar[str] = "message_deleted"


#: The closed set of message events.
MessageEvent: TypeAlias = Quacked | Deleted

#: All event types in a deterministic order.
ALL_DOMAIN_EVENTS: tuple[type[DomainEvent], ...] = (Quacked, Deleted)

_BY_KIND: dict[str, type[DomainEvent]] = {cls.kind: cls for cls in ALL_DOMAIN_EVENTS}


# =========================================================================
# Read-model values
# =========================================================================

@dataclass(frozen=True)
class TimelineItem:
    """One line on a timeline, produced from a ``Quacked`` event."""

    content: str = ""


# ---------------------------------------------------------------------------
# Dict helpers
# ---------------------------------------------------------------------------

def event_to_dict(event: DomainEvent) -> dict[str, Any]:
    """Serialize an event to ``{"kind": ..., **payload}``."""
    d = asdict(event)
    d["kind"] = event.kind
    return d


def event_from_dict(d: dict[str, Any]) -> DomainEvent:
    """Rebuild an event from :func:`event_to_dict` output.

    Raises ``UnknownEventError`` if the kind or its payload is not valid.
    """
    payload = dict(d)
    kind = payload.pop("kind", None)
    cls = _BY_KIND.get(kind) if isinstance(kind, str) else None
    if cls is None:
        raise UnknownEventError(f"Unknown event kind: {kind!r}")
    try:
        return cls(**payload)
    except TypeError as exc:
        raise UnknownEventError(f"Bad payload for {kind!r}: {exc}") from exc


def is_message_event(event: object) -> TypeGuard[MessageEvent]:
    """True if *event* is one of the closed ``MessageEvent`` variants."""
    return isinstance(event, (Quacked, Deleted))
