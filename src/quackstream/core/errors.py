"""Custom exception hierarchy for quackstream.

Domain rejections (deleting an already deleted message) are reported as
``CommandOutcome.REJECTED`` results, never raised.
"""


class QuackstreamError(Exception):
    """Base exception for all quackstream errors."""


# --- Configuration ---
class ConfigError(QuackstreamError):
    """Invalid or unreadable configuration."""


# --- Events ---
class UnknownEventError(QuackstreamError):
    """Event kind is not part of the closed event union."""


# --- Event log ---
class EventLogError(QuackstreamError):
    """Event log misuse."""


class WriteOwnershipError(EventLogError):
    """Raised when a component other than the owning writer appends."""


# --- Event bus ---
class EventBusError(QuackstreamError):
    """Event bus misuse."""


class ReentrantPublishError(EventBusError):
    """A subscriber tried to publish while the bus was dispatching.

    ``event`` is the refused event; it was not appended.
    """

    def __init__(self, event: object):
        self.event = event
        super().__init__(
            f"Cannot publish {type(event).__name__} while dispatching"
        )


# --- CLI ---
class CommandScriptError(QuackstreamError):
    """A CLI command token could not be parsed."""

    def __init__(self, token: str, reason: str):
        self.token = token
        self.reason = reason
        super().__init__(f"Bad command {token!r}: {reason}")
