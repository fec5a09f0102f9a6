"""Structured logging for quackstream runs.

Library modules keep using ``logging.getLogger(__name__)``; entry points
call ``setup_logging`` once and log through ``get_logger``.  Per-run fields
such as ``correlation_id`` live in structlog's context variables and are
merged into every entry.
"""

from __future__ import annotations

import logging
import sys
import uuid
from typing import Any

import structlog

from quackstream.core.config import ObservabilityConfig
from quackstream.core.errors import ConfigError

_RENDERERS: dict[str, Any] = {
    "json": structlog.processors.JSONRenderer,
    "console": structlog.dev.ConsoleRenderer,
}


def bind_correlation_id(correlation_id: str | None = None) -> str:
    """Start a fresh logging context for one run and return its id."""
    cid = correlation_id or str(uuid.uuid4())
    structlog.contextvars.clear_contextvars()
    structlog.contextvars.bind_contextvars(correlation_id=cid)
    return cid


def _render_domain_events(
    logger: Any, method_name: str, event_dict: dict[str, Any]
) -> dict[str, Any]:
    """Structlog processor: turn DomainEvent values into plain dicts."""
    from quackstream.domain.events import DomainEvent, event_to_dict

    for key, value in event_dict.items():
        if isinstance(value, DomainEvent):
            event_dict[key] = event_to_dict(value)
        elif isinstance(value, (tuple, list)) and value and all(
            isinstance(v, DomainEvent) for v in value
        ):
            event_dict[key] = [event_to_dict(v) for v in value]
    return event_dict


def setup_logging(config: ObservabilityConfig | None = None) -> None:
    """Configure structlog and the stdlib root logger from *config*.

    Raises ``ConfigError`` for an unknown level or format, rather than
    quietly logging at some other level.
    """
    config = config or ObservabilityConfig()
    level = logging.getLevelName(config.log_level.upper())
    if not isinstance(level, int):
        raise ConfigError(f"Unknown log level: {config.log_level!r}")
    renderer = _RENDERERS.get(config.log_format)
    if renderer is None:
        raise ConfigError(
            f"Unknown log format: {config.log_format!r} "
            f"(expected one of {sorted(_RENDERERS)})"
        )

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.filter_by_level,
            _render_domain_events,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.UnicodeDecoder(),
            renderer(),
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(format="%(message)s", stream=sys.stderr)
    logging.getLogger().setLevel(level)


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    return structlog.get_logger(name)
