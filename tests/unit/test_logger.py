"""Tests for structured logging helpers (``observability/logger.py``)."""

from __future__ import annotations

import pytest
import structlog

from quackstream.core.config import ObservabilityConfig
from quackstream.core.errors import ConfigError
from quackstream.observability.logger import (
    _render_domain_events,
    bind_correlation_id,
    get_logger,
    setup_logging,
)


@pytest.fixture(autouse=True)
def _clean_log_context():
    yield
    structlog.contextvars.clear_contextvars()


class TestCorrelationId:
    def test_bound_into_structlog_context(self):
        cid = bind_correlation_id("abc")
        assert cid == "abc"
        assert structlog.contextvars.get_contextvars() == {"correlation_id": "abc"}

    def test_generated_when_not_given(self):
        cid = bind_correlation_id()
        assert len(cid) == 36
        assert structlog.contextvars.get_contextvars()["correlation_id"] == cid

    def test_new_run_drops_previous_context(self):
        bind_correlation_id("first")
        structlog.contextvars.bind_contextvars(command="delete")
        bind_correlation_id("second")
        assert structlog.contextvars.get_contextvars() == {"correlation_id": "second"}

    def test_merged_into_entries(self):
        bind_correlation_id("xyz")
        out = structlog.contextvars.merge_contextvars(None, "info", {"event": "hello"})
        assert out == {"event": "hello", "correlation_id": "xyz"}


class TestSetup:
    def test_setup_and_log(self):
        setup_logging(ObservabilityConfig(log_level="DEBUG", log_format="json"))
        logger = get_logger("quackstream.test")
        logger.info("test_event", key="value")

    def test_defaults(self):
        setup_logging()
        get_logger("quackstream.test").debug("quiet")

    def test_level_is_case_insensitive(self):
        setup_logging(ObservabilityConfig(log_level="warning"))

    def test_unknown_level_rejected(self):
        with pytest.raises(ConfigError, match="log level"):
            setup_logging(ObservabilityConfig(log_level="LOUD"))

    def test_unknown_format_rejected(self):
        with pytest.raises(ConfigError, match="log format"):
            setup_logging(ObservabilityConfig(log_format="xml"))


class TestRenderDomainEvents:
    def test_single_event_rendered(self):
        from quackstream.domain.events import Quacked

        out = _render_domain_events(None, "info", {"event": "x", "e": Quacked("Hi")})
        assert out["e"] == {"kind": "message_quacked", "content": "Hi"}

    def test_event_sequences_rendered(self):
        from quackstream.domain.events import Deleted, Quacked

        out = _render_domain_events(
            None, "info", {"produced": (Quacked("a"), Deleted()), "other": [1, 2]},
        )
        assert out["produced"] == [
            {"kind": "message_quacked", "content": "a"},
            {"kind": "message_deleted"},
        ]
        assert out["other"] == [1, 2]
