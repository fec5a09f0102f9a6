"""Shared fixtures for the quackstream test suite."""

from __future__ import annotations

import pytest

from quackstream.core.config import Settings
from quackstream.infrastructure.event_bus import InMemoryEventBus
from quackstream.infrastructure.event_log import EventLog
from quackstream.readmodels.counter import QuackCounter
from quackstream.readmodels.timeline import Timeline


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    """Keep QUACK_* variables from the host out of Settings."""
    import os

    for key in list(os.environ):
        if key.startswith("QUACK_"):
            monkeypatch.delenv(key, raising=False)


@pytest.fixture
def settings() -> Settings:
    return Settings()


@pytest.fixture
def event_log() -> EventLog:
    return EventLog()


@pytest.fixture
def event_bus(event_log: EventLog) -> InMemoryEventBus:
    return InMemoryEventBus(event_log)


@pytest.fixture
def counter(event_bus: InMemoryEventBus) -> QuackCounter:
    """A counter subscribed from the start."""
    c = QuackCounter()
    event_bus.subscribe(c)
    return c


@pytest.fixture
def timeline(event_bus: InMemoryEventBus) -> Timeline:
    """A fold-policy timeline subscribed from the start."""
    t = Timeline()
    event_bus.subscribe(t)
    return t
