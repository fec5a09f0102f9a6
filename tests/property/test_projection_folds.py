"""Property tests: projections are pure folds and agree with live state.

Uses hypothesis to generate random histories and command scripts.
"""

from hypothesis import given, strategies as st

from quackstream.domain.commands import Delete, Quack
from quackstream.domain.decisions import decide, delete, quack
from quackstream.domain.events import Deleted, Quacked
from quackstream.domain.message import Message
from quackstream.domain.projections import (
    DecisionState,
    count_quacks,
    decision_state,
    evolve_count,
    evolve_decision,
    fold,
    is_deleted,
    timeline,
    timeline_step,
)
from quackstream.core.enums import TimelinePolicy
from quackstream.infrastructure.event_bus import InMemoryEventBus
from quackstream.infrastructure.event_log import EventLog
from quackstream.readmodels.counter import QuackCounter
from quackstream.readmodels.timeline import Timeline

events_st = st.lists(
    st.one_of(st.builds(Quacked, st.text(max_size=8)), st.just(Deleted())),
    max_size=30,
)
commands_st = st.lists(
    st.one_of(st.builds(Quack, st.text(max_size=8)), st.just(Delete())),
    max_size=30,
)


@given(a=events_st, b=events_st)
def test_decision_fold_is_associative_over_prefixes(a, b):
    whole = fold(evolve_decision, a + b, DecisionState())
    split = fold(evolve_decision, b, fold(evolve_decision, a, DecisionState()))
    assert whole == split


@given(a=events_st, b=events_st)
def test_count_fold_is_associative_over_prefixes(a, b):
    assert fold(evolve_count, a + b, 0) == fold(evolve_count, b, fold(evolve_count, a, 0))


@given(a=events_st, b=events_st)
def test_timeline_fold_is_associative_over_prefixes(a, b):
    step = timeline_step(TimelinePolicy.FOLD)
    assert fold(step, a + b, ()) == fold(step, b, fold(step, a, ()))


@given(events=events_st)
def test_is_deleted_iff_any_deleted(events):
    assert is_deleted(events) == any(isinstance(e, Deleted) for e in events)


@given(events=events_st)
def test_fold_is_deterministic(events):
    assert decision_state(events) == decision_state(list(events))
    assert timeline(events) == timeline(tuple(events))


@given(events=events_st)
def test_fold_timeline_never_longer_than_append_only(events):
    assert len(timeline(events)) <= len(timeline(events, TimelinePolicy.APPEND_ONLY))


@given(commands=commands_st)
def test_live_state_matches_replay(commands):
    log = EventLog()
    bus = InMemoryEventBus(log)
    message = Message(log)
    for command in commands:
        if isinstance(command, Quack):
            message.quack(bus, command.content)
        else:
            message.delete(bus)

    assert message.state == decision_state(log.events())
    assert sum(isinstance(e, Deleted) for e in log.events()) <= 1


@given(commands=commands_st)
def test_handler_agrees_with_functional_api(commands):
    log = EventLog()
    bus = InMemoryEventBus(log)
    message = Message(log)
    history: tuple = ()
    for command in commands:
        if isinstance(command, Quack):
            message.quack(bus, command.content)
            history = quack(history, command.content)
        else:
            message.delete(bus)
            history = delete(history)

    assert log.events() == history


@given(events=events_st)
def test_delete_is_idempotent(events):
    once = delete(events)
    assert delete(once) == once


@given(events=events_st)
def test_decide_delete_rejected_iff_deleted(events):
    produced = decide(decision_state(events), Delete())
    assert (produced == ()) == is_deleted(events)


@given(events=events_st)
def test_subscribers_match_full_folds_when_subscribed_from_start(events):
    bus = InMemoryEventBus()
    counter = QuackCounter()
    tl = Timeline()
    bus.subscribe(counter)
    bus.subscribe(tl)
    for event in events:
        bus.publish(event)

    assert counter.count == count_quacks(events)
    assert tl.items == timeline(events)
