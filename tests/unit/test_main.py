"""Tests for script parsing and the run wiring (``main.py``)."""

from __future__ import annotations

import pytest

from quackstream.core.config import Settings
from quackstream.core.enums import CommandOutcome
from quackstream.core.errors import CommandScriptError
from quackstream.domain.commands import Delete, Quack
from quackstream.domain.events import Deleted, Quacked, TimelineItem
from quackstream.main import parse_command, parse_script, run


class TestParseCommand:
    def test_quack(self):
        assert parse_command("quack:Hello") == Quack("Hello")

    def test_quack_keeps_colons_in_content(self):
        assert parse_command("quack:=> General: Kenobi") == Quack("=> General: Kenobi")

    def test_quack_empty_content_allowed(self):
        assert parse_command("quack:") == Quack("")

    def test_delete(self):
        assert parse_command("delete") == Delete()
        assert parse_command("DELETE") == Delete()

    @pytest.mark.parametrize("token", ["quack", "delete:now", "edit:x", ""])
    def test_bad_tokens(self, token):
        with pytest.raises(CommandScriptError):
            parse_command(token)

    def test_parse_script(self):
        assert parse_script(["quack:a", "delete"]) == [Quack("a"), Delete()]


class TestRun:
    def test_quack_delete_requack(self):
        report = run([Quack("Hello"), Delete(), Quack("There")])

        assert report.events == (Quacked("Hello"), Deleted(), Quacked("There"))
        assert report.count == 1
        assert report.timeline == (TimelineItem("There"),)
        assert [r.outcome for r in report.results] == [CommandOutcome.APPLIED] * 3

    def test_second_delete_rejected(self):
        report = run([Quack("x"), Delete(), Delete()])

        assert report.events == (Quacked("x"), Deleted())
        assert report.results[-1].outcome is CommandOutcome.REJECTED

    def test_history_respected_by_decision(self):
        report = run([Delete()], history=[Quacked("x"), Deleted()])
        assert report.events == (Quacked("x"), Deleted())
        assert report.count == 0

    def test_history_replayed_when_configured(self):
        settings = Settings(policy={"replay_on_subscribe": True})
        report = run([Quack("b")], settings, history=[Quacked("a")])
        assert report.count == 2
        assert [i.content for i in report.timeline] == ["a", "b"]

    def test_append_only_timeline(self):
        settings = Settings(policy={"timeline_policy": "append_only"})
        report = run([Quack("a"), Delete()], settings)
        assert report.timeline == (TimelineItem("a"),)

    def test_reject_after_delete(self):
        settings = Settings(policy={"quack_policy": "reject_after_delete"})
        report = run([Quack("a"), Delete(), Quack("b")], settings)
        assert report.events == (Quacked("a"), Deleted())
        assert report.results[-1].outcome is CommandOutcome.REJECTED
