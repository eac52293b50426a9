"""
Tests for the line handler registry.
"""

import re
import pytest

from cectraffic.parser.handlers import LineHandler, LineHandlerRegistry


@pytest.fixture
def calls():
    return []


@pytest.fixture
def registry(calls):
    """The readiness + traffic registry recording its callbacks."""
    return LineHandlerRegistry.default(
        on_ready=lambda line: calls.append(("ready", line)),
        on_traffic=lambda line: calls.append(("traffic", line)),
    )


class TestLineHandler:
    """Test the three matcher kinds."""

    def test_contains(self):
        handler = LineHandler(callback=print, contains="waiting for input")
        assert handler.matches("  waiting for input\r")
        assert not handler.matches("waiting")

    def test_pattern(self):
        handler = LineHandler(callback=print, match=re.compile(r"^TRAFFIC:"))
        assert handler.matches("TRAFFIC: [ 1]\t>> 10")
        assert not handler.matches("DEBUG: TRAFFIC: [ 1]")

    def test_predicate(self):
        handler = LineHandler(callback=print, fn=lambda line: line.startswith("NOTICE"))
        assert handler.matches("NOTICE: connected")
        assert not handler.matches("ERROR")

    def test_needs_exactly_one_rule(self):
        with pytest.raises(ValueError):
            LineHandler(callback=print)
        with pytest.raises(ValueError):
            LineHandler(callback=print, contains="a", fn=bool)


class TestLineHandlerRegistry:
    """Test handler evaluation order."""

    def test_first_handler_matches(self, registry, calls):
        assert registry.process("waiting for input") == 1
        assert calls == [("ready", "waiting for input")]

    def test_only_first_handler_is_evaluated(self, registry, calls):
        line = "TRAFFIC: [   3475]\t>> 1f:82:10:00"
        assert registry.process(line) == 0
        assert calls == []

    def test_later_handler_runs_when_moved_first(self, calls):
        registry = LineHandlerRegistry(
            [
                LineHandler(callback=lambda line: calls.append("traffic"), match=re.compile(r"^TRAFFIC:")),
                LineHandler(callback=lambda line: calls.append("ready"), contains="waiting for input"),
            ]
        )
        registry.process("TRAFFIC: [ 1]\t>> 10")
        registry.process("waiting for input")
        assert calls == ["traffic"]

    def test_evaluate_all(self, calls):
        registry = LineHandlerRegistry.default(
            on_ready=lambda line: calls.append("ready"),
            on_traffic=lambda line: calls.append("traffic"),
            evaluate_all=True,
        )
        registry.process("TRAFFIC: [ 1]\t>> 10")
        registry.process("waiting for input")
        registry.process("log: nothing to see")
        assert calls == ["traffic", "ready"]

    def test_evaluate_all_runs_every_match(self, calls):
        registry = LineHandlerRegistry(
            [
                LineHandler(callback=lambda line: calls.append(1), contains="TRAFFIC"),
                LineHandler(callback=lambda line: calls.append(2), fn=lambda line: True),
            ],
            evaluate_all=True,
        )
        assert registry.process("TRAFFIC") == 2
        assert calls == [1, 2]

    def test_empty_registry(self):
        assert LineHandlerRegistry([]).process("anything") == 0
