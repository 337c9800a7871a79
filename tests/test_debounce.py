"""Tests for the trailing-edge Debouncer."""

import asyncio

import pytest

from studydeck.study.debounce import Debouncer

from tests.conftest import ManualLoop


class TestDebouncer:
    """Test suite for Debouncer on a manual loop."""

    def test_burst_collapses_to_last_call(self, manual_loop: ManualLoop) -> None:
        calls = []
        debounced = Debouncer(calls.append, 0.3, loop=manual_loop)

        for query in ("c", "ca", "cat"):
            debounced(query)
            manual_loop.advance(0.1)

        assert calls == []
        manual_loop.advance(0.3)
        assert calls == ["cat"]
        assert manual_loop.scheduled == 0

    def test_calls_spaced_beyond_window_all_fire(self, manual_loop: ManualLoop) -> None:
        calls = []
        debounced = Debouncer(calls.append, 0.3, loop=manual_loop)

        debounced("a")
        manual_loop.advance(0.5)
        debounced("b")
        manual_loop.advance(0.5)

        assert calls == ["a", "b"]

    def test_cancel(self, manual_loop: ManualLoop) -> None:
        calls = []
        debounced = Debouncer(calls.append, 0.3, loop=manual_loop)

        debounced("a")
        debounced.cancel()
        manual_loop.advance(1.0)

        assert calls == []
        assert debounced.pending is False

    def test_flush_runs_pending_call_once(self, manual_loop: ManualLoop) -> None:
        calls = []
        debounced = Debouncer(calls.append, 0.3, loop=manual_loop)

        debounced("a")
        assert debounced.flush() is True
        manual_loop.advance(1.0)

        assert calls == ["a"]
        assert debounced.flush() is False

    def test_without_event_loop_calls_immediately(self) -> None:
        calls = []
        debounced = Debouncer(calls.append, 0.3)
        debounced("now")
        assert calls == ["now"]
        assert debounced.pending is False


@pytest.mark.asyncio
async def test_debounces_on_running_event_loop() -> None:
    calls = []
    debounced = Debouncer(calls.append, 0.05)

    debounced("c")
    debounced("ca")
    debounced("cat")
    assert debounced.pending is True

    await asyncio.sleep(0.15)

    assert calls == ["cat"]
    assert debounced.pending is False
