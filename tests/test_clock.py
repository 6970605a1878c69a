"""
Tests for ManualClock and CompletionSignal, the pieces the other tests lean on.

Run with: pytest tests/test_clock.py -v
"""

import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).parent.parent))

from typewriter_tui import CompletionSignal, ManualClock, SignalKind


class TestManualClock:
    """Deterministic frames and timers."""

    def test_frame_advances_time_and_passes_timestamp(self):
        clock = ManualClock(frame_interval_ms=10)
        seen = []
        clock.request_frame(seen.append)
        clock.frame()
        assert seen == [10]
        assert clock.now() == 10

    def test_callback_runs_once(self):
        clock = ManualClock(frame_interval_ms=10)
        seen = []
        clock.request_frame(seen.append)
        clock.frame()
        clock.frame()
        assert seen == [10]

    def test_frames_requested_during_a_frame_wait(self):
        clock = ManualClock(frame_interval_ms=10)
        seen = []

        def again(now):
            seen.append(now)
            if len(seen) < 3:
                clock.request_frame(again)

        clock.request_frame(again)
        clock.frame()
        assert seen == [10]
        clock.frame()
        clock.frame()
        assert seen == [10, 20, 30]

    def test_timers_fire_in_due_order(self):
        clock = ManualClock()
        fired = []
        clock.set_timer(30, lambda: fired.append(("b", clock.now())))
        clock.set_timer(10, lambda: fired.append(("a", clock.now())))
        clock.advance(50)
        assert fired == [("a", 10), ("b", 30)]
        assert clock.now() == 50

    def test_cancelled_timer_never_fires(self):
        clock = ManualClock()
        fired = []
        handle = clock.set_timer(10, lambda: fired.append(1))
        clock.cancel_timer(handle)
        assert clock.pending_timers == 0
        clock.advance(100)
        assert fired == []

    def test_timers_fire_before_frame_callbacks(self):
        clock = ManualClock(frame_interval_ms=10)
        order = []
        clock.request_frame(lambda now: order.append("frame"))
        clock.set_timer(10, lambda: order.append("timer"))
        clock.frame()
        assert order == ["timer", "frame"]

    @pytest.mark.asyncio
    async def test_run_until_counts_frames(self):
        clock = ManualClock(frame_interval_ms=10)
        frames = await clock.run_until(lambda: clock.now() >= 50)
        assert frames == 5

    @pytest.mark.asyncio
    async def test_run_until_gives_up(self):
        clock = ManualClock()
        with pytest.raises(TimeoutError):
            await clock.run_until(lambda: False, max_frames=10)


class TestCompletionSignal:
    """Signals identify their module without owning it."""

    class Dummy:
        pass

    def test_str_names_module_and_kind(self):
        module = self.Dummy()
        signal = CompletionSignal.of(SignalKind.DONE, module)
        assert str(signal) == "Dummy done!"
        assert signal.module is module
        assert signal.is_done and not signal.is_paused

    def test_weak_reference(self):
        module = self.Dummy()
        signal = CompletionSignal.of(SignalKind.PAUSED, module)
        del module
        assert signal.module is None
        assert str(signal) == "<gone> paused!"

    def test_immutable(self):
        signal = CompletionSignal.of(SignalKind.TICK, self.Dummy())
        with pytest.raises(AttributeError):
            signal.kind = SignalKind.DONE
