"""Frame clocks and timers that drive the typewriter.

The scheduler never sleeps. It asks a clock for "call me on the next frame"
or "call me in N milliseconds" and returns control to the event loop.

Three clocks are provided:
    AsyncioClock  - real time on the running asyncio loop (headless)
    TextualClock  - real time on a Textual widget's timers (see widget.py)
    ManualClock   - fake time advanced by hand, for deterministic tests
"""

import asyncio
import heapq
import itertools
import time
from dataclasses import dataclass, field
from typing import Any, Callable, Protocol

from .constants import FRAME_INTERVAL_MS

FrameCallback = Callable[[float], None]


class FrameClock(Protocol):
    """Monotonic millisecond clock with once-per-frame callbacks."""

    def now(self) -> float: ...

    def request_frame(self, callback: FrameCallback) -> None:
        """Call callback(timestamp_ms) once, before the next repaint."""
        ...


class TimerProvider(Protocol):
    """One-shot real-clock timers."""

    def set_timer(self, ms: float, callback: Callable[[], None]) -> Any: ...

    def cancel_timer(self, handle: Any) -> None: ...


class Clock(FrameClock, TimerProvider, Protocol):
    """Both collaborators in one object, which is how every clock here ships."""


class AsyncioClock:
    """Frames and timers on the running asyncio event loop."""

    def __init__(self, frame_interval_ms: float = FRAME_INTERVAL_MS):
        self.frame_interval_ms = frame_interval_ms

    def now(self) -> float:
        return time.monotonic() * 1000

    def request_frame(self, callback: FrameCallback) -> None:
        loop = asyncio.get_running_loop()
        loop.call_later(self.frame_interval_ms / 1000, lambda: callback(self.now()))

    def set_timer(self, ms: float, callback: Callable[[], None]) -> asyncio.TimerHandle:
        return asyncio.get_running_loop().call_later(ms / 1000, callback)

    def cancel_timer(self, handle: asyncio.TimerHandle) -> None:
        handle.cancel()


@dataclass(order=True)
class ManualTimer:
    """A pending ManualClock timer. Ordered by due time, then creation."""
    due: float
    seq: int
    callback: Callable[[], None] = field(compare=False)
    cancelled: bool = field(default=False, compare=False)


class ManualClock:
    """A clock that only moves when told to.

    Usage:
        clock = ManualClock()
        typewriter = Typewriter(surface, clock=clock)
        typewriter.write("abc").start()
        await clock.run_until(lambda: typewriter.state is SchedulerState.IDLE)

    frame() advances time by one frame interval, fires timers that came due
    on the way, then runs the frame callbacks requested before the frame.
    Callbacks requested while a frame runs wait for the next frame.

    Futures resolved inside callbacks notify their listeners through the
    event loop, so the async helpers yield to the loop after every frame.
    """

    # Loop iterations to yield after each frame so done-callbacks chain through
    SETTLE_ROUNDS = 5

    def __init__(self, start: float = 0.0, frame_interval_ms: float = FRAME_INTERVAL_MS):
        self._now = start
        self.frame_interval_ms = frame_interval_ms
        self._frames: list[FrameCallback] = []
        self._timers: list[ManualTimer] = []
        self._seq = itertools.count()
        self.frame_count = 0

    def now(self) -> float:
        return self._now

    def request_frame(self, callback: FrameCallback) -> None:
        self._frames.append(callback)

    def set_timer(self, ms: float, callback: Callable[[], None]) -> ManualTimer:
        timer = ManualTimer(self._now + ms, next(self._seq), callback)
        heapq.heappush(self._timers, timer)
        return timer

    def cancel_timer(self, handle: ManualTimer) -> None:
        handle.cancelled = True

    @property
    def pending_frames(self) -> int:
        return len(self._frames)

    @property
    def pending_timers(self) -> int:
        return sum(1 for t in self._timers if not t.cancelled)

    def _fire_timers(self, until: float) -> None:
        while self._timers and self._timers[0].due <= until:
            timer = heapq.heappop(self._timers)
            if timer.cancelled:
                continue
            self._now = max(self._now, timer.due)
            timer.callback()

    def advance(self, ms: float) -> None:
        """Move time forward, firing due timers but no frame callbacks."""
        target = self._now + ms
        self._fire_timers(target)
        self._now = target

    def frame(self) -> None:
        """Advance one frame interval and run the queued frame callbacks."""
        self.advance(self.frame_interval_ms)
        callbacks, self._frames = self._frames, []
        self.frame_count += 1
        for callback in callbacks:
            callback(self._now)

    async def settle(self) -> None:
        """Let the event loop run pending future callbacks."""
        for _ in range(self.SETTLE_ROUNDS):
            await asyncio.sleep(0)

    async def run_frames(self, count: int) -> None:
        for _ in range(count):
            self.frame()
            await self.settle()

    async def run_for(self, ms: float) -> None:
        """Run as many frames as fit into ms of fake time."""
        target = self._now + ms
        while self._now + self.frame_interval_ms <= target + 1e-9:
            self.frame()
            await self.settle()

    async def run_until(self, predicate: Callable[[], bool], max_frames: int = 100_000) -> int:
        """Run frames until predicate() is true. Returns the frames it took."""
        await self.settle()
        for count in range(max_frames):
            if predicate():
                return count
            self.frame()
            await self.settle()
        if predicate():
            return max_frames
        raise TimeoutError(f"Condition not reached after {max_frames} frames")
