"""Sleep steps: a pausable real-clock sleep and a one-frame spacer."""

import asyncio
from typing import TYPE_CHECKING

from ..config import TypewriterOptions
from ..signals import SignalKind
from .base import PausableModule

if TYPE_CHECKING:
    from ..scheduler import Typewriter


class SleepModule(PausableModule):
    """Base for steps that only wait. The scheduler never inserts spacing after one."""

    def __init__(self, typewriter: "Typewriter", ms: float, options: TypewriterOptions | None = None):
        super().__init__(typewriter, options)
        self.ms = ms

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.ms}ms>"


class TimedSleepModule(SleepModule):
    """Sleeps `ms` milliseconds of running time on a real-clock timer.

    Pausing cancels the timer and resolves PAUSED right away. Time spent
    paused does not count: resuming sleeps only what was left.
    """

    def __init__(self, typewriter: "Typewriter", ms: float, options: TypewriterOptions | None = None):
        super().__init__(typewriter, ms, options)
        self.slept = 0.0
        self._started_at: float | None = None
        self._timer = None

    @property
    def remaining(self) -> float:
        return max(0.0, self.ms - self.slept)

    def action(self) -> asyncio.Future:
        if self.in_flight:
            return self._future

        resuming = self._enter()
        future = self._new_future()
        if not resuming:
            self.slept = 0.0
        self._log(SignalKind.BEGAN)

        if resuming and self.remaining <= 0:
            # Already slept enough, finish on the frame boundary
            self._request_frame(lambda now: self._settle(SignalKind.DONE))
        else:
            self._sleep(self.remaining)
        return future

    def _sleep(self, ms: float) -> None:
        self._started_at = self.clock.now()
        self._timer = self.clock.set_timer(ms, self._wake)

    def _wake(self) -> None:
        self._timer = None
        self.slept = self.ms
        self._settle(SignalKind.DONE)

    def pause(self) -> None:
        super().pause()
        if self._timer is None:
            return
        self.clock.cancel_timer(self._timer)
        self._timer = None
        self.slept += self.clock.now() - self._started_at
        self._settle(SignalKind.PAUSED)


class FrameSleepModule(SleepModule):
    """Waits exactly one frame. Cannot be paused.

    Inserted between animations so each result stays on screen for at
    least one rendered frame.
    """

    pausable = False

    def __init__(self, typewriter: "Typewriter", options: TypewriterOptions | None = None):
        super().__init__(typewriter, 0, options)

    def action(self) -> asyncio.Future:
        future = self._new_future()
        self._log(SignalKind.BEGAN)
        self._request_frame(lambda now: self._settle(SignalKind.DONE))
        return future

    def pause(self) -> None:
        pass

    def resume(self) -> asyncio.Future | None:
        """No-op. Returns the pending future while in flight, else None."""
        return self._future if self.in_flight else None

    def __repr__(self) -> str:
        return "<FrameSleepModule>"
