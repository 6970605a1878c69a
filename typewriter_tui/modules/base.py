"""Base classes for typewriter modules.

A module is one step of the effect. The scheduler calls action(), which
returns an asyncio.Future resolved exactly once with a CompletionSignal:
DONE when the step finished, PAUSED when a pause stopped it early.
"""

import asyncio
import logging
from typing import TYPE_CHECKING, Callable

from ..config import TypewriterOptions
from ..errors import TypewriterError
from ..signals import CompletionSignal, SignalKind

if TYPE_CHECKING:
    from ..scheduler import Typewriter

logger = logging.getLogger(__name__)


class Module:
    """One schedulable step bound to a typewriter and its surface.

    Subclasses implement action(). Non-pausable modules (this class, and
    anything not derived from PausableModule) always run to completion.
    """

    pausable = False

    def __init__(self, typewriter: "Typewriter", options: TypewriterOptions | None = None):
        self.typewriter = typewriter
        self.target = typewriter.surface
        self.options = options if options is not None else typewriter.options
        self._future: asyncio.Future | None = None
        self._run = 0

    @property
    def clock(self):
        return self.typewriter.clock

    @property
    def in_flight(self) -> bool:
        """True while the future handed out by action() is unresolved."""
        return self._future is not None and not self._future.done()

    def action(self) -> asyncio.Future:
        raise NotImplementedError(f"{type(self).__name__} has to implement action()")

    def _new_future(self) -> asyncio.Future:
        """Open a new run. Only one future per module is ever outstanding."""
        if self.in_flight:
            raise TypewriterError(f"{type(self).__name__} is already running")
        self._run += 1
        self._future = asyncio.get_running_loop().create_future()
        return self._future

    def _request_frame(self, callback: Callable[[float], None]) -> None:
        """Ask for a frame callback that is dropped if a newer run started."""
        run = self._run

        def on_frame(now: float) -> None:
            if run == self._run:
                callback(now)

        self.clock.request_frame(on_frame)

    def _log(self, kind: SignalKind) -> None:
        if self.options.debug:
            logger.debug(f"{CompletionSignal.of(kind, self)}")

    def _settle(self, kind: SignalKind) -> CompletionSignal:
        """Resolve the outstanding future. A second resolve raises InvalidStateError.

        DONE is logged by the scheduler when it picks the signal up.
        """
        signal = CompletionSignal.of(kind, self)
        if kind is not SignalKind.DONE:
            self._log(kind)
        self._future.set_result(signal)
        return signal

    def _fail(self, exc: BaseException) -> None:
        logger.error(f"{type(self).__name__} failed: {exc}")
        self._future.set_exception(exc)

    def __repr__(self) -> str:
        return f"<{type(self).__name__}>"


class PausableModule(Module):
    """A module the scheduler may pause and resume.

    `resumed` is a one-shot latch: resume() sets it, and the next action()
    reads and clears it to tell a resume apart from a fresh start.
    """

    pausable = True

    def __init__(self, typewriter: "Typewriter", options: TypewriterOptions | None = None):
        super().__init__(typewriter, options)
        self._paused = False
        self._resumed = False

    @property
    def paused(self) -> bool:
        return self._paused

    @property
    def resumed(self) -> bool:
        return self._resumed

    def pause(self) -> None:
        self._paused = True

    def resume(self) -> asyncio.Future:
        """Continue after a pause. Returns the future of the continued run."""
        self._paused = False
        if self.in_flight:
            # The pause was never observed, the original run just keeps going
            return self._future
        self._resumed = True
        return self.action()

    def _enter(self) -> bool:
        """Begin a run of action(). True when this run continues a paused one."""
        if self._resumed:
            self._resumed = False
            return True
        self._paused = False
        return False

    def _close_paused_run(self) -> None:
        """Settle a run whose pause is still waiting for its frame."""
        if self.in_flight and self._paused:
            self._settle(SignalKind.PAUSED)
