"""
Typewriter - Step Scheduler

Runs a list of modules one after another against a single surface.

Usage:
    typewriter = Typewriter(widget, repeat=True, sleep_before_repeat=1500)
    typewriter.write("Hello").sleep(1000).rewrite(5, "World", sleep=2000).start()
    ...
    typewriter.pause()
    typewriter.resume()

Exactly one module is current at any time. A step is dispatched when the
previous one resolves DONE, always on a fresh frame. A step that resolves
PAUSED stays current and the run waits for resume().
"""

import asyncio
import logging
import random
from enum import Enum

from .clock import AsyncioClock, Clock
from .config import TypewriterOptions, resolve_options
from .errors import InvalidQueueItem
from .modules import (
    AnimationModule,
    BackspaceModule,
    DeleteModule,
    FrameSleepModule,
    Module,
    SleepModule,
    TimedSleepModule,
    WriteModule,
)
from .surface import Surface

logger = logging.getLogger(__name__)


class SchedulerState(Enum):
    """Where the typewriter is in its run"""
    IDLE = "idle"        # Not started, or ran out of steps
    RUNNING = "running"  # A step is in flight
    PAUSED = "paused"    # The current step reported PAUSED
    STOPPED = "stopped"  # stop() was called


class Typewriter:
    """Scripts and plays a typewriter effect on one surface.

    Builder calls (write, rewrite, backspace, delete, sleep) append steps and
    return the typewriter, so they chain. start() normalizes the steps and
    begins playing.

    Args:
        surface: Object with get_text() / set_text()
        options: TypewriterOptions or a dict of option names to values
        clock: Frame clock and timer provider (default: asyncio loop clock)
        rng: random.Random used for the per-tick jitter
        **overrides: Individual options, e.g. repeat=True
    """

    def __init__(
        self,
        surface: Surface,
        options: TypewriterOptions | dict | None = None,
        *,
        clock: Clock | None = None,
        rng: random.Random | None = None,
        **overrides,
    ):
        self.surface = surface
        self.options = resolve_options(options, **overrides)
        self.clock = clock if clock is not None else AsyncioClock()
        self.random = rng if rng is not None else random.Random()
        self.initial_text = surface.get_text()
        self.steps: list[Module] = []
        self.step = 0
        self.state = SchedulerState.IDLE
        self._current: Module | None = None
        self._generation = 0
        self._finished: asyncio.Future | None = None

    # -------------------------------------------------------------------------
    # Building
    # -------------------------------------------------------------------------

    @property
    def current(self) -> Module | None:
        """The module in flight, or None before the first dispatch."""
        return self._current

    def add_step(self, step: Module) -> "Typewriter":
        self.steps.append(step)
        return self

    def _sleep_after(self, ms: float, options: TypewriterOptions) -> None:
        if ms > 0:
            self.add_step(TimedSleepModule(self, ms, options))

    def write(self, text: str, **options) -> "Typewriter":
        """Type text at the end of the surface."""
        merged = self.options.merged(**options)
        self.add_step(WriteModule(self, text, merged))
        self._sleep_after(merged.sleep, merged)
        return self

    def rewrite(self, count: int, text: str, **options) -> "Typewriter":
        """Backspace `count` characters, then type text."""
        merged = self.options.merged(**options)
        self.add_step(BackspaceModule(self, count, merged))
        self._sleep_after(merged.sleep_rewrite, merged)
        self.add_step(WriteModule(self, text, merged))
        self._sleep_after(merged.sleep, merged)
        return self

    def backspace(self, count: int, **options) -> "Typewriter":
        """Erase `count` characters one at a time."""
        merged = self.options.merged(**options)
        self.add_step(BackspaceModule(self, count, merged))
        self._sleep_after(merged.sleep, merged)
        return self

    def delete(self, count: int, **options) -> "Typewriter":
        """Erase `count` characters at once."""
        merged = self.options.merged(**options)
        self.add_step(DeleteModule(self, count, merged))
        self._sleep_after(merged.sleep, merged)
        return self

    def sleep(self, ms: float) -> "Typewriter":
        """Wait `ms` milliseconds (pausable)."""
        return self.add_step(TimedSleepModule(self, ms, self.options))

    # -------------------------------------------------------------------------
    # Normalization
    # -------------------------------------------------------------------------

    def normalized(self, steps: list[Module]) -> list[Module]:
        """Return steps with spacing sleeps inserted.

        Every animation not followed by a sleep gets a one-frame sleep after
        it. When repeating, a list that does not already end in a sleep gets
        a boundary sleep before it wraps: sleep_before_repeat if set, else
        one frame. Running this on its own output changes nothing.
        """
        result = []
        last = len(steps) - 1
        for i, step in enumerate(steps):
            result.append(step)
            if i == last or not isinstance(step, AnimationModule):
                continue
            if not isinstance(steps[i + 1], SleepModule):
                result.append(FrameSleepModule(self, self.options))

        if self.options.repeat and result and not isinstance(result[-1], SleepModule):
            if self.options.sleep_before_repeat > 0:
                result.append(TimedSleepModule(self, self.options.sleep_before_repeat, self.options))
            else:
                result.append(FrameSleepModule(self, self.options))
        return result

    def init(self) -> None:
        """Normalize the step list and rewind to the first step."""
        self.steps = self.normalized(self.steps)
        self.step = 0

    # -------------------------------------------------------------------------
    # Driving
    # -------------------------------------------------------------------------

    def start(self) -> "Typewriter":
        """Normalize and play from the first step."""
        in_flight = self._abandon()
        self.init()
        self.state = SchedulerState.RUNNING
        self._ensure_finished()
        logger.info(f"Typewriter starting with {len(self.steps)} steps")

        if in_flight:
            # Let the abandoned step settle first
            self._request_advance()
        else:
            try:
                self.advance()
            except Exception as exc:
                self._fail(exc)
                raise
        return self

    def advance(self) -> None:
        """Dispatch the next step, or finish/wrap when there is none."""
        if self.step >= len(self.steps):
            if self.options.repeat and self.steps:
                logger.debug("Typewriter repeating from the first step")
                self.step = 0
            else:
                self._finish(SchedulerState.IDLE)
                return

        index = self.step
        current = self.steps[index]
        if not isinstance(current, Module):
            raise InvalidQueueItem(current, index)

        self._current = current
        self.step += 1
        self.state = SchedulerState.RUNNING
        self._watch(current.action())

    def _watch(self, future: asyncio.Future) -> None:
        generation = self._generation
        future.add_done_callback(lambda f: self._on_step_done(generation, f))

    def _on_step_done(self, generation: int, future: asyncio.Future) -> None:
        if generation != self._generation or future.cancelled():
            return

        exc = future.exception()
        if exc is not None:
            self._fail(exc)
            return

        signal = future.result()
        module = signal.module
        if signal.is_paused:
            if module is None or module.in_flight or not module.paused:
                # Resumed before this report arrived, the new run is watched
                return
            self.state = SchedulerState.PAUSED
            logger.info(f"Typewriter paused at step {self.step - 1}")
            return

        if module is not None and module.options.debug:
            logger.debug(f"{signal}")
        self._request_advance()

    def _request_advance(self) -> None:
        generation = self._generation

        def on_frame(now: float) -> None:
            if generation != self._generation:
                return
            try:
                self.advance()
            except Exception as exc:
                self._fail(exc)

        self.clock.request_frame(on_frame)

    def _abandon(self) -> bool:
        """Drop the current run. Returns True if a step is still in flight."""
        self.pause()
        self._generation += 1
        return self._current is not None and self._current.in_flight

    # -------------------------------------------------------------------------
    # Control
    # -------------------------------------------------------------------------

    def pause(self) -> None:
        """Pause the current step if it can be paused, else let it finish."""
        current = self._current
        if current is not None and current.pausable:
            logger.debug(f"Typewriter pausing {current!r}")
            current.pause()

    def resume(self) -> None:
        """Continue the paused step, then the rest of the run."""
        if self.state in (SchedulerState.IDLE, SchedulerState.STOPPED):
            return
        current = self._current
        if current is None or not current.pausable or not current.paused:
            return

        logger.info(f"Typewriter resuming {current!r}")
        was_in_flight = current.in_flight
        future = current.resume()
        self.state = SchedulerState.RUNNING
        if not was_in_flight:
            self._watch(future)

    def restart(self) -> None:
        """Play again from the first step. The step list is not re-normalized."""
        logger.info("Typewriter restarting")
        self._abandon()
        self.step = 0
        self.state = SchedulerState.RUNNING
        self._ensure_finished()
        self._request_advance()

    def stop(self) -> None:
        """Halt and put the surface back to the text it had at construction."""
        logger.info("Typewriter stopping")
        self._abandon()
        self._finish(SchedulerState.STOPPED)
        self.clock.request_frame(lambda now: self.surface.set_text(self.initial_text))

    # -------------------------------------------------------------------------
    # Completion
    # -------------------------------------------------------------------------

    @property
    def paused(self) -> bool:
        return self.state is SchedulerState.PAUSED

    @property
    def finished(self) -> asyncio.Future | None:
        """Resolves when the run ends (out of steps or stopped), or fails."""
        return self._finished

    async def wait(self) -> None:
        """Wait until the current run ends. Raises what made it fail."""
        if self._finished is not None:
            await self._finished

    def _ensure_finished(self) -> None:
        if self._finished is None or self._finished.done():
            self._finished = asyncio.get_running_loop().create_future()

    def _finish(self, state: SchedulerState) -> None:
        self.state = state
        if state is SchedulerState.IDLE:
            logger.info("Typewriter finished")
        if self._finished is not None and not self._finished.done():
            self._finished.set_result(None)

    def _fail(self, exc: BaseException) -> None:
        logger.error(f"Typewriter halted at step {max(self.step - 1, 0)}: {exc}")
        self.state = SchedulerState.IDLE
        self._generation += 1
        if self._finished is not None and not self._finished.done():
            self._finished.set_exception(exc)

    def __repr__(self) -> str:
        return f"<Typewriter {self.state.value} step={self.step}/{len(self.steps)}>"
