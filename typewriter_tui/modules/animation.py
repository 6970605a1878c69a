"""Frame-synced animations: the tick engine plus the write and backspace steps.

Every frame callback decides whether a tick is due. A tick is due once
`delay + salt` milliseconds passed since the previous one, where salt is a
fresh random jitter in [-fluctuation, +fluctuation] after every tick.
The very first tick of a run happens on the first frame.

Handlers:
    init             - prepare state, called on a fresh start only
    tick             - one unit of change to the surface
    should_continue  - False once the animation is complete
"""

import asyncio
import math
from collections import deque
from typing import TYPE_CHECKING, Callable, Mapping

from ..config import TypewriterOptions
from ..errors import ConfigurationError
from ..signals import SignalKind
from .base import PausableModule

if TYPE_CHECKING:
    from ..scheduler import Typewriter

HANDLER_NAMES = ("init", "tick", "should_continue")


class AnimationModule(PausableModule):
    """Runs init/tick/should_continue handlers on the frame clock.

    Usage:
        chars = []
        AnimationModule(typewriter, {
            "init": lambda: chars.extend("hi"),
            "tick": lambda: surface.set_text(surface.get_text() + chars.pop(0)),
            "should_continue": lambda: bool(chars),
        })
    """

    def __init__(
        self,
        typewriter: "Typewriter",
        handlers: Mapping[str, Callable] | None = None,
        options: TypewriterOptions | None = None,
    ):
        super().__init__(typewriter, options)
        self.handlers = dict(handlers or {})
        self.salt = 0.0
        self.last_tick: float | None = None
        self.ticks = 0

    def handler(self, name: str) -> Callable:
        try:
            return self.handlers[name]
        except KeyError:
            raise ConfigurationError(f"{type(self).__name__}.{name} not specified!") from None

    def draw_salt(self) -> float:
        """Random jitter for the next wait."""
        fluctuation = self.options.fluctuation
        if fluctuation == 0:
            return 0.0
        return self.typewriter.random.uniform(-fluctuation, fluctuation)

    def action(self) -> asyncio.Future:
        return self.animate()

    def animate(self) -> asyncio.Future:
        """Run (or continue) the animation. Resolves DONE or PAUSED."""
        init, _, _ = (self.handler(name) for name in HANDLER_NAMES)

        self._close_paused_run()
        if self.in_flight:
            return self._future

        if not self._enter():
            self.last_tick = None
            self.ticks = 0
            init()

        future = self._new_future()
        self.salt = self.draw_salt()
        self._log(SignalKind.BEGAN)
        self._request_frame(self._frame)
        return future

    def _frame(self, now: float) -> None:
        if self.paused:
            self._settle(SignalKind.PAUSED)
            return

        delay = self.options.delay
        if self.last_tick is None:
            elapsed = delay + math.ceil(self.salt)
        else:
            elapsed = now - self.last_tick

        try:
            if elapsed >= delay + self.salt:
                self._log(SignalKind.TICK)
                self.handlers["tick"]()
                self.ticks += 1
                self.salt = self.draw_salt()
                self.last_tick = now
            keep_going = self.handlers["should_continue"]()
        except Exception as exc:
            self._fail(exc)
            return

        if keep_going:
            self._request_frame(self._frame)
        else:
            self._settle(SignalKind.DONE)


class WriteModule(AnimationModule):
    """Appends text to the surface one character per tick."""

    def __init__(self, typewriter: "Typewriter", text: str, options: TypewriterOptions | None = None):
        super().__init__(typewriter, {
            "init": self._init,
            "tick": self._tick,
            "should_continue": self._should_continue,
        }, options)
        self.text = text
        self._buffer: deque[str] = deque()

    def _init(self) -> None:
        self._buffer = deque(self.text)

    def _tick(self) -> None:
        if self._buffer:
            self.target.set_text(self.target.get_text() + self._buffer.popleft())

    def _should_continue(self) -> bool:
        return bool(self._buffer)

    def __repr__(self) -> str:
        return f"<WriteModule {self.text!r}>"


class BackspaceModule(AnimationModule):
    """Removes characters from the end of the surface one per tick."""

    def __init__(self, typewriter: "Typewriter", count: int, options: TypewriterOptions | None = None):
        super().__init__(typewriter, {
            "init": self._init,
            "tick": self._tick,
            "should_continue": self._should_continue,
        }, options)
        self.count = count
        self._text: list[str] = []
        self._remaining = 0

    def _init(self) -> None:
        self._text = list(self.target.get_text())
        self._remaining = self.count

    def _tick(self) -> None:
        if self._remaining > 0 and self._text:
            self._text.pop()
            self.target.set_text("".join(self._text))
            self._remaining -= 1

    def _should_continue(self) -> bool:
        # Stops early when there is nothing left to erase
        return self._remaining > 0 and bool(self._text)

    def __repr__(self) -> str:
        return f"<BackspaceModule {self.count}>"
