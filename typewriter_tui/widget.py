"""
Typewriter - Textual Widget

A Static that works as a typewriter surface, with a blinking caret, and a
clock that runs frames and timers on the widget's own Textual timers.
"""

import time
from typing import Callable

from rich.text import Text
from textual.timer import Timer
from textual.widget import Widget
from textual.widgets import Static

from .clock import FrameCallback
from .constants import CARET, CARET_BLINK_INTERVAL, FRAME_INTERVAL_MS


class TextualClock:
    """Frame clock and timer provider backed by a widget's set_timer().

    Timers die with the widget, so nothing fires after it is unmounted.
    """

    def __init__(self, widget: Widget, frame_interval_ms: float = FRAME_INTERVAL_MS):
        self._widget = widget
        self.frame_interval_ms = frame_interval_ms

    def now(self) -> float:
        return time.monotonic() * 1000

    def request_frame(self, callback: FrameCallback) -> None:
        self._widget.set_timer(
            self.frame_interval_ms / 1000,
            lambda: callback(self.now()),
            name="typewriter-frame",
        )

    def set_timer(self, ms: float, callback: Callable[[], None]) -> Timer:
        return self._widget.set_timer(ms / 1000, callback, name="typewriter-sleep")

    def cancel_timer(self, handle: Timer) -> None:
        handle.stop()


class TypewriterText(Static):
    """Text the typewriter types into, followed by a blinking caret."""

    DEFAULT_CSS = """
    TypewriterText {
        width: auto;
        height: auto;
        color: $text;
    }
    """

    def __init__(self, text: str = "", caret: bool = True, **kwargs):
        super().__init__(**kwargs)
        self._text = text
        self._show_caret = caret
        self._caret_visible = True
        self._blink_timer = None

    def get_text(self) -> str:
        return self._text

    def set_text(self, text: str) -> None:
        self._text = text
        # Typing keeps the caret solid, like a real cursor
        self._caret_visible = True
        if self.is_mounted:
            self.refresh(layout=True)

    def on_mount(self) -> None:
        """Start caret blinking when mounted."""
        if self._show_caret:
            self._start_blink()

    def on_unmount(self) -> None:
        self._stop_blink()

    def _toggle_blink(self) -> None:
        """Toggle caret visibility for blink effect."""
        self._caret_visible = not self._caret_visible
        if self.is_mounted:
            self.refresh()

    def _start_blink(self) -> None:
        self._caret_visible = True
        if self._blink_timer is not None:
            self._blink_timer.stop()
        self._blink_timer = self.set_interval(CARET_BLINK_INTERVAL, self._toggle_blink)

    def _stop_blink(self) -> None:
        if self._blink_timer is not None:
            self._blink_timer.stop()
            self._blink_timer = None
        self._caret_visible = True

    def render(self) -> Text:
        text = Text(self._text)
        if self._show_caret:
            # Keep the width stable while the caret is off
            text.append(CARET if self._caret_visible else " ", style="bold")
        return text
