"""
Typewriter - Frame-synced text typing effects for Textual

Types, erases, rewrites and pauses text on a surface over time:
- Modules: write, backspace, delete, timed sleep, frame sleep
- Scheduler: runs modules in order, one at a time, with pause/resume
- Widget: a Textual Static that works as the surface

Usage:
    typewriter = Typewriter(surface)
    typewriter.write("Hello").sleep(1000).rewrite(5, "World").start()
"""

__version__ = "1.0.0"

from .clock import AsyncioClock, ManualClock
from .config import TypewriterOptions, options_from_env
from .errors import ConfigurationError, InvalidQueueItem, TypewriterError
from .scheduler import SchedulerState, Typewriter
from .signals import CompletionSignal, SignalKind
from .surface import Surface, TextSurface

__all__ = [
    "AsyncioClock",
    "ManualClock",
    "TypewriterOptions",
    "options_from_env",
    "ConfigurationError",
    "InvalidQueueItem",
    "TypewriterError",
    "SchedulerState",
    "Typewriter",
    "CompletionSignal",
    "SignalKind",
    "Surface",
    "TextSurface",
]
