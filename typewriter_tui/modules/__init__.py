"""
Typewriter Modules

The steps a typewriter runs. Each one mutates the surface (or waits) and
reports back through a future resolved with a CompletionSignal.
"""

from .base import Module, PausableModule
from .animation import AnimationModule, WriteModule, BackspaceModule, HANDLER_NAMES
from .sleep import SleepModule, TimedSleepModule, FrameSleepModule
from .delete import DeleteModule

__all__ = [
    "Module",
    "PausableModule",
    "AnimationModule",
    "WriteModule",
    "BackspaceModule",
    "HANDLER_NAMES",
    "SleepModule",
    "TimedSleepModule",
    "FrameSleepModule",
    "DeleteModule",
]
