"""Completion signals: why a module's step finished (or what it just did)."""

import weakref
from dataclasses import dataclass, field
from enum import Enum


class SignalKind(Enum):
    """What happened to a module"""
    BEGAN = "began"
    TICK = "tick"
    DONE = "done"
    PAUSED = "paused"


@dataclass(frozen=True)
class CompletionSignal:
    """A module's report to the scheduler.

    Only DONE and PAUSED ever resolve a module's future. BEGAN and TICK are
    produced for debug logging.

    The module is held weakly: a signal identifies its source, it never
    keeps it alive.
    """
    kind: SignalKind
    _module_ref: weakref.ref = field(repr=False, compare=False)

    @classmethod
    def of(cls, kind: SignalKind, module) -> "CompletionSignal":
        return cls(kind, weakref.ref(module))

    @property
    def module(self):
        """The module this signal came from, or None if it is gone."""
        return self._module_ref()

    @property
    def is_done(self) -> bool:
        return self.kind is SignalKind.DONE

    @property
    def is_paused(self) -> bool:
        return self.kind is SignalKind.PAUSED

    def __str__(self) -> str:
        module = self.module
        name = type(module).__name__ if module is not None else "<gone>"
        return f"{name} {self.kind.value}!"
