"""
Typewriter - Options

One frozen record carries every option a module or the scheduler reads.
Options merge in this order, later wins:

    defaults < environment < Typewriter(...) options < call-site options

A TypewriterOptions record given to Typewriter(...) is taken whole and
skips the environment layer. A dict of options does not.

Environment switches (handy while tuning a script):
    TYPEWRITER_DEBUG=1          log every module began/tick/done/paused
    TYPEWRITER_DELAY=80         default ms between ticks
    TYPEWRITER_FLUCTUATION=20   default +/- jitter in ms
"""

import os
from dataclasses import dataclass, fields, replace

from .constants import (
    DEFAULT_DELAY_MS,
    DEFAULT_FLUCTUATION_MS,
    ENV_DEBUG,
    ENV_DELAY,
    ENV_FLUCTUATION,
)
from .errors import ConfigurationError


@dataclass(frozen=True)
class TypewriterOptions:
    """Options shared by the scheduler and its modules.

    Args:
        debug: Log module signals (began, tick, done, paused)
        delay: Milliseconds between animation ticks
        fluctuation: +/- random jitter on each delay, in milliseconds
        repeat: Start over when the last step finishes
        sleep: Milliseconds to sleep after a write/backspace/delete
        sleep_rewrite: Milliseconds to sleep between the erase and the write of a rewrite
        sleep_before_repeat: Milliseconds to sleep before starting over
    """
    debug: bool = False
    delay: float = DEFAULT_DELAY_MS
    fluctuation: float = DEFAULT_FLUCTUATION_MS
    repeat: bool = False
    sleep: float = 0
    sleep_rewrite: float = 0
    sleep_before_repeat: float = 0

    def __post_init__(self):
        for name in ("delay", "fluctuation", "sleep", "sleep_rewrite", "sleep_before_repeat"):
            if getattr(self, name) < 0:
                raise ConfigurationError(f"Option {name!r} must not be negative")

    def merged(self, **overrides) -> "TypewriterOptions":
        """Return a copy with the given options replaced.

        None values are ignored so callers can pass optional arguments through.
        """
        unknown = set(overrides) - OPTION_NAMES
        if unknown:
            raise ConfigurationError(f"Unknown option(s): {', '.join(sorted(unknown))}")
        overrides = {k: v for k, v in overrides.items() if v is not None}
        if not overrides:
            return self
        return replace(self, **overrides)


OPTION_NAMES = frozenset(f.name for f in fields(TypewriterOptions))


def _env_number(name: str) -> float | None:
    raw = os.environ.get(name)
    if not raw:
        return None
    try:
        return float(raw)
    except ValueError:
        raise ConfigurationError(f"{name} must be a number of milliseconds, got {raw!r}") from None


def options_from_env() -> TypewriterOptions:
    """Defaults with any TYPEWRITER_* environment overrides applied."""
    return TypewriterOptions().merged(
        debug=True if os.environ.get(ENV_DEBUG) else None,
        delay=_env_number(ENV_DELAY),
        fluctuation=_env_number(ENV_FLUCTUATION),
    )


def resolve_options(options: "TypewriterOptions | dict | None" = None, **overrides) -> TypewriterOptions:
    """Build scheduler options from a record, a plain dict, or keywords.

    A dict is merged over the environment. A TypewriterOptions record is
    complete on its own and replaces the defaults and the environment.
    Keywords are applied last either way.
    """
    base = options_from_env()
    if isinstance(options, TypewriterOptions):
        base = options
    elif options:
        base = base.merged(**options)
    return base.merged(**overrides)
