"""Exceptions raised by the typewriter scheduler and its modules."""


class TypewriterError(Exception):
    """Base class for all typewriter errors."""


class ConfigurationError(TypewriterError):
    """A step was scripted wrong: missing handler, bad option, bad script file.

    Never retried. Fix the script that built the step chain.
    """


class InvalidQueueItem(TypewriterError):
    """The step list contains something that is not a typewriter module."""

    def __init__(self, item: object, index: int):
        super().__init__(f"Invalid item in queue at step {index}: {item!r}")
        self.item = item
        self.index = index
