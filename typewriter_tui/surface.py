"""The text surface a typewriter mutates."""

from typing import Protocol, runtime_checkable


@runtime_checkable
class Surface(Protocol):
    """Anything holding text the typewriter can read and replace."""

    def get_text(self) -> str: ...

    def set_text(self, text: str) -> None: ...


class TextSurface:
    """In-memory surface. Useful headless and in tests.

    Keeps a history of every text it was given when record=True.
    """

    def __init__(self, text: str = "", record: bool = False):
        self._text = text
        self._record = record
        self.history: list[str] = []

    def get_text(self) -> str:
        return self._text

    def set_text(self, text: str) -> None:
        self._text = text
        if self._record:
            self.history.append(text)

    def __repr__(self) -> str:
        return f"TextSurface({self._text!r})"
