"""Instant truncation step."""

import asyncio
from typing import TYPE_CHECKING

from ..config import TypewriterOptions
from ..signals import SignalKind
from .base import Module

if TYPE_CHECKING:
    from ..scheduler import Typewriter


class DeleteModule(Module):
    """Cuts `count` characters off the end of the surface in one go.

    Happens on the next frame. Not pausable: once dispatched it always
    completes.
    """

    def __init__(self, typewriter: "Typewriter", count: int, options: TypewriterOptions | None = None):
        super().__init__(typewriter, options)
        self.count = count

    def action(self) -> asyncio.Future:
        future = self._new_future()
        self._log(SignalKind.BEGAN)
        self._request_frame(self._truncate)
        return future

    def _truncate(self, now: float) -> None:
        text = self.target.get_text()
        try:
            self.target.set_text(text[:max(0, len(text) - self.count)])
        except Exception as exc:
            self._fail(exc)
            return
        self._settle(SignalKind.DONE)

    def __repr__(self) -> str:
        return f"<DeleteModule {self.count}>"
