"""Delta aggregation and per-delta delivery.

:class:`DeltaAggregator` keeps the running text of one turn. Every accepted
delta is appended in arrival order; when a callback is registered it is
invoked synchronously with a fresh assistant :class:`Message` holding only
that delta's text. The callback runs on the read-loop thread, so a slow
consumer (e.g. a terminal renderer) throttles how fast the body is read.

A callback reports failure either by raising or by returning an
``Exception`` instance. Either way the aggregator raises
:class:`CallbackError` and refuses all further input.
"""
from __future__ import annotations

from typing import Callable, List, Optional

from ..errors import CallbackError
from ..models import Delta, Message, ToolCallAccumulator

DeltaCallback = Callable[[Message], Optional[BaseException]]


class DeltaAggregator:
    """Accumulates decoded deltas into the final assistant message."""

    def __init__(self, callback: Optional[DeltaCallback] = None) -> None:
        self._callback = callback
        self._parts: List[str] = []
        self._tools = ToolCallAccumulator()
        self._delivered = 0
        self._failed = False

    @property
    def text(self) -> str:
        """Concatenation of every accepted delta's text so far."""
        return "".join(self._parts)

    @property
    def delivered(self) -> int:
        """Number of deltas handed to the callback without error."""
        return self._delivered

    def accept(self, delta: Delta) -> None:
        """Append ``delta`` and deliver it to the callback.

        Deltas carrying neither text nor tool calls are counted as processed
        but not delivered.

        Raises:
            CallbackError: when the callback raises or returns an exception.
            RuntimeError: when called again after a callback failure.
        """
        if self._failed:
            raise RuntimeError("aggregator rejected input after a callback failure")
        if delta.text:
            self._parts.append(delta.text)
        for fragment in delta.tool_calls:
            self._tools.feed(fragment)
        if self._callback is None or delta.is_empty:
            return

        try:
            result = self._callback(Message(role="assistant", content=delta.text))
        except Exception as exc:
            self._failed = True
            raise CallbackError(message=f"callback raised {type(exc).__name__}: {exc}", raw=exc) from exc
        if isinstance(result, BaseException):
            self._failed = True
            raise CallbackError(message=f"callback rejected delta: {result}", raw=result)
        self._delivered += 1

    def finalize(self) -> Message:
        """Return the assembled assistant message."""
        tool_calls = self._tools.finalize()
        return Message(role="assistant", content=self.text, tool_calls=tool_calls or None)


__all__ = ["DeltaAggregator", "DeltaCallback"]
