"""Completion detection state machine.

States::

    STREAMING --observe(terminal)--> FINISHED
    STREAMING --fail(error)--------> FAILED
    STREAMING --end_of_input()-----> FAILED (TruncatedStreamError)

``FINISHED`` and ``FAILED`` are terminal; any further transition raises
``RuntimeError``. Which frame counts as terminal is decided by the dialect
decoder, so exactly one rule applies per stream.
"""
from __future__ import annotations

from enum import Enum
from typing import Optional

from ..errors import StreamError, TruncatedStreamError
from .dialects import DecodeResult


class StreamState(str, Enum):
    STREAMING = "streaming"
    FINISHED = "finished"
    FAILED = "failed"


class CompletionDetector:
    """Tracks whether a turn has finished, failed or is still streaming."""

    def __init__(self) -> None:
        self._state = StreamState.STREAMING
        self._error: Optional[StreamError] = None

    @property
    def state(self) -> StreamState:
        return self._state

    @property
    def error(self) -> Optional[StreamError]:
        return self._error

    @property
    def is_terminal(self) -> bool:
        return self._state is not StreamState.STREAMING

    def _require_streaming(self, action: str) -> None:
        if self.is_terminal:
            raise RuntimeError(f"cannot {action}: stream already {self._state.value}")

    def observe(self, result: DecodeResult) -> bool:
        """Record a decoded frame; return True when it finished the turn."""
        self._require_streaming("observe frame")
        if result.terminal:
            self._state = StreamState.FINISHED
        return result.terminal

    def fail(self, error: StreamError) -> None:
        self._require_streaming("fail")
        self._state = StreamState.FAILED
        self._error = error

    def end_of_input(self) -> None:
        """Mark the body exhausted; a still-streaming turn becomes truncated."""
        if self._state is StreamState.STREAMING:
            self.fail(TruncatedStreamError(message="response body ended without a termination signal"))


__all__ = ["StreamState", "CompletionDetector"]
