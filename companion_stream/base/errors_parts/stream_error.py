"""
Structured stream error exception types.

Every way a streamed turn can fail is represented by a subclass of
:class:`StreamError`. Each subclass pins its :class:`ErrorCode` so callers
and log consumers can branch on ``error.code`` without ``isinstance`` chains.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .error_code import ErrorCode


@dataclass(eq=False)
class StreamError(Exception):
    """Represents a classified failure of one streamed turn.

    Attributes:
        message: Human-readable error message suitable for logging.
        code: Normalized :class:`ErrorCode` classification for the failure.
        backend: Backend key where the error originated (e.g. ``"ollama"``).
        model: Optional model name associated with the failure.
        status_code: HTTP status observed when the body was opened, if known.
        body: Response body text captured for diagnostics (status failures).
        frame: The last raw frame text seen before the failure, if any.
        raw: Optional original exception for diagnostics.
    """

    message: str
    code: ErrorCode = ErrorCode.UNKNOWN
    backend: Optional[str] = None
    model: Optional[str] = None
    status_code: Optional[int] = None
    body: Optional[str] = None
    frame: Optional[str] = None
    raw: Optional[BaseException] = None

    def __str__(self) -> str:  # pragma: no cover - trivial
        """Return a compact string combining backend, model, code, and message."""
        return f"{self.backend or '-'}:{self.model or '-'} {self.code.value}: {self.message}"


@dataclass(eq=False)
class HTTPStatusError(StreamError):
    """Non-2xx status observed before any byte of the body was consumed."""

    code: ErrorCode = ErrorCode.HTTP_STATUS


@dataclass(eq=False)
class DecodeError(StreamError):
    """A frame is not valid JSON (or not the expected shape) for the dialect."""

    code: ErrorCode = ErrorCode.DECODE


@dataclass(eq=False)
class CallbackError(StreamError):
    """The per-delta delivery callback rejected a delta."""

    code: ErrorCode = ErrorCode.CALLBACK


@dataclass(eq=False)
class TruncatedStreamError(StreamError):
    """End of input was reached without a termination signal."""

    code: ErrorCode = ErrorCode.TRUNCATED


@dataclass(eq=False)
class StreamIOError(StreamError):
    """Transport-level read failure, including timeout expiry."""

    code: ErrorCode = ErrorCode.IO


@dataclass(eq=False)
class StreamCancelledError(StreamError):
    """The stream was cancelled cooperatively before it finished."""

    code: ErrorCode = ErrorCode.CANCELLED


__all__ = [
    "StreamError",
    "HTTPStatusError",
    "DecodeError",
    "CallbackError",
    "TruncatedStreamError",
    "StreamIOError",
    "StreamCancelledError",
]
