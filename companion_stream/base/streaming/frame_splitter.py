"""Frame splitting over an arbitrarily chunked response body.

Purpose:
    Turn the raw byte chunks read from a response body into complete logical
    lines ("frames"). Any bytes after the last line terminator of a chunk are
    carried over and prepended to the next chunk, so a frame split at any byte
    offset (including inside a multi-byte UTF-8 sequence) is reassembled
    exactly once.

Rules:
    - ``\\n`` terminates a line; a preceding ``\\r`` is dropped with the
      surrounding whitespace.
    - Lines are decoded as UTF-8 only once complete, then trimmed. Decoding
      is lazy: a line is decoded when the caller pulls it, so a consumer that
      stops early never sees an error from a later line.
    - Empty (or whitespace-only) lines are dropped.
    - :meth:`FrameSplitter.flush` returns the unterminated tail at
      end-of-input; a stream that does not end with a newline still yields
      its final frame.

The output for a given byte sequence is identical for every chunking of it.
"""
from __future__ import annotations

from typing import Iterable, Iterator

from ..errors import DecodeError

DEFAULT_BUFFER_SIZE = 1024


class FrameSplitter:
    """Incremental line splitter with mandatory carry-over of partial lines."""

    def __init__(self) -> None:
        self._tail = bytearray()

    @property
    def pending(self) -> int:
        """Number of carried-over bytes not yet emitted as a frame."""
        return len(self._tail)

    def feed(self, chunk: bytes) -> Iterator[str]:
        """Consume ``chunk`` and return an iterator over the frames it completes.

        The chunk is buffered immediately; only the UTF-8 decoding of each
        completed line waits until the iterator reaches it.
        """
        if not chunk:
            return iter(())
        self._tail += chunk
        cut = self._tail.rfind(b"\n")
        if cut < 0:
            return iter(())
        complete = bytes(self._tail[:cut])
        del self._tail[: cut + 1]
        return _frames(complete.split(b"\n"))

    def flush(self) -> Iterator[str]:
        """Return the final unterminated frame (if any) and reset the tail."""
        raw = bytes(self._tail)
        self._tail.clear()
        return _frames((raw,))


def _frames(lines: Iterable[bytes]) -> Iterator[str]:
    for raw in lines:
        frame = _decode_line(raw)
        if frame:
            yield frame


def _decode_line(raw: bytes) -> str:
    try:
        return raw.decode("utf-8").strip()
    except UnicodeDecodeError as exc:
        raise DecodeError(
            message=f"frame is not valid UTF-8: {exc.reason}",
            frame=raw.decode("utf-8", errors="replace").strip(),
            raw=exc,
        ) from exc


__all__ = ["FrameSplitter", "DEFAULT_BUFFER_SIZE"]
