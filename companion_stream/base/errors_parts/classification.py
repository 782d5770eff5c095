"""
Error classification helpers mapping exceptions to normalized ErrorCode values.

Used at the transport seams (opening a request, reading the body) to turn
whatever the HTTP stack raised into a stable code for the outcome and logs.
"""
from __future__ import annotations

import asyncio
import socket
from typing import Optional

import httpx

from .error_code import ErrorCode
from .stream_error import StreamError


def _extract_status(exc: BaseException) -> Optional[int]:
    """Return an HTTP status carried by ``exc``, if any.

    Looks at ``exc.status_code``, ``exc.status`` and then
    ``exc.response.status_code``; values outside 100-599 are ignored.
    """
    response = getattr(exc, "response", None)
    candidates = (
        getattr(exc, "status_code", None),
        getattr(exc, "status", None),
        getattr(response, "status_code", None),
    )
    return next((c for c in candidates if isinstance(c, int) and 100 <= c < 600), None)


def classify_exception(exc: BaseException) -> ErrorCode:
    """Classify an exception into a normalized :class:`ErrorCode`.

    Precedence:
        1. StreamError passthrough.
        2. Timeout exceptions (httpx, socket, sync/async builtins).
        3. Transport and OS level read failures.
        4. HTTP status attributes.
        5. ``UNKNOWN`` fallback.
    """
    if isinstance(exc, StreamError):
        return exc.code
    if isinstance(exc, (httpx.TimeoutException, socket.timeout, TimeoutError, asyncio.TimeoutError)):
        return ErrorCode.TIMEOUT
    if isinstance(exc, (httpx.TransportError, httpx.StreamError, OSError)):
        return ErrorCode.IO
    if _extract_status(exc) is not None:
        return ErrorCode.HTTP_STATUS
    return ErrorCode.UNKNOWN


__all__ = [
    "classify_exception",
    "_extract_status",
]
