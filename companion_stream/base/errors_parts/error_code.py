"""
Normalized stream error codes (taxonomy).

Defines the `ErrorCode` enumeration attached to every stream failure. Values
are lowercase snake_case and are considered a stable public contract for
logging and for callers that branch on the failure class.
"""
from __future__ import annotations

from enum import Enum


class ErrorCode(str, Enum):
    """Enumerated normalized error codes representing failure categories."""

    HTTP_STATUS = "http_status"
    DECODE = "decode"
    CALLBACK = "callback"
    TRUNCATED = "truncated"
    IO = "io"
    TIMEOUT = "timeout"
    CANCELLED = "cancelled"
    CONFIG = "config"
    INTERNAL = "internal"
    UNKNOWN = "unknown"


__all__ = ["ErrorCode"]
