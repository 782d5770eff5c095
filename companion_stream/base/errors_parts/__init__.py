"""Errors parts package public surface.

Re-exports individual error taxonomy components for optional direct imports.
Prefer importing from `companion_stream.base.errors` for the stable surface.
"""

from .error_code import ErrorCode
from .stream_error import (
    CallbackError,
    DecodeError,
    HTTPStatusError,
    StreamCancelledError,
    StreamError,
    StreamIOError,
    TruncatedStreamError,
)
from .classification import classify_exception
from .config_error import ConfigError, UnknownBackendError

__all__ = [
    "ErrorCode",
    "StreamError",
    "HTTPStatusError",
    "DecodeError",
    "CallbackError",
    "TruncatedStreamError",
    "StreamIOError",
    "StreamCancelledError",
    "classify_exception",
    "ConfigError",
    "UnknownBackendError",
]
