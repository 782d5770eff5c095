"""Unified stream error taxonomy public surface.

This module re-exports the one-class-per-file implementations under
``companion_stream.base.errors_parts`` to maintain a stable import path.
"""

from .errors_parts.error_code import ErrorCode
from .errors_parts.stream_error import (
    CallbackError,
    DecodeError,
    HTTPStatusError,
    StreamCancelledError,
    StreamError,
    StreamIOError,
    TruncatedStreamError,
)
from .errors_parts.classification import classify_exception
from .errors_parts.config_error import ConfigError, UnknownBackendError

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
