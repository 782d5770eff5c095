"""
Companion Base Package

Backend-agnostic building blocks: the streaming decoder, conversation DTOs,
the error taxonomy, structured logging, cancellation, timeouts and the pooled
HTTP client.

Backends and the factory live in their own modules
(``companion_stream.base.conversation`` / ``.factory``) and are imported
explicitly, keeping this package free of configuration imports.
"""

from .cancellation import CancellationToken, CancelledError
from .errors import (
    CallbackError,
    ConfigError,
    DecodeError,
    ErrorCode,
    HTTPStatusError,
    StreamCancelledError,
    StreamError,
    StreamIOError,
    TruncatedStreamError,
    UnknownBackendError,
    classify_exception,
)
from .models import Delta, Message, Role, ToolCall
from .streaming import (
    Dialect,
    StreamMetrics,
    StreamOrchestrator,
    StreamOutcome,
    dialect_for_backend,
)
from .timeouts import TimeoutConfig, get_timeout_config

__all__ = [
    "CancellationToken",
    "CancelledError",
    "ErrorCode",
    "StreamError",
    "HTTPStatusError",
    "DecodeError",
    "CallbackError",
    "TruncatedStreamError",
    "StreamIOError",
    "StreamCancelledError",
    "ConfigError",
    "UnknownBackendError",
    "classify_exception",
    "Delta",
    "Message",
    "Role",
    "ToolCall",
    "Dialect",
    "StreamMetrics",
    "StreamOrchestrator",
    "StreamOutcome",
    "dialect_for_backend",
    "TimeoutConfig",
    "get_timeout_config",
]
