"""companion_stream package

Streaming chat client for local and hosted language-model backends.

Purpose:
    Exchange conversational turns with an Ollama or OpenAI-compatible backend
    and render the reply incrementally. The core is an incremental decoder
    that turns an arbitrarily chunked response body into ordered text deltas,
    detects end-of-turn per wire dialect, and reports exactly one outcome per
    turn: a finished message or a classified error.

Public API (re-exported):
    - Version: ``__version__``
    - Configuration: :func:`load_config`, :class:`CompanionConfig`
    - Factory: :func:`create_companion`
    - Decoder: :class:`StreamOrchestrator`, :class:`Dialect`,
      :class:`StreamOutcome`
    - Errors: :class:`StreamError` and its subclasses, :class:`ErrorCode`

Example:
    >>> from companion_stream import create_companion, load_config
    >>> companion = create_companion(load_config("ollama"))
    >>> outcome = companion.chat("Hello", callback=lambda m: print(m.content, end=""))
    >>> reply = outcome.unwrap()
"""

from .base import (
    CallbackError,
    CancellationToken,
    ConfigError,
    DecodeError,
    Dialect,
    ErrorCode,
    HTTPStatusError,
    Message,
    StreamCancelledError,
    StreamError,
    StreamIOError,
    StreamOrchestrator,
    StreamOutcome,
    TruncatedStreamError,
    UnknownBackendError,
)
from .base.factory import CompanionFactory, create_companion
from .config import CompanionConfig, TerminalConfig, get_backend_config, load_config

__version__ = "0.1.0"

__all__ = [
    "__version__",
    "CallbackError",
    "CancellationToken",
    "CompanionConfig",
    "CompanionFactory",
    "ConfigError",
    "DecodeError",
    "Dialect",
    "ErrorCode",
    "HTTPStatusError",
    "Message",
    "StreamCancelledError",
    "StreamError",
    "StreamIOError",
    "StreamOrchestrator",
    "StreamOutcome",
    "TerminalConfig",
    "TruncatedStreamError",
    "UnknownBackendError",
    "create_companion",
    "get_backend_config",
    "load_config",
]
