"""Configuration error types.

Raised eagerly (before any request is sent) when configuration is invalid or
names a backend that does not exist. Unlike stream failures these are never
wrapped in a ``StreamOutcome``.
"""
from __future__ import annotations


class ConfigError(ValueError):
    """Invalid or incomplete configuration."""


class UnknownBackendError(ConfigError):
    """Requested backend name has no registered implementation."""

    def __init__(self, backend: str, known: tuple[str, ...] = ()) -> None:
        self.backend = backend
        self.known = known
        hint = f" (known: {', '.join(known)})" if known else ""
        super().__init__(f"unknown backend: {backend!r}{hint}")


__all__ = ["ConfigError", "UnknownBackendError"]
