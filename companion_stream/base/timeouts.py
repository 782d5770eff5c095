"""Unified timeout configuration for backend requests.

Every HTTP exchange is bounded by an ``httpx.Timeout`` built here. The read
timeout is the one that matters mid-stream: when it fires, the next read of
the response body raises ``httpx.ReadTimeout`` and the orchestrator turns it
into a ``StreamIOError`` with code ``timeout`` instead of hanging.

Environment overrides (all optional, seconds, must be positive):
    COMPANION_TIMEOUT_CONNECT_SECONDS
    COMPANION_TIMEOUT_READ_SECONDS
    COMPANION_TIMEOUT_WRITE_SECONDS
    COMPANION_TIMEOUT_POOL_SECONDS

A caller-supplied timeout (``CompanionConfig.http_timeout``) always wins over
the environment for the read phase.
"""
from __future__ import annotations

import os
from dataclasses import dataclass, replace
from typing import Optional

import httpx

_ENV_NAMES = (
    "COMPANION_TIMEOUT_CONNECT_SECONDS",
    "COMPANION_TIMEOUT_READ_SECONDS",
    "COMPANION_TIMEOUT_WRITE_SECONDS",
    "COMPANION_TIMEOUT_POOL_SECONDS",
)


@dataclass(frozen=True)
class TimeoutConfig:
    """Container for normalized timeout values (seconds).

    Attributes:
        connect_timeout_seconds: Establishing the TCP/TLS connection.
        read_timeout_seconds: Waiting for the next chunk of the response body.
        write_timeout_seconds: Sending the request payload.
        pool_timeout_seconds: Waiting for a free pooled connection.
    """

    connect_timeout_seconds: float = 10.0
    read_timeout_seconds: float = 10.0
    write_timeout_seconds: float = 10.0
    pool_timeout_seconds: float = 10.0

    def with_read_timeout(self, seconds: Optional[float]) -> "TimeoutConfig":
        """Return a copy whose read timeout is ``seconds`` when positive."""
        if seconds is None or seconds <= 0:
            return self
        return replace(self, read_timeout_seconds=float(seconds))

    def to_httpx(self) -> httpx.Timeout:
        return httpx.Timeout(
            connect=self.connect_timeout_seconds,
            read=self.read_timeout_seconds,
            write=self.write_timeout_seconds,
            pool=self.pool_timeout_seconds,
        )


_CACHED: TimeoutConfig | None = None
_ENV_GUARD: str | None = None


def _parse_env_float(name: str, default: float) -> float:
    """Read a positive float from the environment, else ``default``."""
    raw = os.getenv(name)
    if not raw:
        return default
    try:
        val = float(raw)
    except ValueError:
        return default
    return val if val > 0 else default


def get_timeout_config() -> TimeoutConfig:
    """Return the process-cached `TimeoutConfig`.

    The cache is refreshed whenever one of the override variables changes so
    tests can adjust values with ``monkeypatch.setenv``.
    """
    global _CACHED, _ENV_GUARD  # noqa: PLW0603 - module cache
    guard = "/".join(os.getenv(n, "") for n in _ENV_NAMES)
    if _CACHED is not None and _ENV_GUARD == guard:
        return _CACHED
    defaults = TimeoutConfig()
    _CACHED = TimeoutConfig(
        connect_timeout_seconds=_parse_env_float(_ENV_NAMES[0], defaults.connect_timeout_seconds),
        read_timeout_seconds=_parse_env_float(_ENV_NAMES[1], defaults.read_timeout_seconds),
        write_timeout_seconds=_parse_env_float(_ENV_NAMES[2], defaults.write_timeout_seconds),
        pool_timeout_seconds=_parse_env_float(_ENV_NAMES[3], defaults.pool_timeout_seconds),
    )
    _ENV_GUARD = guard
    return _CACHED


__all__ = [
    "TimeoutConfig",
    "get_timeout_config",
]
