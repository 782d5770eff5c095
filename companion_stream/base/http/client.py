"""Shared HTTP client pool for backends.

Purpose:
    Provide a centralized, thread-safe pool of reusable ``httpx.Client``
    instances so repeated turns against the same backend reuse connections.

Timeout strategy:
    - Each client is created with the ``httpx.Timeout`` derived from
      :func:`get_timeout_config`, with the read timeout replaced by the
      caller-supplied value when one is given. The timeout is part of the
      cache key, so two configurations never share a client with the wrong
      deadline.

Lifecycle & cleanup:
    - Clients are cached by ``(base_url, purpose, timeout)``.
    - All clients are closed at interpreter exit via ``atexit``; tests may
      call :func:`close_all_clients` explicitly.

Thread-safety:
    ``httpx.Client`` is safe to share across threads; two conversations
    streaming concurrently each own their response and decoder state.
"""

from __future__ import annotations

import atexit
import threading
from typing import Dict, Optional, Tuple

import httpx

from ..timeouts import get_timeout_config

_CLIENTS: Dict[Tuple[Optional[str], str, Optional[float]], httpx.Client] = {}
_LOCK = threading.RLock()


def get_httpx_client(
    base_url: Optional[str],
    purpose: str,
    *,
    read_timeout: Optional[float] = None,
    transport: Optional[httpx.BaseTransport] = None,
) -> httpx.Client:
    """Return a pooled ``httpx.Client`` for the given base URL and purpose.

    Parameters:
        base_url: Optional API base URL set on the client so callers can use
            relative paths. ``None`` groups clients under a shared key.
        purpose: Short string discriminating separate pools (e.g.
            "ollama.stream"). Keep stable to maximize reuse.
        read_timeout: Caller-supplied read timeout in seconds; overrides the
            environment default.
        transport: Optional transport (e.g. ``httpx.MockTransport``). Clients
            built with a custom transport are not pooled.

    Returns:
        A reusable ``httpx.Client`` instance.
    """
    timeout = get_timeout_config().with_read_timeout(read_timeout).to_httpx()
    if transport is not None:
        return httpx.Client(base_url=base_url or "", timeout=timeout, transport=transport)

    key = (base_url, purpose, read_timeout)
    client = _CLIENTS.get(key)
    if client is not None and not client.is_closed:
        return client

    with _LOCK:
        client = _CLIENTS.get(key)
        if client is not None and not client.is_closed:
            return client
        client = httpx.Client(base_url=base_url, timeout=timeout) if base_url else httpx.Client(timeout=timeout)
        _CLIENTS[key] = client
        return client


def close_all_clients() -> None:
    """Close and clear all pooled HTTP clients."""
    with _LOCK:
        for c in _CLIENTS.values():
            try:
                c.close()
            except Exception:  # nosec B110 - best-effort shutdown
                pass
        _CLIENTS.clear()


atexit.register(close_all_clients)

__all__ = ["get_httpx_client", "close_all_clients"]
