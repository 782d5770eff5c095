"""One streamed HTTP exchange.

Purpose:
    Glue between the transport and the decoder: start the waiting indicator,
    send the request with ``stream=True``, stop the indicator the moment
    headers arrive, then hand the open response to the
    :class:`StreamOrchestrator`, which owns and closes it.

Failure semantics:
    - Errors raised before headers arrive (connect failures, connect/write
      timeouts) are classified and returned as a failed ``StreamOutcome``
      with a ``StreamIOError``; nothing is retried here.
    - Everything after headers is the orchestrator's responsibility and is
      likewise returned inside the outcome.
"""
from __future__ import annotations

import logging
from typing import Any, Dict, Optional

import httpx

from .cancellation import CancellationToken
from .errors import ErrorCode, StreamIOError, classify_exception
from .interfaces import ProgressIndicator
from .logging import LogContext, new_request_id, normalized_log_event
from .streaming import DeltaCallback, Dialect, StreamMetrics, StreamOrchestrator, StreamOutcome
from .streaming.streaming_finalize import finalize_stream


def stream_exchange(
    client: httpx.Client,
    url: str,
    payload: Dict[str, Any],
    *,
    orchestrator: StreamOrchestrator,
    dialect: Dialect,
    callback: Optional[DeltaCallback] = None,
    headers: Optional[Dict[str, str]] = None,
    indicator: Optional[ProgressIndicator] = None,
    token: Optional[CancellationToken] = None,
) -> StreamOutcome:
    """POST ``payload`` to ``url`` and decode the streamed reply.

    Parameters:
        client: Pooled ``httpx.Client`` carrying the configured timeouts.
        url: Absolute endpoint URL.
        payload: JSON request body (``stream`` must already be enabled).
        orchestrator: Decoder configured for this backend and model.
        dialect: Wire dialect of the endpoint.
        callback: Optional per-delta callback.
        headers: Extra request headers (e.g. bearer auth).
        indicator: Optional waiting indicator shown until headers arrive.
        token: Optional cancellation token polled between frames.

    Returns:
        Exactly one ``StreamOutcome``.
    """
    request_id = new_request_id()
    request = client.build_request("POST", url, json=payload, headers=headers)
    if indicator is not None:
        indicator.start()
    try:
        response = client.send(request, stream=True)
    except (httpx.HTTPError, OSError) as exc:
        return _connect_failure(orchestrator, dialect, request_id, exc)
    finally:
        if indicator is not None:
            indicator.stop()
    return orchestrator.run(response, dialect, callback, token=token, request_id=request_id)


def _connect_failure(
    orchestrator: StreamOrchestrator,
    dialect: Dialect,
    request_id: str,
    exc: BaseException,
) -> StreamOutcome:
    code = classify_exception(exc)
    if code not in (ErrorCode.TIMEOUT, ErrorCode.IO):
        code = ErrorCode.IO
    error = StreamIOError(
        message=f"request failed before response headers: {type(exc).__name__}: {exc}",
        code=code,
        backend=orchestrator.backend,
        model=orchestrator.model,
        raw=exc,
    )
    ctx = LogContext.for_turn(orchestrator.backend, orchestrator.model, dialect.value, request_id)
    normalized_log_event(
        orchestrator.logger,
        "stream.connect_error",
        ctx,
        phase="connect",
        error_code=code.value,
        level=logging.WARNING,
        error=str(exc),
    )
    return finalize_stream(logger=orchestrator.logger, ctx=ctx, metrics=StreamMetrics(), partial_text="", error=error)


__all__ = ["stream_exchange"]
