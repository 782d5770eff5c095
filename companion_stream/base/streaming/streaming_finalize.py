"""Outcome construction for the end of a turn.

Every path out of the read loop (and the connect-failure path in
``exchange``) goes through :func:`finalize_stream`, so each turn logs exactly
one closing event: ``stream.end`` at INFO or ``stream.error`` at WARNING.
"""
from __future__ import annotations

import logging
from typing import Optional

from ..errors import StreamError
from ..logging import LogContext, normalized_log_event
from ..models import Message
from .outcome import StreamOutcome
from .streaming_metrics import StreamMetrics, usage_problem


def finalize_stream(
    *,
    logger: logging.Logger,
    ctx: LogContext,
    metrics: StreamMetrics,
    partial_text: str,
    message: Optional[Message] = None,
    error: Optional[StreamError] = None,
) -> StreamOutcome:
    """Log the closing event for the turn and return its outcome."""
    outcome = StreamOutcome(message=message, error=error, partial_text=partial_text, metrics=metrics)
    failed = error is not None
    normalized_log_event(
        logger,
        "stream.error" if failed else "stream.end",
        ctx,
        phase="finalize",
        emitted=metrics.emitted > 0,
        tokens=metrics.tokens,
        error_code=error.code.value if failed else None,
        level=logging.WARNING if failed else logging.INFO,
        emitted_count=metrics.emitted,
        frames=metrics.frames,
        time_to_first_token_ms=metrics.time_to_first_token_ms,
        total_duration_ms=metrics.total_duration_ms,
        usage_warning=usage_problem(metrics),
        status_code=error.status_code if failed else None,
        error=error.message if failed else None,
    )
    return outcome


__all__ = ["finalize_stream"]
