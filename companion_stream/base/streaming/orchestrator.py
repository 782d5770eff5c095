"""Stream orchestrator: the read loop of one streamed turn.

Purpose:
    Take ownership of an open response body and drive
    ``FrameSplitter -> decoder -> DeltaAggregator -> CompletionDetector`` in
    lockstep, one frame at a time, until the detector reaches a terminal
    state. The result is always exactly one :class:`StreamOutcome`.

Guarantees:
    - The HTTP status is validated before any byte of the body is read.
    - Reading stops the moment the turn is finished or failed; the rest of
      the body is never drained, so a backend that keeps the connection
      open after ``[DONE]`` cannot block the caller.
    - The body is closed on every exit path.
    - Stream-level failures are returned inside the outcome, never raised.
      Only programming errors (and ``KeyboardInterrupt``) propagate.

Timeouts:
    The read timeout lives on the ``httpx.Client`` that opened the response;
    when it fires the next ``iter_bytes`` step raises ``httpx.ReadTimeout``,
    which becomes ``StreamIOError`` with code ``timeout``.

Cancellation:
    An optional :class:`CancellationToken` is polled before every frame and
    ends the turn with :class:`StreamCancelledError`.
"""
from __future__ import annotations

import logging
import time
from typing import Iterator, Optional, Protocol

import httpx

from ..cancellation import CancellationToken, CancelledError
from ..errors import (
    DecodeError,
    ErrorCode,
    HTTPStatusError,
    StreamCancelledError,
    StreamError,
    StreamIOError,
    classify_exception,
)
from ..logging import LogContext, get_logger, normalized_log_event
from .aggregator import DeltaAggregator, DeltaCallback
from .completion import CompletionDetector, StreamState
from .dialects import Dialect, FrameDecoder, get_decoder
from .frame_splitter import DEFAULT_BUFFER_SIZE, FrameSplitter
from .outcome import StreamOutcome
from .streaming_finalize import finalize_stream
from .streaming_metrics import StreamMetrics

_BODY_PREVIEW_LIMIT = 4096


class ResponseBody(Protocol):
    """Minimal response surface consumed by the orchestrator.

    ``httpx.Response`` satisfies it; tests may pass any equivalent object.
    """

    status_code: int

    def iter_bytes(self, chunk_size: Optional[int] = None) -> Iterator[bytes]:  # pragma: no cover - protocol
        ...

    def read(self) -> bytes:  # pragma: no cover - protocol
        ...

    def close(self) -> None:  # pragma: no cover - protocol
        ...


class StreamOrchestrator:
    """Decode one response body into a :class:`StreamOutcome`.

    Parameters:
        buffer_size: Maximum bytes requested per read of the body.
        backend / model: Labels attached to errors and log events.
        trace_frames: Log every frame at DEBUG (``stream.frame``).
        logger: Logger override; defaults to ``companion.stream``.

    An orchestrator holds configuration only. Every :meth:`run` call builds
    its own splitter, decoder, aggregator and detector, so one instance may
    serve concurrent streams on separate threads.
    """

    def __init__(
        self,
        *,
        buffer_size: int = DEFAULT_BUFFER_SIZE,
        backend: Optional[str] = None,
        model: Optional[str] = None,
        trace_frames: bool = False,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        if buffer_size <= 0:
            raise ValueError("buffer_size must be positive")
        self.buffer_size = buffer_size
        self.backend = backend
        self.model = model
        self.trace_frames = trace_frames
        self.logger = logger or get_logger("stream")

    def run(
        self,
        response: ResponseBody,
        dialect: Dialect | str,
        callback: Optional[DeltaCallback] = None,
        *,
        token: Optional[CancellationToken] = None,
        request_id: Optional[str] = None,
    ) -> StreamOutcome:
        """Consume ``response`` and return the turn's single outcome."""
        dialect = Dialect(dialect)
        ctx = LogContext.for_turn(self.backend, self.model, dialect.value, request_id)
        decoder = get_decoder(dialect)
        splitter = FrameSplitter()
        aggregator = DeltaAggregator(callback)
        detector = CompletionDetector()
        metrics = StreamMetrics()
        started = time.perf_counter()

        normalized_log_event(
            self.logger,
            "stream.start",
            ctx,
            phase="start",
            emitted=False,
            status_code=response.status_code,
            buffer_size=self.buffer_size,
        )

        frames: Optional[Iterator[str]] = None
        last_frame: Optional[str] = None
        try:
            if not 200 <= response.status_code < 300:
                detector.fail(self._status_error(response))
            else:
                frames = self._frames(response, splitter)
                for frame in frames:
                    if token is not None:
                        token.raise_if_cancelled()
                    last_frame = frame
                    self._process_frame(frame, decoder, aggregator, detector, metrics, ctx, started)
                    if detector.is_terminal:
                        break
                else:
                    detector.end_of_input()
        except StreamError as exc:
            detector.fail(exc)
        except CancelledError as exc:
            detector.fail(StreamCancelledError(message=f"stream cancelled: {exc}", raw=exc))
        except (httpx.TransportError, httpx.StreamError, OSError) as exc:
            code = ErrorCode.TIMEOUT if classify_exception(exc) is ErrorCode.TIMEOUT else ErrorCode.IO
            detector.fail(StreamIOError(message=f"read failed: {type(exc).__name__}: {exc}", code=code, raw=exc))
        finally:
            if frames is not None:
                frames.close()
            response.close()
            metrics.total_duration_ms = (time.perf_counter() - started) * 1000.0

        error = detector.error
        if error is not None:
            self._label(error, last_frame)
            return finalize_stream(
                logger=self.logger, ctx=ctx, metrics=metrics, partial_text=aggregator.text, error=error
            )
        assert detector.state is StreamState.FINISHED  # nosec B101
        return finalize_stream(
            logger=self.logger,
            ctx=ctx,
            metrics=metrics,
            partial_text=aggregator.text,
            message=aggregator.finalize(),
        )

    def _frames(self, response: ResponseBody, splitter: FrameSplitter) -> Iterator[str]:
        for chunk in response.iter_bytes(self.buffer_size):
            yield from splitter.feed(chunk)
        yield from splitter.flush()

    def _process_frame(
        self,
        frame: str,
        decoder: FrameDecoder,
        aggregator: DeltaAggregator,
        detector: CompletionDetector,
        metrics: StreamMetrics,
        ctx: LogContext,
        started: float,
    ) -> None:
        metrics.frames += 1
        if self.trace_frames:
            normalized_log_event(
                self.logger, "stream.frame", ctx, phase="frame", level=logging.DEBUG, frame=frame, index=metrics.frames
            )
        try:
            result = decoder.decode(frame)
        except DecodeError as exc:
            normalized_log_event(
                self.logger,
                "stream.decode_error",
                ctx,
                phase="decode",
                error_code=exc.code.value,
                level=logging.WARNING,
                frame=frame,
                error=exc.message,
            )
            detector.fail(exc)
            return

        if result.usage is not None:
            metrics.record_usage(result.usage)
        if not result.delta.is_empty:
            metrics.record_emitted((time.perf_counter() - started) * 1000.0)
        # CallbackError propagates to run(), which records the failure.
        aggregator.accept(result.delta)
        detector.observe(result)

    def _status_error(self, response: ResponseBody) -> HTTPStatusError:
        body: Optional[str] = None
        try:
            raw = response.read()
            body = raw.decode("utf-8", errors="replace")[:_BODY_PREVIEW_LIMIT]
        except (httpx.HTTPError, httpx.StreamError, OSError):
            body = None
        reason = getattr(response, "reason_phrase", "") or ""
        message = f"unexpected HTTP status {response.status_code} {reason}".rstrip()
        if body:
            message = f"{message}: {body.strip()}"
        return HTTPStatusError(message=message, status_code=response.status_code, body=body)

    def _label(self, error: StreamError, last_frame: Optional[str]) -> None:
        if error.backend is None:
            error.backend = self.backend
        if error.model is None:
            error.model = self.model
        if error.frame is None:
            error.frame = last_frame


__all__ = ["StreamOrchestrator", "ResponseBody"]
