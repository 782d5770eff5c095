"""Streaming package.

Exposes the incremental decoder (frame splitting, dialect decoding, delta
aggregation, completion detection and the orchestrating read loop) plus its
metrics helpers under a single namespace.
"""

from .aggregator import DeltaAggregator, DeltaCallback
from .completion import CompletionDetector, StreamState
from .dialects import (
    DecodeResult,
    Dialect,
    EventStreamDecoder,
    FrameDecoder,
    NdjsonDecoder,
    dialect_for_backend,
    get_decoder,
)
from .frame_splitter import DEFAULT_BUFFER_SIZE, FrameSplitter
from .orchestrator import ResponseBody, StreamOrchestrator
from .outcome import StreamOutcome
from .streaming_finalize import finalize_stream
from .streaming_metrics import StreamMetrics, TokenUsage, build_token_usage, usage_problem

__all__ = [
    "DEFAULT_BUFFER_SIZE",
    "FrameSplitter",
    "Dialect",
    "DecodeResult",
    "FrameDecoder",
    "NdjsonDecoder",
    "EventStreamDecoder",
    "dialect_for_backend",
    "get_decoder",
    "DeltaAggregator",
    "DeltaCallback",
    "CompletionDetector",
    "StreamState",
    "StreamOutcome",
    "StreamOrchestrator",
    "ResponseBody",
    "StreamMetrics",
    "TokenUsage",
    "build_token_usage",
    "usage_problem",
    "finalize_stream",
]
