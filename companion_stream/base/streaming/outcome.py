"""Terminal value of one streamed turn."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from ..errors import StreamError
from ..models import Message
from .streaming_metrics import StreamMetrics


@dataclass
class StreamOutcome:
    """Exactly one per stream: either ``message`` or ``error`` is set.

    ``partial_text`` is whatever was accumulated before the stream ended. On
    failure it is incomplete and callers that show it must label it so.
    """

    message: Optional[Message] = None
    error: Optional[StreamError] = None
    partial_text: str = ""
    metrics: StreamMetrics = field(default_factory=StreamMetrics)

    def __post_init__(self) -> None:
        if (self.message is None) == (self.error is None):
            raise ValueError("StreamOutcome requires exactly one of message or error")

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> Message:
        """Return the message or raise the classified error."""
        if self.error is not None:
            raise self.error
        assert self.message is not None  # nosec B101
        return self.message


__all__ = ["StreamOutcome"]
