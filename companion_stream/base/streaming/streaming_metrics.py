"""Per-turn stream metrics.

:class:`StreamMetrics` is filled in by the orchestrator as frames are
decoded and travels inside the :class:`StreamOutcome`. Token usage is
whatever the backend reported (Ollama's eval counts on the ``done`` frame,
OpenAI's trailing usage chunk); nothing is estimated locally.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Mapping, Optional

TokenUsage = Dict[str, Optional[int]]


def build_token_usage(prompt: Optional[int], completion: Optional[int], total: Optional[int] = None) -> TokenUsage:
    """Return the canonical ``{"prompt", "completion", "total"}`` mapping.

    ``total`` is derived from the other two when the backend omits it.
    """
    if total is None and prompt is not None and completion is not None:
        total = prompt + completion
    return {"prompt": prompt, "completion": completion, "total": total}


@dataclass
class StreamMetrics:
    """Counters and timings for one streamed turn.

    Attributes:
        frames: Frames handed to the decoder (empty lines are not frames).
        emitted: Deltas carrying text or tool-call fragments.
        time_to_first_token_ms: Milliseconds from the start of the read loop
            to the first emitted delta.
        total_duration_ms: Milliseconds spent in the read loop.
        prompt_tokens / completion_tokens / total_tokens: Reported usage.
    """

    frames: int = 0
    emitted: int = 0
    time_to_first_token_ms: Optional[float] = None
    total_duration_ms: Optional[float] = None
    prompt_tokens: Optional[int] = None
    completion_tokens: Optional[int] = None
    total_tokens: Optional[int] = None

    @property
    def tokens(self) -> Optional[TokenUsage]:
        """Canonical usage mapping, or ``None`` when nothing was reported."""
        if self.prompt_tokens is None and self.completion_tokens is None and self.total_tokens is None:
            return None
        return build_token_usage(self.prompt_tokens, self.completion_tokens, self.total_tokens)

    def record_usage(self, usage: Mapping[str, Optional[int]]) -> None:
        """Store a usage mapping from a decoded frame; later reports win."""
        self.prompt_tokens = usage.get("prompt")
        self.completion_tokens = usage.get("completion")
        self.total_tokens = build_token_usage(self.prompt_tokens, self.completion_tokens, usage.get("total"))["total"]

    def record_emitted(self, elapsed_ms: float) -> None:
        self.emitted += 1
        if self.time_to_first_token_ms is None:
            self.time_to_first_token_ms = elapsed_ms


def usage_problem(metrics: StreamMetrics) -> Optional[str]:
    """Describe why reported usage is inconsistent, or return ``None``.

    Backends occasionally report partial or contradictory counts; the turn is
    still valid, so this only feeds a warning field in the final log event.
    """
    for name in ("prompt_tokens", "completion_tokens", "total_tokens"):
        value = getattr(metrics, name)
        if value is not None and value < 0:
            return f"{name} negative: {value}"
    prompt, completion, total = metrics.prompt_tokens, metrics.completion_tokens, metrics.total_tokens
    if prompt is not None and completion is not None and total is not None and prompt + completion > total:
        return f"total_tokens {total} smaller than prompt+completion {prompt + completion}"
    return None


__all__ = ["StreamMetrics", "TokenUsage", "build_token_usage", "usage_problem"]
