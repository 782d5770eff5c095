"""Per-turn labels attached to every stream log event.

One :class:`LogContext` is built when a turn starts and passed to each event
of that turn, so ``stream.start``, ``stream.decode_error`` and ``stream.end``
of the same request can be joined on ``request_id`` across backends.
"""
from __future__ import annotations

import uuid
from dataclasses import dataclass, field, replace
from typing import Any, Dict, Optional

REQUEST_ID_LENGTH = 12


def new_request_id() -> str:
    """Return a short random id for one request/response turn."""
    return uuid.uuid4().hex[:REQUEST_ID_LENGTH]


@dataclass(frozen=True)
class LogContext:
    """Labels of one streamed turn.

    ``extra`` holds caller-specific labels; it never overrides the named
    fields in :meth:`to_dict`.
    """

    backend: Optional[str] = None
    model: Optional[str] = None
    dialect: Optional[str] = None
    request_id: Optional[str] = None
    extra: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def for_turn(
        cls,
        backend: Optional[str],
        model: Optional[str],
        dialect: Optional[str] = None,
        request_id: Optional[str] = None,
    ) -> "LogContext":
        """Context for a new turn; a request id is generated when absent."""
        return cls(backend=backend, model=model, dialect=dialect, request_id=request_id or new_request_id())

    def bind(self, **labels: Any) -> "LogContext":
        """Return a copy carrying ``labels`` in addition to the current ones."""
        return replace(self, extra={**self.extra, **labels})

    def to_dict(self) -> Dict[str, Any]:
        named = {
            "backend": self.backend,
            "model": self.model,
            "dialect": self.dialect,
            "request_id": self.request_id,
        }
        merged = {**self.extra, **named}
        return {k: v for k, v in merged.items() if v is not None}


__all__ = ["LogContext", "new_request_id"]
