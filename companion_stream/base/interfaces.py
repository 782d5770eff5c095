"""
Backend-agnostic interfaces (Protocols) for the conversation layer.

Backends, the CLI and tests depend on these contracts rather than on
concrete classes, so a fake backend or a silent indicator can be swapped in
without touching the exchange code.
"""

from __future__ import annotations

from typing import List, Optional, Protocol, runtime_checkable

from .cancellation import CancellationToken
from .models import Message, ModelInfo
from .streaming import DeltaCallback, StreamOutcome


@runtime_checkable
class ProgressIndicator(Protocol):
    """Something shown to the user while waiting for response headers.

    ``start`` is called immediately before the request is sent and ``stop``
    as soon as headers arrive (or the request fails). ``stop`` must be safe
    to call more than once.
    """

    def start(self) -> None:  # pragma: no cover - interface
        ...

    def stop(self) -> None:  # pragma: no cover - interface
        ...


@runtime_checkable
class Companion(Protocol):
    """A conversation with one backend.

    ``chat`` sends the next user turn with the conversation so far and, on
    success, appends both the user message and the assistant reply to the
    history. A failed turn leaves the history untouched.
    """

    backend: str
    model: str

    @property
    def conversation(self) -> List[Message]:  # pragma: no cover - interface
        ...

    def chat(
        self,
        prompt: str,
        callback: Optional[DeltaCallback] = None,
        *,
        images: Optional[List[str]] = None,
        indicator: Optional[ProgressIndicator] = None,
        token: Optional[CancellationToken] = None,
    ) -> StreamOutcome:  # pragma: no cover - interface
        ...

    def generate(
        self,
        prompt: str,
        callback: Optional[DeltaCallback] = None,
        *,
        indicator: Optional[ProgressIndicator] = None,
        token: Optional[CancellationToken] = None,
    ) -> StreamOutcome:  # pragma: no cover - interface
        ...

    def reset(self) -> None:  # pragma: no cover - interface
        ...

    def list_models(self) -> List[ModelInfo]:  # pragma: no cover - interface
        ...


__all__ = ["ProgressIndicator", "Companion"]
