"""Cooperative cancellation token implementation.

One token per turn: the CLI cancels it from its SIGINT handler, the read loop
checks it before each frame, and the waiting indicator blocks on it between
spinner frames.
"""

from __future__ import annotations

from threading import Event, Lock
from typing import Optional

from .cancelled_error import CancelledError


class CancellationToken:
    """A thread-safe, one-shot cancellation flag with a reason.

    ``cancel`` may be called from any thread (or a signal handler on the main
    thread) while another thread polls :attr:`cancelled`, calls
    :meth:`raise_if_cancelled`, or blocks in :meth:`wait`.
    """

    def __init__(self) -> None:
        self._event = Event()
        self._lock = Lock()
        self._reason: Optional[str] = None

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    @property
    def reason(self) -> Optional[str]:
        """Reason given by the first ``cancel`` call, if any."""
        return self._reason

    def cancel(self, reason: Optional[str] = None) -> bool:
        """Request cancellation; return False when it was already requested."""
        with self._lock:
            if self._event.is_set():
                return False
            self._reason = reason
            self._event.set()
        return True

    def wait(self, timeout: Optional[float] = None) -> bool:
        """Block up to ``timeout`` seconds; return True once cancelled."""
        return self._event.wait(timeout)

    def raise_if_cancelled(self) -> None:
        if self._event.is_set():
            raise CancelledError(self._reason or "operation cancelled")

    def __repr__(self) -> str:  # pragma: no cover - introspection aid
        return f"CancellationToken(cancelled={self.cancelled}, reason={self._reason!r})"


__all__ = ["CancellationToken"]
