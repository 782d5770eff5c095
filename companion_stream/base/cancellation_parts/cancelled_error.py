"""Error raised by ``CancellationToken.raise_if_cancelled``."""

from __future__ import annotations


class CancelledError(RuntimeError):
    """A cancellation request was observed; the message is the reason.

    The stream orchestrator converts it into a ``StreamCancelledError``
    outcome, so it never escapes a turn.
    """


__all__ = ["CancelledError"]
