"""Cooperative cancellation (public facade).

Work in this package is only ever stopped cooperatively through a
:class:`CancellationToken`; nothing is terminated forcibly.
"""

from .cancellation_parts.cancellation_token import CancellationToken
from .cancellation_parts.cancelled_error import CancelledError

__all__ = ["CancellationToken", "CancelledError"]
