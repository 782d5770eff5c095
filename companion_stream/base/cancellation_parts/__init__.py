"""Cancellation primitives implementation package."""

from .cancellation_token import CancellationToken
from .cancelled_error import CancelledError

__all__ = ["CancellationToken", "CancelledError"]
