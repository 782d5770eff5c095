"""Unit tests for the cooperative cancellation token."""
from __future__ import annotations

import threading

import pytest

from companion_stream.base.cancellation import CancellationToken, CancelledError


def test_cancel_is_idempotent_and_first_reason_wins():
    token = CancellationToken()
    assert not token.cancelled and token.reason is None  # nosec B101
    assert token.cancel("user interrupt") is True  # nosec B101
    assert token.cancel("second") is False  # nosec B101
    assert token.cancelled and token.reason == "user interrupt"  # nosec B101


def test_raise_if_cancelled_carries_reason():
    token = CancellationToken()
    token.raise_if_cancelled()
    token.cancel("interrupted by user")
    with pytest.raises(CancelledError, match="interrupted by user"):
        token.raise_if_cancelled()


def test_raise_if_cancelled_default_message():
    token = CancellationToken()
    token.cancel()
    with pytest.raises(CancelledError, match="operation cancelled"):
        token.raise_if_cancelled()


def test_wait_times_out_then_returns_once_cancelled_from_another_thread():
    token = CancellationToken()
    assert token.wait(0.01) is False  # nosec B101
    timer = threading.Timer(0.01, token.cancel, args=("late",))
    timer.start()
    try:
        assert token.wait(5.0) is True  # nosec B101
    finally:
        timer.join()
    assert token.reason == "late"  # nosec B101
