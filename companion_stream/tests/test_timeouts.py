"""Timeout configuration tests."""
from __future__ import annotations

import httpx

from companion_stream.base.timeouts import TimeoutConfig, get_timeout_config


def test_defaults_are_ten_seconds():
    cfg = TimeoutConfig()
    timeout = cfg.to_httpx()
    assert isinstance(timeout, httpx.Timeout)  # nosec B101
    assert (timeout.connect, timeout.read, timeout.write, timeout.pool) == (10.0, 10.0, 10.0, 10.0)  # nosec B101


def test_with_read_timeout_only_accepts_positive_values():
    cfg = TimeoutConfig()
    assert cfg.with_read_timeout(2.5).read_timeout_seconds == 2.5  # nosec B101
    assert cfg.with_read_timeout(0) is cfg and cfg.with_read_timeout(None) is cfg  # nosec B101


def test_environment_overrides_and_cache_refresh(monkeypatch):
    monkeypatch.setenv("COMPANION_TIMEOUT_CONNECT_SECONDS", "3")
    monkeypatch.setenv("COMPANION_TIMEOUT_READ_SECONDS", "not-a-number")
    monkeypatch.setenv("COMPANION_TIMEOUT_POOL_SECONDS", "-1")
    first = get_timeout_config()
    assert first.connect_timeout_seconds == 3.0  # nosec B101
    assert first.read_timeout_seconds == 10.0 and first.pool_timeout_seconds == 10.0  # nosec B101
    assert get_timeout_config() is first  # nosec B101

    monkeypatch.setenv("COMPANION_TIMEOUT_CONNECT_SECONDS", "4")
    assert get_timeout_config().connect_timeout_seconds == 4.0  # nosec B101
