"""Pytest configuration for the companion_stream test suite.

Provides log capture on the shared ``companion`` logger (which does not
propagate to the root logger) and isolates configuration caches and HTTP
client pools between tests.
"""

from __future__ import annotations

import logging
from typing import Iterator, List

import pytest

from companion_stream.base.http import close_all_clients
from companion_stream.base.logging import BASE_LOGGER_NAME
from companion_stream.config import reset_config_cache


@pytest.fixture()
def log_capture() -> Iterator[List[logging.LogRecord]]:
    """Collect every record reaching the ``companion`` logger."""
    records: List[logging.LogRecord] = []
    handler = logging.Handler()
    handler.emit = lambda record: records.append(record)  # type: ignore
    base = logging.getLogger(BASE_LOGGER_NAME)
    base.addHandler(handler)
    try:
        yield records
    finally:
        base.removeHandler(handler)


@pytest.fixture(autouse=True)
def isolated_config(monkeypatch: pytest.MonkeyPatch, tmp_path) -> Iterator[None]:
    """Keep real ``.env`` files and config env vars out of every test."""
    monkeypatch.setenv("DOTENV_FILE", str(tmp_path / "missing.env"))
    for name in (
        "COMPANION_CONFIG_FILE",
        "COMPANION_LOG_LEVEL",
        "OLLAMA_MODEL",
        "OLLAMA_BASE_URL",
        "OPENAI_MODEL",
        "OPENAI_API_KEY",
        "OPENAI_BASE_URL",
    ):
        monkeypatch.delenv(name, raising=False)
    reset_config_cache()
    yield
    reset_config_cache()
    close_all_clients()
