"""HTTP client pool tests."""
from __future__ import annotations

import httpx

from companion_stream.base.http import close_all_clients, get_httpx_client


def test_clients_are_pooled_per_purpose_and_timeout():
    a = get_httpx_client(None, "ollama.stream", read_timeout=5.0)
    assert get_httpx_client(None, "ollama.stream", read_timeout=5.0) is a  # nosec B101
    assert get_httpx_client(None, "openai.stream", read_timeout=5.0) is not a  # nosec B101
    assert get_httpx_client(None, "ollama.stream", read_timeout=30.0) is not a  # nosec B101
    assert a.timeout.read == 5.0  # nosec B101


def test_base_url_is_applied():
    client = get_httpx_client("http://localhost:11434", "ollama.stream")
    assert client.base_url.host == "localhost" and client.base_url.port == 11434  # nosec B101


def test_close_all_clients_replaces_closed_clients():
    a = get_httpx_client(None, "ollama.stream")
    close_all_clients()
    assert a.is_closed  # nosec B101
    b = get_httpx_client(None, "ollama.stream")
    assert b is not a and not b.is_closed  # nosec B101


def test_custom_transport_is_never_pooled():
    transport = httpx.MockTransport(lambda request: httpx.Response(204))
    a = get_httpx_client(None, "ollama.stream", transport=transport)
    b = get_httpx_client(None, "ollama.stream", transport=transport)
    assert a is not b  # nosec B101
    assert a.get("http://localhost/ping").status_code == 204  # nosec B101
    a.close()
    b.close()
