"""Helpers for backend tests driven by ``httpx.MockTransport``."""
from __future__ import annotations

import json
from typing import Callable, List

import httpx


class RecordingIndicator:
    """Progress indicator that records start/stop into a shared event log."""

    def __init__(self, events: List[str]) -> None:
        self.events = events

    def start(self) -> None:
        self.events.append("start")

    def stop(self) -> None:
        self.events.append("stop")


class Recorder:
    """Transport handler replaying canned bodies and recording requests."""

    def __init__(self, *bodies: bytes, status_code: int = 200, events: List[str] | None = None) -> None:
        self._bodies = list(bodies)
        self.status_code = status_code
        self.requests: List[httpx.Request] = []
        self.events = events

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.events is not None:
            self.events.append("request")
        body = self._bodies.pop(0) if self._bodies else b""
        return httpx.Response(self.status_code, content=body)

    @property
    def payloads(self) -> List[dict]:
        return [json.loads(r.content) for r in self.requests]

    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self)


def failing_transport(exc: Exception) -> httpx.MockTransport:
    def handler(request: httpx.Request) -> httpx.Response:
        raise exc

    return httpx.MockTransport(handler)


def streaming_transport(chunks: Callable[[], object]) -> httpx.MockTransport:
    """Transport whose response body is produced by ``chunks()`` lazily."""

    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, content=chunks())

    return httpx.MockTransport(handler)
