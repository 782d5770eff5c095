"""Helpers for streaming decoder tests.

``ScriptedBody`` implements the orchestrator's response surface and records
how it was used (chunks read, close calls) so tests can assert that reading
stops at end-of-turn and that the body is always released.
"""
from __future__ import annotations

import json
from typing import Iterable, Iterator, List, Optional

import httpx


class ScriptedBody:
    """Response body yielding pre-cut chunks, optionally failing at the end."""

    def __init__(
        self,
        chunks: Iterable[bytes],
        *,
        status_code: int = 200,
        body: bytes = b"",
        fail_with: Optional[BaseException] = None,
    ) -> None:
        self.status_code = status_code
        self._chunks = chunks
        self._body = body
        self.fail_with = fail_with
        self.reads = 0
        self.iterated = False
        self.close_calls = 0

    @property
    def closed(self) -> bool:
        return self.close_calls > 0

    def iter_bytes(self, chunk_size: Optional[int] = None) -> Iterator[bytes]:
        self.iterated = True
        for chunk in self._chunks:
            self.reads += 1
            yield chunk
        if self.fail_with is not None:
            raise self.fail_with

    def read(self) -> bytes:
        return self._body

    def close(self) -> None:
        self.close_calls += 1


def ndjson(*objects: dict) -> bytes:
    return b"".join(json.dumps(o).encode("utf-8") + b"\n" for o in objects)


def sse(*payloads) -> bytes:
    """Encode SSE ``data:`` events; strings are sent verbatim (e.g. ``[DONE]``)."""
    out: List[bytes] = []
    for p in payloads:
        text = p if isinstance(p, str) else json.dumps(p)
        out.append(f"data: {text}\n\n".encode("utf-8"))
    return b"".join(out)


def chat_frame(text: str, done: bool = False, **extra) -> dict:
    return {"model": "llama3.2", "message": {"role": "assistant", "content": text}, "done": done, **extra}


def choice_frame(text: Optional[str] = None, finish_reason: Optional[str] = None, **delta_extra) -> dict:
    delta = dict(delta_extra)
    if text is not None:
        delta["content"] = text
    return {"id": "chatcmpl-1", "choices": [{"index": 0, "delta": delta, "finish_reason": finish_reason}]}


def split_at(data: bytes, offset: int) -> List[bytes]:
    return [data[:offset], data[offset:]]


def response_from(chunks: Iterable[bytes], status_code: int = 200) -> httpx.Response:
    """Build a streaming ``httpx.Response`` over ``chunks``."""
    return httpx.Response(status_code, content=iter(list(chunks)))
