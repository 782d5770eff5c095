"""Wire dialect decoders.

Two dialects encode "the model is still talking" differently:

``Dialect.NEWLINE_DELIMITED`` (Ollama)
    Every frame is one JSON object. The text fragment lives in
    ``message.content`` (chat endpoint) or ``response`` (generate endpoint)
    and ``done: true`` ends the turn. No sentinel strings are recognized.

``Dialect.EVENT_STREAM`` (OpenAI-compatible)
    Frames are server-sent-event lines. ``[DONE]`` (bare, or after a
    ``data:`` prefix) ends the turn with no content. Comment lines starting
    with ``:`` are keep-alives and carry nothing. Every other frame must be
    ``data: <json>`` whose ``choices`` list carries the fragment in
    ``choices[0].delta.content``; ``finish_reason == "stop"`` ends the turn.

Both decoders expose the same contract, ``decode(line) -> DecodeResult``, and
raise :class:`DecodeError` for a frame they cannot interpret. Decoders are
created per stream by :func:`get_decoder` because the newline-delimited one
numbers tool calls across frames.
"""
from __future__ import annotations

import json
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Optional, Protocol

from ..errors import DecodeError
from ..models import EMPTY_DELTA, Delta, ToolCallFragment
from .streaming_metrics import build_token_usage

DONE_SENTINEL = "[DONE]"
DATA_PREFIX = "data:"


class Dialect(str, Enum):
    """Supported streaming wire encodings."""

    NEWLINE_DELIMITED = "ndjson"
    EVENT_STREAM = "sse"


@dataclass(frozen=True)
class DecodeResult:
    """Outcome of decoding one frame.

    Attributes:
        delta: Fragment carried by the frame (possibly empty).
        terminal: True when the frame is the dialect's end-of-turn signal.
        usage: Canonical token usage mapping when the frame reports one.
    """

    delta: Delta = EMPTY_DELTA
    terminal: bool = False
    usage: Optional[Dict[str, Optional[int]]] = None


class FrameDecoder(Protocol):
    """Capability contract shared by every dialect decoder."""

    dialect: Dialect

    def decode(self, line: str) -> DecodeResult:  # pragma: no cover - protocol
        ...


def _load_object(payload: str, line: str) -> Dict[str, Any]:
    try:
        obj = json.loads(payload)
    except ValueError as exc:
        raise DecodeError(message=f"invalid JSON frame: {exc}", frame=line, raw=exc) from exc
    if not isinstance(obj, dict):
        raise DecodeError(message=f"expected a JSON object, got {type(obj).__name__}", frame=line)
    return obj


def _text_field(value: Any, where: str, line: str) -> str:
    if value is None:
        return ""
    if not isinstance(value, str):
        raise DecodeError(message=f"{where} must be a string, got {type(value).__name__}", frame=line)
    return value


def _optional_text(value: Any, where: str, line: str) -> Optional[str]:
    return None if value is None else _text_field(value, where, line)


def _int_or_none(value: Any) -> Optional[int]:
    return value if isinstance(value, int) and not isinstance(value, bool) else None


class NdjsonDecoder:
    """Decoder for newline-delimited JSON frames."""

    dialect = Dialect.NEWLINE_DELIMITED

    def __init__(self) -> None:
        self._tool_index = 0

    def decode(self, line: str) -> DecodeResult:
        obj = _load_object(line, line)
        if "error" in obj and obj["error"]:
            raise DecodeError(message=f"backend reported an error: {obj['error']}", frame=line)

        message = obj.get("message")
        if message is not None and not isinstance(message, dict):
            raise DecodeError(message="message must be an object", frame=line)
        if message is not None:
            text = _text_field(message.get("content"), "message.content", line)
            tool_calls = self._tool_fragments(message.get("tool_calls"), line)
        else:
            text = _text_field(obj.get("response"), "response", line)
            tool_calls = []

        done = obj.get("done") is True
        usage = None
        if done:
            prompt = _int_or_none(obj.get("prompt_eval_count"))
            completion = _int_or_none(obj.get("eval_count"))
            if prompt is not None or completion is not None:
                usage = build_token_usage(prompt, completion)
        return DecodeResult(delta=Delta(text=text, tool_calls=tool_calls), terminal=done, usage=usage)

    def _tool_fragments(self, raw: Any, line: str) -> List[ToolCallFragment]:
        if not raw:
            return []
        if not isinstance(raw, list):
            raise DecodeError(message="message.tool_calls must be a list", frame=line)
        fragments: List[ToolCallFragment] = []
        for call in raw:
            function = call.get("function") if isinstance(call, dict) else None
            if not isinstance(function, dict):
                raise DecodeError(message="tool call without a function object", frame=line)
            arguments = function.get("arguments")
            if not isinstance(arguments, str):
                arguments = json.dumps(arguments if arguments is not None else {})
            # Whole calls arrive in one frame; number them across the stream.
            fragments.append(
                ToolCallFragment(
                    index=self._tool_index,
                    call_id=_optional_text(call.get("id"), "tool_calls.id", line),
                    name=_optional_text(function.get("name"), "function.name", line),
                    arguments_delta=arguments,
                )
            )
            self._tool_index += 1
        return fragments


class EventStreamDecoder:
    """Decoder for server-sent-event frames."""

    dialect = Dialect.EVENT_STREAM

    def decode(self, line: str) -> DecodeResult:
        if line == DONE_SENTINEL:
            return DecodeResult(terminal=True)
        if line.startswith(":"):
            return DecodeResult()
        if not line.startswith(DATA_PREFIX):
            raise DecodeError(message="event-stream frame without 'data:' prefix", frame=line)
        payload = line[len(DATA_PREFIX):]
        if payload.startswith(" "):
            payload = payload[1:]
        if payload == DONE_SENTINEL:
            return DecodeResult(terminal=True)

        obj = _load_object(payload, line)
        usage = self._usage(obj.get("usage"))
        choices = obj.get("choices")
        if not isinstance(choices, list):
            raise DecodeError(message="frame has no 'choices' list", frame=line)
        if not choices:
            # Usage-only chunk sent before [DONE].
            return DecodeResult(usage=usage)

        choice = choices[0]
        if not isinstance(choice, dict):
            raise DecodeError(message="choice entry must be an object", frame=line)
        delta = choice.get("delta")
        if delta is None:
            delta = {}
        if not isinstance(delta, dict):
            raise DecodeError(message="choice delta must be an object", frame=line)

        if "content" in delta:
            text = _text_field(delta.get("content"), "delta.content", line)
        else:
            # Legacy completions endpoint puts the fragment on the choice.
            text = _text_field(choice.get("text"), "choice.text", line)
        tool_calls = self._tool_fragments(delta.get("tool_calls"), line)
        terminal = choice.get("finish_reason") == "stop"
        return DecodeResult(delta=Delta(text=text, tool_calls=tool_calls), terminal=terminal, usage=usage)

    @staticmethod
    def _usage(raw: Any) -> Optional[Dict[str, Optional[int]]]:
        if not isinstance(raw, dict):
            return None
        return build_token_usage(
            _int_or_none(raw.get("prompt_tokens")),
            _int_or_none(raw.get("completion_tokens")),
            _int_or_none(raw.get("total_tokens")),
        )

    @staticmethod
    def _tool_fragments(raw: Any, line: str) -> List[ToolCallFragment]:
        if not raw:
            return []
        if not isinstance(raw, list):
            raise DecodeError(message="delta.tool_calls must be a list", frame=line)
        fragments: List[ToolCallFragment] = []
        for position, call in enumerate(raw):
            if not isinstance(call, dict):
                raise DecodeError(message="tool call fragment must be an object", frame=line)
            function = call.get("function") or {}
            if not isinstance(function, dict):
                raise DecodeError(message="tool call function must be an object", frame=line)
            index = call.get("index")
            fragments.append(
                ToolCallFragment(
                    index=index if isinstance(index, int) else position,
                    call_id=_optional_text(call.get("id"), "tool_calls.id", line),
                    name=_optional_text(function.get("name"), "function.name", line),
                    arguments_delta=_optional_text(function.get("arguments"), "function.arguments", line),
                )
            )
        return fragments


_BACKEND_DIALECTS = {
    "ollama": Dialect.NEWLINE_DELIMITED,
    "openai": Dialect.EVENT_STREAM,
}


def dialect_for_backend(backend: str) -> Dialect:
    """Return the wire dialect spoken by ``backend``.

    Raises:
        KeyError: when the backend name is not known.
    """
    return _BACKEND_DIALECTS[backend.strip().lower()]


def get_decoder(dialect: Dialect | str) -> FrameDecoder:
    """Create a fresh decoder for one stream."""
    dialect = Dialect(dialect)
    if dialect is Dialect.NEWLINE_DELIMITED:
        return NdjsonDecoder()
    return EventStreamDecoder()


__all__ = [
    "Dialect",
    "DecodeResult",
    "FrameDecoder",
    "NdjsonDecoder",
    "EventStreamDecoder",
    "DONE_SENTINEL",
    "dialect_for_backend",
    "get_decoder",
]
