"""Ollama helpers module.

Purpose:
- Payload construction for Ollama's ``/api/chat`` and ``/api/generate``
  endpoints, kept side-effect free so ``client.py`` stays small.

Wire notes:
- Ollama streams newline-delimited JSON; ``stream`` must be true.
- Images are sent as base64 strings on the message itself.
- Tool-call arguments are JSON objects, not strings, so assembled calls are
  decoded back before being replayed in history.
"""
from __future__ import annotations

import json
from typing import Any, Dict, List

from ..base.errors import DecodeError
from ..base.models import Message, ModelInfo


def message_payload(message: Message) -> Dict[str, Any]:
    """Map a :class:`Message` onto Ollama's message shape."""
    payload: Dict[str, Any] = {"role": message.role, "content": message.content}
    if message.images:
        payload["images"] = list(message.images)
    if message.tool_calls:
        calls = []
        for tc in message.tool_calls:
            try:
                arguments = json.loads(tc.arguments) if tc.arguments else {}
            except ValueError:
                arguments = {}
            calls.append({"function": {"name": tc.name, "arguments": arguments}})
        payload["tool_calls"] = calls
    return payload


def build_chat_payload(*, model: str, messages: List[Message]) -> Dict[str, Any]:
    """Construct the JSON payload for ``/api/chat``."""
    return {"model": model, "messages": [message_payload(m) for m in messages], "stream": True}


def build_generate_payload(*, model: str, prompt: str, system: str | None = None) -> Dict[str, Any]:
    """Construct the JSON payload for ``/api/generate``."""
    payload: Dict[str, Any] = {"model": model, "prompt": prompt, "stream": True}
    if system:
        payload["system"] = system
    return payload


def models_from_tags(payload: Any) -> List[ModelInfo]:
    """Parse the ``/api/tags`` listing; entries without a name are skipped."""
    entries = payload.get("models") if isinstance(payload, dict) else None
    if not isinstance(entries, list):
        raise DecodeError(message="model listing has no \"models\" list")
    models: List[ModelInfo] = []
    for entry in entries:
        if not isinstance(entry, dict):
            continue
        name = entry.get("name") or entry.get("model")
        if not isinstance(name, str) or not name:
            continue
        size = entry.get("size")
        modified = entry.get("modified_at")
        models.append(
            ModelInfo(
                name=name,
                size=size if isinstance(size, int) and not isinstance(size, bool) else None,
                modified_at=modified if isinstance(modified, str) else None,
            )
        )
    return models


__all__ = ["message_payload", "build_chat_payload", "build_generate_payload", "models_from_tags"]
