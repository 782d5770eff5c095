"""OpenAI helpers module.

Payload and header construction for the OpenAI-compatible streaming
endpoints. Replies arrive as server-sent events terminated by ``[DONE]``.

Notes:
- ``stream_options.include_usage`` asks for a final usage-only chunk (empty
  ``choices``) so token counts can be recorded.
- Images are sent as ``image_url`` content parts with a base64 data URL.
"""
from __future__ import annotations

from typing import Any, Dict, List

from ..base.errors import DecodeError
from ..base.models import Message, ModelInfo


def message_payload(message: Message) -> Dict[str, Any]:
    """Map a :class:`Message` onto the chat-completions message shape."""
    if not message.images:
        return message.to_payload()
    parts: List[Dict[str, Any]] = [{"type": "text", "text": message.content}]
    for image in message.images:
        parts.append({"type": "image_url", "image_url": {"url": f"data:image/png;base64,{image}"}})
    return {"role": message.role, "content": parts}


def build_chat_payload(*, model: str, messages: List[Message]) -> Dict[str, Any]:
    """Construct the JSON payload for ``/v1/chat/completions``."""
    return {
        "model": model,
        "messages": [message_payload(m) for m in messages],
        "stream": True,
        "stream_options": {"include_usage": True},
    }


def build_generate_payload(*, model: str, prompt: str) -> Dict[str, Any]:
    """Construct the JSON payload for the legacy ``/v1/completions`` endpoint."""
    return {"model": model, "prompt": prompt, "stream": True}


def auth_headers(api_key: str) -> Dict[str, str]:
    return {"Authorization": f"Bearer {api_key}", "Accept": "text/event-stream"}


def models_from_listing(payload: Any) -> List[ModelInfo]:
    """Parse the ``/v1/models`` listing, sorted by model id."""
    entries = payload.get("data") if isinstance(payload, dict) else None
    if not isinstance(entries, list):
        raise DecodeError(message="model listing has no \"data\" list")
    models = [
        ModelInfo(name=entry["id"], owned_by=entry.get("owned_by") if isinstance(entry.get("owned_by"), str) else None)
        for entry in entries
        if isinstance(entry, dict) and isinstance(entry.get("id"), str) and entry["id"]
    ]
    return sorted(models, key=lambda m: m.name)


__all__ = ["message_payload", "build_chat_payload", "build_generate_payload", "auth_headers", "models_from_listing"]
