"""OpenAI-compatible backend.

Streams chat completions as server-sent events with bearer authentication.
The turn ends on ``data: [DONE]`` or on a choice whose ``finish_reason`` is
``"stop"``, whichever arrives first.
"""
from __future__ import annotations

from typing import Any, Dict, List

from ..base.conversation import ConversationCompanion
from ..base.models import Message, ModelInfo
from ..base.streaming import Dialect
from .helpers import auth_headers, build_chat_payload, build_generate_payload, models_from_listing


class OpenAICompanion(ConversationCompanion):
    """Conversation against ``/v1/chat/completions`` (and ``/v1/completions``)."""

    backend = "openai"
    dialect = Dialect.EVENT_STREAM

    def headers(self) -> Dict[str, str]:
        return auth_headers(self.config.api_key or "")

    def build_chat_payload(self, messages: List[Message]) -> Dict[str, Any]:
        return build_chat_payload(model=self.model, messages=messages)

    def build_generate_payload(self, prompt: str) -> Dict[str, Any]:
        return build_generate_payload(model=self.model, prompt=prompt)

    def parse_models(self, payload: Any) -> List[ModelInfo]:
        return models_from_listing(payload)


__all__ = ["OpenAICompanion"]
