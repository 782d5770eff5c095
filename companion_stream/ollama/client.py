"""Ollama backend.

Talks to a local Ollama daemon over its streaming JSON API. No API key is
required. Replies arrive as newline-delimited JSON frames; ``done: true``
ends the turn.
"""
from __future__ import annotations

from typing import Any, Dict, List

from ..base.conversation import ConversationCompanion
from ..base.models import Message, ModelInfo
from ..base.streaming import Dialect
from .helpers import build_chat_payload, build_generate_payload, models_from_tags


class OllamaCompanion(ConversationCompanion):
    """Conversation against ``/api/chat`` (and ``/api/generate``); models from ``/api/tags``."""

    backend = "ollama"
    dialect = Dialect.NEWLINE_DELIMITED

    def build_chat_payload(self, messages: List[Message]) -> Dict[str, Any]:
        return build_chat_payload(model=self.model, messages=messages)

    def build_generate_payload(self, prompt: str) -> Dict[str, Any]:
        return build_generate_payload(model=self.model, prompt=prompt, system=self.config.system_prompt)

    def parse_models(self, payload: Any) -> List[ModelInfo]:
        return models_from_tags(payload)


__all__ = ["OllamaCompanion"]
