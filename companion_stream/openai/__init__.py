"""OpenAI-compatible backend package."""

from .client import OpenAICompanion

__all__ = ["OpenAICompanion"]
