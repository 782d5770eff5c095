"""Ollama backend package."""

from .client import OllamaCompanion

__all__ = ["OllamaCompanion"]
