"""Model listing entry returned by a backend's model endpoint."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class ModelInfo:
    """One model a backend can serve.

    ``size`` (bytes) and ``modified_at`` come from Ollama; ``owned_by`` from
    OpenAI-compatible servers. Fields a backend does not report are ``None``.
    """

    name: str
    size: Optional[int] = None
    modified_at: Optional[str] = None
    owned_by: Optional[str] = None

    def describe(self) -> str:
        """Single display line: the name followed by any known details."""
        details = []
        if self.size is not None:
            details.append(f"{self.size / 1e9:.1f} GB")
        if self.owned_by:
            details.append(self.owned_by)
        if self.modified_at:
            details.append(self.modified_at)
        return f"{self.name} ({', '.join(details)})" if details else self.name


__all__ = ["ModelInfo"]
