"""
Pydantic models for validated runtime configuration.

Purpose
-------
The layered loader in ``companion_stream.config`` produces a plain mapping;
this module validates it into :class:`CompanionConfig` before any request is
sent. Validation either succeeds or raises ``pydantic.ValidationError``, which
``load_config`` converts into ``ConfigError``.

Rules
-----
- ``backend`` must be a supported backend.
- ``chat_url`` / ``generate_url`` / ``models_url`` default to the backend's ``base_url`` plus
  its well-known path, and must start with ``http://`` or ``https://``.
- ``http_timeout``, ``buffer_size`` and ``max_messages`` must be positive.
- ``openai`` requires an ``api_key``.
- Unknown terminal colour names fall back to ``bright_magenta``.
"""

from __future__ import annotations

from typing import Literal, Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from .defaults import (
    BACKEND_PATHS,
    DEFAULT_BUFFER_SIZE,
    DEFAULT_HTTP_TIMEOUT,
    DEFAULT_MAX_INPUT_LENGTH,
    DEFAULT_MAX_MESSAGES,
    DEFAULT_SYSTEM_PROMPT,
    DEFAULT_TERM_COLOR,
    FALLBACK_TERM_COLOR,
    TERM_COLORS,
)

Backend = Literal["ollama", "openai"]


class TerminalConfig(BaseModel):
    """Terminal presentation settings, passed explicitly to renderers.

    Attributes:
        output: Print streamed deltas as they arrive.
        color: Colour name for assistant text (see ``TERM_COLORS``).
        debug: Show the waiting indicator's diagnostics and full errors.
        trace: Log every decoded frame at DEBUG.
    """

    output: bool = True
    color: str = DEFAULT_TERM_COLOR
    debug: bool = False
    trace: bool = False

    @field_validator("color", mode="before")
    @classmethod
    def _known_color(cls, value: object) -> str:
        name = str(value or DEFAULT_TERM_COLOR).strip().lower().replace("-", "_").replace(" ", "_")
        return name if name in TERM_COLORS else FALLBACK_TERM_COLOR

    @property
    def ansi(self) -> str:
        return TERM_COLORS[self.color]


class CompanionConfig(BaseModel):
    """Validated configuration for one backend conversation."""

    backend: Backend
    model: str = Field(min_length=1)
    base_url: Optional[str] = None
    chat_url: Optional[str] = None
    generate_url: Optional[str] = None
    models_url: Optional[str] = None
    api_key: Optional[str] = None
    http_timeout: float = Field(default=DEFAULT_HTTP_TIMEOUT, gt=0)
    buffer_size: int = Field(default=DEFAULT_BUFFER_SIZE, gt=0)
    system_prompt: str = DEFAULT_SYSTEM_PROMPT
    max_messages: int = Field(default=DEFAULT_MAX_MESSAGES, ge=1)
    max_input_length: int = Field(default=DEFAULT_MAX_INPUT_LENGTH, ge=1)
    terminal: TerminalConfig = Field(default_factory=TerminalConfig)

    @model_validator(mode="after")
    def _resolve_urls(self) -> "CompanionConfig":
        """Fill missing endpoint URLs and enforce the URL scheme.

        Raises:
            ValueError: If no URL can be derived or a URL has a wrong scheme.
        """
        base = (self.base_url or "").rstrip("/")
        names = ("chat_url", "generate_url", "models_url")
        for name, path in zip(names, BACKEND_PATHS[self.backend]):
            if not getattr(self, name) and base:
                setattr(self, name, base + path)
        for name in names:
            url = getattr(self, name)
            if not url:
                raise ValueError(f"{name} is required (set it or base_url)")
            if not url.startswith(("http://", "https://")):
                raise ValueError(f"{name} must start with http:// or https://")
        return self

    @model_validator(mode="after")
    def _require_api_key(self) -> "CompanionConfig":
        if self.backend == "openai" and not (self.api_key or "").strip():
            raise ValueError("api_key is required for the openai backend")
        return self


__all__ = ["Backend", "TerminalConfig", "CompanionConfig"]
