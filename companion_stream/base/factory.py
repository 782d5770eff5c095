"""Companion factory utilities.

Purpose
-------
Create the backend implementation matching a validated
:class:`CompanionConfig`. Backend modules are imported lazily with
``importlib`` so importing the base package never pulls in every backend.

Failure semantics
-----------------
No retries or fallbacks: the factory either returns an instance or raises
:class:`UnknownBackendError` with an actionable message.
"""

from __future__ import annotations

from importlib import import_module
from typing import Any, Dict, Tuple, Type

from ..config import CompanionConfig
from .errors import UnknownBackendError
from .interfaces import Companion


class CompanionFactory:
    """Create companions based on a canonical backend name."""

    # Map canonical backend names to import paths and class names
    _BACKENDS: Dict[str, Dict[str, str]] = {
        "ollama": {"module": "companion_stream.ollama.client", "class": "OllamaCompanion"},
        "openai": {"module": "companion_stream.openai.client", "class": "OpenAICompanion"},
    }

    @classmethod
    def create(cls, config: CompanionConfig, **kwargs: Any) -> Companion:
        """Instantiate the companion for ``config.backend``.

        ``kwargs`` are forwarded to the constructor (e.g. ``transport`` for
        tests).

        Raises
        ------
        UnknownBackendError
            If the backend is not registered or its class cannot be found.
        """
        name = (config.backend or "").lower().strip()
        entry = cls._BACKENDS.get(name)
        if not entry:
            raise UnknownBackendError(name, cls.supported())

        mod = import_module(entry["module"])
        try:
            klass: Type = getattr(mod, entry["class"])
        except AttributeError as exc:
            raise UnknownBackendError(name, cls.supported()) from exc
        return klass(config, **kwargs)

    @classmethod
    def supported(cls) -> Tuple[str, ...]:
        """Return the supported backend names in deterministic order."""
        return tuple(cls._BACKENDS.keys())


def create_companion(config: CompanionConfig, **kwargs: Any) -> Companion:
    """Shorthand for :meth:`CompanionFactory.create`."""
    return CompanionFactory.create(config, **kwargs)


__all__ = ["CompanionFactory", "create_companion"]
