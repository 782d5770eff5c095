"""companion_stream.config.env
============================

Environment variable mapping for backend credentials.

Only backends that authenticate have an entry in ``ENV_MAP``; Ollama runs
locally without a key. Helpers never raise on unknown backends or unset
variables; callers decide how to proceed.
"""

from __future__ import annotations

import os
from typing import Dict, Optional

# Backend -> env var holding its API key
ENV_MAP: Dict[str, str] = {
    "openai": "OPENAI_API_KEY",
}


def is_placeholder(val: Optional[str]) -> bool:
    """Return True if the provided string looks like a placeholder/test value.

    Heuristics: contains 'placeholder', 'changeme' or 'example', or starts
    with 'test_'. The check is case-insensitive.
    """
    if val is None:
        return False
    v = str(val).strip().lower()
    return (
        "placeholder" in v
        or "changeme" in v
        or "example" in v
        or v.startswith("test_")
    )


def get_env_var_name(backend: str) -> Optional[str]:
    """Return the env var holding ``backend``'s API key, if it has one."""
    return ENV_MAP.get((backend or "").strip().lower())


def get_api_key(backend: str) -> Optional[str]:
    """Return the API key for ``backend`` from the environment.

    Empty values and placeholders are treated as missing.
    """
    name = get_env_var_name(backend)
    if not name:
        return None
    val = os.getenv(name)
    if not val or is_placeholder(val):
        return None
    return val


__all__ = ["ENV_MAP", "is_placeholder", "get_env_var_name", "get_api_key"]
