"""Unified configuration layer for backends.

Goals
-----
* Centralize defaults (models, endpoint URLs, buffer size, timeout).
* Merge sources in a predictable order (later wins):
    1. Built-in defaults
    2. Optional external config file (JSON or YAML) pointed to by
       COMPANION_CONFIG_FILE, or passed explicitly
    3. Environment variables (e.g. OLLAMA_MODEL, OPENAI_API_KEY)
    4. In-code overrides passed to the helper
* Provide a single call site for the raw mapping,
  ``get_backend_config(backend)``, and one for the validated model,
  ``load_config(backend)``.
* Keep zero hard dependency on PyYAML (load YAML only if available).

Environment Variable Conventions
--------------------------------
<BACKEND>_MODEL, <BACKEND>_API_KEY, <BACKEND>_BASE_URL, <BACKEND>_CHAT_URL,
<BACKEND>_GENERATE_URL, <BACKEND>_MODELS_URL, <BACKEND>_HTTP_TIMEOUT, <BACKEND>_BUFFER_SIZE,
<BACKEND>_SYSTEM_PROMPT, <BACKEND>_MAX_MESSAGES
e.g. OLLAMA_MODEL, OPENAI_BASE_URL.

External Config File (Optional)
-------------------------------
JSON is tried first; if that fails and PyYAML is installed, YAML. Each
backend has its own section and a shared ``terminal`` section applies to all:

```
ollama:
  model: llama3.2
  buffer_size: 2048
openai:
  model: gpt-4o-mini
  http_timeout: 30
terminal:
  color: cyan
```
"""
from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any, Dict, Optional

from pydantic import ValidationError

from ..base.errors import ConfigError, UnknownBackendError
from .defaults import (
    OLLAMA_DEFAULT_BASE_URL,
    OLLAMA_DEFAULT_MODEL,
    OPENAI_DEFAULT_BASE_URL,
    OPENAI_DEFAULT_MODEL,
    SUPPORTED_BACKENDS,
)
from .env import get_api_key, is_placeholder
from .settings import CompanionConfig, TerminalConfig

try:  # Optional YAML support
    import yaml  # type: ignore
except ImportError:  # pragma: no cover
    yaml = None  # type: ignore


# -------------------- Defaults --------------------

DEFAULTS: Dict[str, Dict[str, Any]] = {
    "ollama": {"model": OLLAMA_DEFAULT_MODEL, "base_url": OLLAMA_DEFAULT_BASE_URL},
    "openai": {"model": OPENAI_DEFAULT_MODEL, "base_url": OPENAI_DEFAULT_BASE_URL},
}


ENV_FIELD_MAP = {
    "model": "MODEL",
    "api_key": "API_KEY",  # pragma: allowlist secret - env suffix name, not a secret
    "base_url": "BASE_URL",
    "chat_url": "CHAT_URL",
    "generate_url": "GENERATE_URL",
    "models_url": "MODELS_URL",
    "http_timeout": "HTTP_TIMEOUT",
    "buffer_size": "BUFFER_SIZE",
    "system_prompt": "SYSTEM_PROMPT",
    "max_messages": "MAX_MESSAGES",
}

CONFIG_FILE_ENV = "COMPANION_CONFIG_FILE"

_FILE_CACHE: Dict[str, Dict[str, Any]] = {}
_DOTENV_LOADED = False


def _parse_dotenv(path: str) -> Dict[str, str]:
    """Return the ``KEY=VALUE`` pairs of a dotenv file.

    Blank lines, comments and lines without ``=`` are skipped; an ``export``
    prefix and matching surrounding quotes are removed.
    """
    pairs: Dict[str, str] = {}
    for raw in Path(path).read_text(encoding="utf-8").splitlines():
        entry = raw.strip()
        if entry.startswith("export "):
            entry = entry[len("export ") :].lstrip()
        key, sep, value = entry.partition("=")
        key, value = key.strip(), value.strip()
        if not sep or not key or key.startswith("#"):
            continue
        if len(value) >= 2 and value[0] == value[-1] and value[0] in "\"'":
            value = value[1:-1]
        pairs[key] = value
    return pairs


def _load_dotenv_once() -> None:
    """Apply ``DOTENV_FILE`` (default ``.env``) to the environment once.

    Real environment values win; a value that looks like a placeholder is
    replaced.
    """
    global _DOTENV_LOADED
    if _DOTENV_LOADED:
        return
    _DOTENV_LOADED = True
    path = os.getenv("DOTENV_FILE", ".env")
    if not os.path.isfile(path):
        return
    for key, value in _parse_dotenv(path).items():
        current = os.environ.get(key)
        if current is None or is_placeholder(current):
            os.environ[key] = value


def _load_external_config(path: Optional[str] = None) -> Dict[str, Any]:
    """Load and cache the external config file.

    A file that is named explicitly but missing or unparsable raises
    ``ConfigError``; one named through the environment but absent is ignored.
    """
    explicit = path is not None
    path = path or os.getenv(CONFIG_FILE_ENV)
    if not path:
        return {}
    if path in _FILE_CACHE:
        return _FILE_CACHE[path]
    p = Path(path).expanduser()
    if not p.exists():
        if explicit:
            raise ConfigError(f"config file not found: {p}")
        return {}
    text = p.read_text(encoding="utf-8")
    try:
        data = json.loads(text)
    except ValueError as json_exc:
        if yaml is None:
            raise ConfigError(f"config file {p} is not valid JSON: {json_exc}") from json_exc
        try:
            data = yaml.safe_load(text) or {}
        except yaml.YAMLError as yaml_exc:
            raise ConfigError(f"config file {p} is neither JSON nor YAML: {yaml_exc}") from yaml_exc
    if not isinstance(data, dict):
        raise ConfigError(f"config file {p} must contain a mapping at the top level")
    _FILE_CACHE[path] = data
    return data


def _env_overrides(backend: str) -> Dict[str, Any]:
    out: Dict[str, Any] = {}
    prefix = backend.upper()
    for field, suffix in ENV_FIELD_MAP.items():
        val = os.getenv(f"{prefix}_{suffix}")
        if not val or (field == "api_key" and is_placeholder(val)):
            continue
        out[field] = val
    return out


def _normalize_backend(backend: str) -> str:
    name = (backend or "").lower().strip()
    if name not in SUPPORTED_BACKENDS:
        raise UnknownBackendError(name, SUPPORTED_BACKENDS)
    return name


def get_backend_config(
    backend: str,
    overrides: Optional[Dict[str, Any]] = None,
    *,
    path: Optional[str] = None,
) -> Dict[str, Any]:
    """Return the merged (unvalidated) configuration mapping for a backend.

    Merge order (later wins): defaults -> external config -> env vars -> overrides.
    A ``terminal`` mapping from the file's shared section and from overrides
    is merged key by key.

    Raises:
        UnknownBackendError: when ``backend`` is not supported.
        ConfigError: when an explicitly named config file cannot be read.
    """
    _load_dotenv_once()
    name = _normalize_backend(backend)
    file_data = _load_external_config(path)
    cfg: Dict[str, Any] = {"backend": name}

    # 1. Defaults
    cfg |= DEFAULTS.get(name, {})

    # 2. External config file section
    terminal: Dict[str, Any] = {}
    shared_terminal = file_data.get("terminal")
    if isinstance(shared_terminal, dict):
        terminal |= shared_terminal
    file_cfg = file_data.get(name)
    if isinstance(file_cfg, dict):
        section = dict(file_cfg)
        if isinstance(section.get("terminal"), dict):
            terminal |= section.pop("terminal")
        cfg |= section

    # 3. Env overrides
    cfg |= _env_overrides(name)
    if is_placeholder(cfg.get("api_key")):
        del cfg["api_key"]
    if not cfg.get("api_key"):
        if key := get_api_key(name):
            cfg["api_key"] = key

    # 4. Explicit overrides arg
    if overrides:
        extra = {k: v for k, v in overrides.items() if v is not None}
        if isinstance(extra.get("terminal"), dict):
            terminal |= extra.pop("terminal")
        cfg |= extra

    if terminal:
        cfg["terminal"] = terminal
    return cfg


def load_config(backend: str, path: Optional[str] = None, **overrides: Any) -> CompanionConfig:
    """Return the validated :class:`CompanionConfig` for ``backend``.

    Raises:
        ConfigError: when the merged configuration fails validation.
    """
    cfg = get_backend_config(backend, overrides, path=path)
    try:
        return CompanionConfig.model_validate(cfg)
    except ValidationError as exc:
        problems = "; ".join(
            f"{'.'.join(str(p) for p in err['loc']) or 'config'}: {err['msg']}" for err in exc.errors()
        )
        raise ConfigError(f"invalid {cfg['backend']} configuration: {problems}") from exc


def get_model(backend: str) -> Optional[str]:
    return get_backend_config(backend).get("model")


def reset_config_cache() -> None:
    """Forget cached config files and allow ``.env`` to be re-read (tests)."""
    global _DOTENV_LOADED
    _FILE_CACHE.clear()
    _DOTENV_LOADED = False


__all__ = [
    "CompanionConfig",
    "TerminalConfig",
    "ConfigError",
    "DEFAULTS",
    "get_backend_config",
    "load_config",
    "get_model",
    "reset_config_cache",
]
