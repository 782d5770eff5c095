"""Structured logging for the companion stream layer.

Every logger handed out by :func:`get_logger` lives under the shared
``companion`` logger. That logger owns exactly one stderr handler (JSON by
default) and does not propagate to the root logger, so embedding
applications keep control of their own logging. ``COMPANION_LOG_LEVEL``
overrides the level.

Stream code does not format messages itself; it emits *events* through
:func:`normalized_log_event`. An event is one JSON object whose key set is
stable across backends:

``event``
    Dotted name, e.g. ``stream.start`` / ``stream.end`` / ``stream.error``.
``structured`` / ``phase`` / ``attempt`` / ``emitted`` / ``tokens``
    Always present (``null`` when unknown).
``error_code``
    Present only for failures.

Turn-wide labels (backend, model, dialect, request id) come from a
:class:`LogContext`; anything else is passed as keyword fields.
"""
from __future__ import annotations

import contextlib
import json
import logging
import os
import sys
from logging.handlers import RotatingFileHandler
from typing import Any, Dict, Mapping, Optional, Union

from .log_support import JsonFormatter, LogContext, new_request_id

BASE_LOGGER_NAME = "companion"
LEVEL_ENV = "COMPANION_LOG_LEVEL"
PLAIN_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"

# Keys every normalized event carries; ``error_code`` only on failures.
EVENT_KEYS = ("structured", "phase", "attempt", "error_code", "emitted", "tokens")

_ROLE_ATTR = "_companion_handler_role"
_READY_ATTR = "_companion_ready"
_FILE_MAX_BYTES = 10 * 1024 * 1024
_FILE_BACKUPS = 5


def _resolve_level(value: Union[int, str, None], default: int) -> int:
    """Map a level name or number to a logging constant, else ``default``."""
    if isinstance(value, int):
        return value
    if not value:
        return default
    name = value.strip().upper()
    if name == "WARN":
        name = "WARNING"
    resolved = logging.getLevelName(name)
    return resolved if isinstance(resolved, int) else default


def _formatter(json_mode: bool) -> logging.Formatter:
    return JsonFormatter() if json_mode else logging.Formatter(PLAIN_FORMAT)


def _handlers(logger: logging.Logger, role: str) -> list[logging.Handler]:
    return [h for h in logger.handlers if getattr(h, _ROLE_ATTR, None) == role]


def _drop(logger: logging.Logger, handler: logging.Handler) -> None:
    logger.removeHandler(handler)
    with contextlib.suppress(Exception):
        handler.close()


def _console(json_mode: bool, level: int) -> logging.Handler:
    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)
    handler.setFormatter(_formatter(json_mode))
    setattr(handler, _ROLE_ATTR, "console")
    return handler


def _base_logger(json_mode: bool = True, level: int = logging.INFO) -> logging.Logger:
    """Return the shared ``companion`` logger, (re)wiring its console handler.

    The console handler is rebuilt whenever ``sys.stderr`` was swapped (for
    example by pytest's ``capsys``) so output always reaches the live stream.
    """
    logger = logging.getLogger(BASE_LOGGER_NAME)
    level = _resolve_level(os.getenv(LEVEL_ENV), level)
    logger.setLevel(level)
    if not getattr(logger, _READY_ATTR, False):
        for handler in _handlers(logger, "console"):
            _drop(logger, handler)
        logger.addHandler(_console(json_mode, level))
        logger.propagate = False
        setattr(logger, _READY_ATTR, True)
        return logger

    consoles = _handlers(logger, "console")
    live = [h for h in consoles if getattr(h, "stream", None) is sys.stderr]
    for handler in consoles:
        if handler not in live:
            _drop(logger, handler)
    if not live:
        logger.addHandler(_console(json_mode, level))
        return logger
    for handler in live:
        handler.setLevel(level)
        if json_mode != isinstance(handler.formatter, JsonFormatter):
            handler.setFormatter(_formatter(json_mode))
    return logger


def get_logger(name: str = BASE_LOGGER_NAME, json_mode: bool = True, level: int = logging.INFO) -> logging.Logger:
    """Return ``companion.<name>`` (or the base logger itself).

    Child loggers carry no handlers or level of their own; records flow to
    the shared handler and are filtered by the base level.
    """
    base = _base_logger(json_mode, level)
    if name == BASE_LOGGER_NAME:
        return base
    if not name.startswith(BASE_LOGGER_NAME + "."):
        name = f"{BASE_LOGGER_NAME}.{name}"
    logger = logging.getLogger(name)
    logger.setLevel(logging.NOTSET)
    logger.propagate = True
    return logger


def configure_logger(
    *,
    level: Union[int, str, None] = None,
    file_path: Optional[str] = None,
    json_mode: bool = True,
) -> logging.Logger:
    """Adjust the shared logger at runtime (used by the CLI).

    Parameters:
        level: New level (name or number) for the logger and its handlers;
            ``None`` keeps the current one.
        file_path: Attach a rotating file handler writing there; ``None``
            removes any file handler attached earlier.
        json_mode: Formatter for the file handler.

    Returns:
        The shared ``companion`` logger.
    """
    logger = _base_logger()
    if level is not None:
        resolved = _resolve_level(level, logger.level)
        logger.setLevel(resolved)
        for handler in logger.handlers:
            handler.setLevel(resolved)

    files = _handlers(logger, "file")
    if file_path is None:
        for handler in files:
            _drop(logger, handler)
        return logger

    target = os.path.abspath(os.path.expanduser(file_path))
    os.makedirs(os.path.dirname(target), exist_ok=True)
    current: Optional[logging.Handler] = None
    for handler in files:
        if getattr(handler, "baseFilename", None) == target:
            current = handler
        else:
            _drop(logger, handler)
    if current is None:
        current = RotatingFileHandler(target, maxBytes=_FILE_MAX_BYTES, backupCount=_FILE_BACKUPS, encoding="utf-8")
        setattr(current, _ROLE_ATTR, "file")
        logger.addHandler(current)
    current.setFormatter(_formatter(json_mode))
    current.setLevel(logger.level)
    return logger


def log_event(
    logger: logging.Logger,
    event: str,
    ctx: LogContext | None = None,
    *,
    level: int = logging.INFO,
    keep_none: bool = False,
    **fields: Any,
) -> None:
    """Log ``event`` as a single JSON object.

    ``None`` fields are dropped unless ``keep_none`` is set.
    """
    if not logger.isEnabledFor(level):
        return
    payload: Dict[str, Any] = {"event": event}
    if ctx is not None:
        payload.update(ctx.to_dict())
    payload.update(fields if keep_none else {k: v for k, v in fields.items() if v is not None})
    logger.log(level, json.dumps(payload, ensure_ascii=False, default=str))


def _tokens_field(tokens: Any) -> Optional[Dict[str, Any]]:
    if tokens is None:
        return None
    if isinstance(tokens, Mapping):
        return dict(tokens)
    return {"value": repr(tokens)}


def normalized_log_event(  # noqa: PLR0913
    logger: logging.Logger,
    event: str,
    ctx: LogContext | None = None,
    *,
    phase: str,
    attempt: int | None = None,
    error_code: str | None = None,
    emitted: bool | int | None = None,
    tokens: Any = None,
    structured: bool = True,
    level: int = logging.INFO,
    **extra_fields: Any,
) -> None:
    """Log ``event`` with the :data:`EVENT_KEYS` schema plus ``extra_fields``.

    ``None`` extras are omitted; schema keys stay present as ``null``.
    """
    fields: Dict[str, Any] = {
        "structured": structured,
        "phase": phase,
        "attempt": attempt,
        "emitted": emitted,
        "tokens": _tokens_field(tokens),
    }
    if error_code is not None:
        fields["error_code"] = error_code
    fields.update({k: v for k, v in extra_fields.items() if v is not None})
    log_event(logger, event, ctx, level=level, keep_none=True, **fields)


__all__ = [
    "BASE_LOGGER_NAME",
    "EVENT_KEYS",
    "LogContext",
    "get_logger",
    "configure_logger",
    "log_event",
    "normalized_log_event",
    "new_request_id",
]
