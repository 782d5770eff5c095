"""JSON logging formatter used by the companion logging setup.

:class:`JsonFormatter` writes one JSON object per record: timestamp, level,
logger name and message. When the message itself is a JSON object (as emitted
by ``log_event``) its keys are hoisted to the top level so stream events are
greppable without double-encoded strings.
"""
from __future__ import annotations

import contextlib
import json
import logging
from datetime import datetime, timezone

ISO = "%Y-%m-%dT%H:%M:%S.%fZ"

# Attributes every LogRecord carries; anything else on a record is an extra.
_RECORD_INTERNALS = frozenset(vars(logging.LogRecord("", logging.INFO, "", 0, "", None, None))) | {"message", "asctime", "taskName"}


class JsonFormatter(logging.Formatter):
    """Lightweight JSON formatter for structured logs.

    Extra attributes attached to the record (``logger.info(..., extra=...)``)
    are merged into the output unless they are private or logging internals.
    """

    def format(self, record: logging.LogRecord) -> str:
        base = {
            "ts": datetime.now(timezone.utc).strftime(ISO),
            "level": record.levelname,
            "logger": record.name,
        }
        msg_text = record.getMessage()
        base["msg"] = msg_text
        with contextlib.suppress(ValueError):
            parsed = json.loads(msg_text)
            if isinstance(parsed, dict):
                base.update(parsed)
                # Stream events are fully represented by the hoisted keys.
                ev = parsed.get("event")
                if isinstance(ev, str) and ev.startswith(("stream.", "cli.")):
                    base.pop("msg", None)
        for k, v in record.__dict__.items():
            if k.startswith("_") or k in _RECORD_INTERNALS:
                continue
            if k not in base:
                base[k] = v
        if record.exc_info:
            base["exc"] = self.formatException(record.exc_info)
        return json.dumps(base, ensure_ascii=False, default=str)


__all__ = ["JsonFormatter", "ISO"]
