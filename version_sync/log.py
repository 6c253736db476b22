"""Debug logging for version-sync.

Every record is an event name plus `extra=` fields, e.g.
    _log.debug("file_write", extra={"path": str(path), "chars": 42})

Off (WARNING) unless VERSION_SYNC_DEBUG=1 or LOG_LEVEL=debug. Output goes to
stderr, as `[DEBUG] file_write path=... chars=42` or, with
VERSION_SYNC_LOG_FORMAT=json, one JSON object per line.
"""

from __future__ import annotations

import json
import logging
import os
import sys
from datetime import datetime, timezone
from typing import Any

_mode: str = ""

# LogRecord internals; everything else on a record came in through `extra=`.
_LOGRECORD_ATTRS = frozenset(
    vars(logging.LogRecord("", 0, "", 0, "", (), None)).keys()
    | {"message", "asctime", "taskName"}
)


def _extra_fields(record: logging.LogRecord) -> dict[str, Any]:
    return {
        key: value
        for key, value in record.__dict__.items()
        if key not in _LOGRECORD_ATTRS
    }


class _JsonFormatter(logging.Formatter):
    """One JSON object per event: ts, level, mode, event, then the extras."""

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "ts": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "mode": _mode,
            "event": record.getMessage(),
        }
        payload.update(_extra_fields(record))
        if record.exc_info and record.exc_info[1] is not None:
            payload["exc"] = self.formatException(record.exc_info)
        return json.dumps(payload, default=str)


class _HumanFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        parts = [f"[{record.levelname}]", record.getMessage()]
        parts.extend(f"{k}={v}" for k, v in _extra_fields(record).items())
        return " ".join(parts)


def configure_logging(*, mode: str = "") -> None:
    """Initialize logging for one invocation. Call once in cli.main()."""
    global _mode  # noqa: PLW0603
    _mode = mode

    debug_mode = (
        os.getenv("VERSION_SYNC_DEBUG", "").strip() in {"1", "true", "yes"}
        or os.getenv("LOG_LEVEL", "").strip().lower() == "debug"
    )
    use_json = os.getenv("VERSION_SYNC_LOG_FORMAT", "").strip().lower() == "json"

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(_JsonFormatter() if use_json else _HumanFormatter())

    logger = logging.getLogger("version_sync")
    logger.setLevel(logging.DEBUG if debug_mode else logging.WARNING)
    logger.handlers.clear()
    logger.addHandler(handler)
    logger.propagate = False


def get_logger(name: str) -> logging.Logger:
    """Get a child logger under the version_sync namespace."""
    if not name.startswith("version_sync"):
        name = f"version_sync.{name}"
    return logging.getLogger(name)
