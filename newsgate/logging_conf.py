"""Logging configuration for the proxy service and the smoke runner.

JSON-line output suitable for CI/CD and hosted log drains. Verbosity is a
level, never a code path: detailed forwarding traces go out at DEBUG.
The level comes from `LOG_LEVEL` (see `newsgate.config.resolve_log_level`);
calling setup_logging() again re-levels the existing handler instead of
adding another one.
"""
from __future__ import annotations

import json
import logging
import sys
from datetime import UTC, datetime
from logging import Handler, LogRecord
from typing import Any

# LogRecord attributes that are plumbing, not structured context.
_RESERVED = frozenset(
    {
        "name",
        "msg",
        "args",
        "levelname",
        "levelno",
        "pathname",
        "filename",
        "module",
        "exc_info",
        "exc_text",
        "stack_info",
        "lineno",
        "funcName",
        "created",
        "msecs",
        "relativeCreated",
        "thread",
        "threadName",
        "processName",
        "process",
        "taskName",
    }
)

_UVICORN_LOGGERS = ("uvicorn", "uvicorn.error", "uvicorn.access")


class JsonFormatter(logging.Formatter):
    """One JSON object per line.

    Core keys are `ts`, `level`, `logger` and `message`; anything passed via
    `extra={...}` is merged in without overwriting them.
    """

    def format(self, record: LogRecord) -> str:  # type: ignore[override]
        payload: dict[str, Any] = {
            "ts": datetime.fromtimestamp(record.created, UTC).isoformat(timespec="milliseconds"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for key, value in record.__dict__.items():
            if key in _RESERVED or key.startswith("_") or key in payload:
                continue
            payload[key] = value

        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)

        return json.dumps(payload, ensure_ascii=False, default=str)


class _JsonHandler(logging.StreamHandler):
    """Marker type so setup_logging() can find the handler it installed."""


def _normalize_level(level: str | int) -> int:
    if isinstance(level, str):
        return logging.getLevelNamesMapping().get(level.upper(), logging.INFO)
    return level


def _installed_handler(root: logging.Logger) -> Handler | None:
    for handler in root.handlers:
        if isinstance(handler, _JsonHandler):
            return handler
    return None


def setup_logging(level: str | int = "INFO") -> None:
    """Route root and uvicorn loggers through the JSON handler at `level`."""
    root = logging.getLogger()
    level = _normalize_level(level)

    handler = _installed_handler(root)
    if handler is None:
        handler = _JsonHandler(stream=sys.stdout)
        handler.setFormatter(JsonFormatter())
        root.addHandler(handler)
    handler.setLevel(level)
    root.setLevel(level)

    for name in _UVICORN_LOGGERS:
        lg = logging.getLogger(name)
        lg.setLevel(level)
        lg.propagate = True
        for h in list(lg.handlers):
            lg.removeHandler(h)


def get_logger(name: str | None = None) -> logging.Logger:
    """Return a logger under the `newsgate` namespace (or the bare name for `runner`)."""
    if not name:
        return logging.getLogger("newsgate")
    if name == "newsgate" or name.startswith(("newsgate.", "runner")):
        return logging.getLogger(name)
    return logging.getLogger(f"newsgate.{name}")
