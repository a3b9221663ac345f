"""Structured logging for the relay.

Every record leaves the process as one JSON line carrying the request id of
the HTTP request that produced it. Credentials and LLM payloads (prompts,
completions) are masked before any handler sees them.
"""

from __future__ import annotations

import json
import logging
import sys
from contextvars import ContextVar
from datetime import datetime, timezone
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any, Iterable, Mapping

from app.core.config import LogSettings, settings

REDACTED = "[REDACTED]"

SENSITIVE_KEYS_DEFAULT: frozenset[str] = frozenset(
    {
        "api_key",
        "llm_api_key",
        "x-api-key",
        "authorization",
        "cookie",
        "set-cookie",
        "password",
        "secret",
        "token",
        "base_url",
        "prompt",
        "system_prompt",
        "completion",
    }
)

# openai and its transport log whole request bodies at DEBUG
_CHATTY_LOGGERS = ("openai", "httpx", "httpcore")

# Attributes every LogRecord has; anything else was passed through ``extra``
_RECORD_ATTRS = frozenset(vars(logging.makeLogRecord({}))) | {"message", "asctime", "taskName"}

_current_request_id: ContextVar[str | None] = ContextVar("request_id", default=None)


def set_request_id(request_id: str | None) -> None:
    _current_request_id.set(request_id)


def get_request_id() -> str | None:
    return _current_request_id.get()


def clear_request_id() -> None:
    _current_request_id.set(None)


def redact(value: Any, keys: frozenset[str]) -> Any:
    """Mask values stored under sensitive keys, descending into containers."""
    if isinstance(value, Mapping):
        return {k: REDACTED if str(k).lower() in keys else redact(v, keys) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return type(value)(redact(item, keys) for item in value)
    return value


def record_extras(record: logging.LogRecord, keys: frozenset[str]) -> dict[str, Any]:
    """Return the ``extra`` fields attached to a record, already masked."""
    extras = {
        name: value
        for name, value in vars(record).items()
        if name not in _RECORD_ATTRS and not name.startswith("_")
    }
    return redact(extras, keys)


class RequestIdFilter(logging.Filter):
    """Stamp records with the id of the request being served, if any."""

    def filter(self, record: logging.LogRecord) -> bool:
        if getattr(record, "request_id", None) is None:
            request_id = get_request_id()
            if request_id:
                record.request_id = request_id
        return True


class SensitiveDataFilter(logging.Filter):
    """Mask sensitive extras in place so every formatter sees clean values."""

    def __init__(self, sensitive_keys: Iterable[str] | None = None) -> None:
        super().__init__()
        self.keys = frozenset(k.lower() for k in (sensitive_keys or SENSITIVE_KEYS_DEFAULT))

    def filter(self, record: logging.LogRecord) -> bool:
        for name, value in record_extras(record, self.keys).items():
            setattr(record, name, value)
        return True


class JsonFormatter(logging.Formatter):
    """Render a record as a single JSON object per line."""

    def __init__(
        self,
        *,
        sensitive_keys: Iterable[str] | None = None,
        ensure_ascii: bool = False,
    ) -> None:
        super().__init__()
        self.keys = frozenset(k.lower() for k in (sensitive_keys or SENSITIVE_KEYS_DEFAULT))
        self.ensure_ascii = ensure_ascii

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname.lower(),
            "logger": record.name,
            "message": record.getMessage(),
        }
        request_id = getattr(record, "request_id", None) or get_request_id()
        if request_id:
            payload["request_id"] = request_id
        payload.update(record_extras(record, self.keys))
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload, default=str, ensure_ascii=self.ensure_ascii)


def _make_handler(cfg: LogSettings) -> logging.Handler:
    if cfg.output.lower() != "file":
        return logging.StreamHandler(sys.stdout)

    path = Path(cfg.file_path or "logs/app.log")
    path.parent.mkdir(parents=True, exist_ok=True)
    if not cfg.max_bytes:
        return logging.FileHandler(path, encoding="utf-8")
    return RotatingFileHandler(
        path,
        maxBytes=cfg.max_bytes,
        backupCount=cfg.backup_count,
        encoding="utf-8",
    )


def configure_logging(log_settings: LogSettings | None = None, *, debug: bool = False) -> None:
    """Install a single root handler built from ``LOG_*`` settings.

    Args:
        log_settings: Settings to use; the process-wide settings when omitted.
        debug: Log at DEBUG whatever level is configured.
    """
    cfg = log_settings or settings.log
    level = logging.DEBUG if debug else logging.getLevelName(cfg.level.upper())
    if not isinstance(level, int):
        level = logging.INFO

    handler = _make_handler(cfg)
    handler.addFilter(RequestIdFilter())
    handler.addFilter(SensitiveDataFilter())
    if cfg.format.lower() == "plain":
        handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s %(message)s"))
    else:
        handler.setFormatter(JsonFormatter())

    root = logging.getLogger()
    root.handlers[:] = [handler]
    root.setLevel(level)

    for name in _CHATTY_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))
    for name in ("uvicorn", "uvicorn.access"):
        logging.getLogger(name).propagate = False
