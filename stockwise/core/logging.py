"""JSON logging for Stockwise.

Every record is one JSON line carrying the active request id. Client contact
details and backend keys are masked in the message and in ``extra`` fields.
"""

from __future__ import annotations

import json
import logging
import re
import sys
import uuid
from collections.abc import Mapping
from contextvars import ContextVar
from datetime import datetime, timezone
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any

_request_id: ContextVar[str] = ContextVar("request_id", default="")


def set_request_id(value: str | None = None) -> str:
    """Bind a request id to the current context, generating one if missing."""
    rid = value or str(uuid.uuid4())
    _request_id.set(rid)
    return rid


def get_request_id() -> str:
    return _request_id.get()


_MASKS = (
    # Backend service keys are JWTs
    (re.compile(r"\beyJhbGciOi[A-Za-z0-9+/=_.-]{20,}"), "eyJ***"),
    (re.compile(r"(?i)\bBearer\s+[A-Za-z0-9._-]{10,}\b"), "Bearer ***"),
    (re.compile(r"\b[A-Za-z0-9._%+-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,}\b"), "***@***"),
    # International phone numbers only; plain amounts stay readable
    (re.compile(r"(?<![\w+])\+\d[\d \-]{7,}\d\b"), "+***"),
)

_MASKED_KEYS = frozenset(
    {
        "authorization",
        "apikey",
        "api_key",
        "service_role_key",
        "token",
        "password",
        "email",
        "phone",
        "whatsapp",
    }
)

# Attributes every LogRecord has; anything else came in through ``extra``
_STANDARD_ATTRS = frozenset(
    vars(logging.LogRecord("", logging.INFO, "", 0, "", (), None))
) | {"message", "asctime"}


def mask(value: Any) -> Any:
    """Mask sensitive keys and patterns in nested log data."""
    if value is None or isinstance(value, (bool, int, float)):
        return value
    if isinstance(value, Mapping):
        return {
            k: "***" if str(k).lower() in _MASKED_KEYS else mask(v) for k, v in value.items()
        }
    if isinstance(value, (list, tuple, set)):
        return [mask(v) for v in value]
    text = str(value)
    for pattern, replacement in _MASKS:
        text = pattern.sub(replacement, text)
    return text


class JsonFormatter(logging.Formatter):
    """Render records as single-line JSON."""

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "ts": datetime.fromtimestamp(record.created, timezone.utc).isoformat(
                timespec="milliseconds"
            ),
            "level": record.levelname,
            "logger": record.name,
            "msg": mask(record.getMessage()),
            "request_id": get_request_id() or None,
        }

        extra = {k: v for k, v in vars(record).items() if k not in _STANDARD_ATTRS}
        if extra:
            payload["extra"] = mask(extra)
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)

        return json.dumps(payload, ensure_ascii=False, default=str)


def setup_logging(level: str = "INFO", file_path: str | None = None) -> None:
    """Send JSON logs to stdout and, if ``file_path`` is set, to a rotating file."""
    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    if file_path:
        Path(file_path).parent.mkdir(parents=True, exist_ok=True)
        handlers.append(
            RotatingFileHandler(file_path, maxBytes=5 * 1024 * 1024, backupCount=5, encoding="utf-8")
        )

    formatter = JsonFormatter()
    for handler in handlers:
        handler.setFormatter(formatter)
    logging.basicConfig(level=level.upper(), handlers=handlers, force=True)

    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
