"""Structured JSON logging correlated with traces and the package being indexed."""

from __future__ import annotations

from datetime import datetime, timezone
import logging
from pathlib import Path
import sys
from typing import IO, Any

import orjson

from docs_type_search.observability.context import get_trace_context


# Attributes every LogRecord carries; anything else arrived through ``extra=``
_RECORD_ATTRIBUTES = frozenset(
    logging.LogRecord("", logging.INFO, "", 0, "", (), None).__dict__.keys() | {"message", "asctime", "taskName"}
)

PLAIN_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def _clip(text: str, limit: int) -> str:
    return text if len(text) <= limit else text[:limit] + "..."


def _json_fallback(value: Any) -> Any:
    if isinstance(value, (set, frozenset)):
        try:
            return sorted(value)
        except TypeError:
            return list(value)
    if isinstance(value, (Path, Exception)):
        return str(value)
    if isinstance(value, (bytes, bytearray)):
        return value.decode("utf-8", errors="replace")
    return repr(value)


class JsonFormatter(logging.Formatter):
    """Render each record as one JSON object.

    Signatures and doc comments can be long, so the message and every string
    passed through ``extra=`` are clipped.
    """

    max_message_length = 2000
    max_field_length = 500

    def format(self, record: logging.LogRecord) -> str:
        ctx = get_trace_context()
        payload: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": _clip(record.getMessage(), self.max_message_length),
            "trace_id": ctx.get("trace_id", ""),
            "span_id": ctx.get("span_id", ""),
        }
        if "package" in ctx:
            payload["package"] = ctx["package"]
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        payload.update(self.extra_fields(record))
        return orjson.dumps(payload, default=_json_fallback).decode("utf-8")

    def extra_fields(self, record: logging.LogRecord) -> dict[str, Any]:
        fields: dict[str, Any] = {}
        for key, value in vars(record).items():
            if key in _RECORD_ATTRIBUTES or key.startswith("_"):
                continue
            fields[key] = _clip(value, self.max_field_length) if isinstance(value, str) else value
        return fields


def configure_logging(
    level: str = "INFO",
    json_output: bool = True,
    *,
    logger_levels: dict[str, str] | None = None,
    stream: IO[str] | None = None,
) -> None:
    """Replace the root handlers with a single stderr handler.

    Args:
        level: Root level name; unknown names fall back to INFO
        json_output: Use :class:`JsonFormatter` instead of the plain text format
        logger_levels: Per-logger overrides, e.g. ``{"docs_type_search.search.parser": "debug"}``
        stream: Destination, stderr by default so stdout stays free for results
    """
    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setFormatter(JsonFormatter() if json_output else logging.Formatter(PLAIN_FORMAT))
    root = logging.getLogger()
    root.handlers[:] = [handler]
    root.setLevel(_level(level))

    for name, override in (logger_levels or {}).items():
        logging.getLogger(name).setLevel(_level(override))


def _level(name: str) -> int:
    value = logging.getLevelName(name.upper())
    return value if isinstance(value, int) else logging.INFO
