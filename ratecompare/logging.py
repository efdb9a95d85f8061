"""Logging for the rate comparison service.

Log lines are either plain text or one JSON object per line. Request
and provider-fetch lines carry their structured fields (``event``,
``status``, ``duration_ms``, ``request_id`` and friends) through
``extra``, and the JSON formatter copies every such field into the
rendered object.
"""

from __future__ import annotations

import json
import logging
import time
import uuid
from datetime import UTC, date, datetime
from typing import Any

from flask import Flask, g, has_request_context, request
from werkzeug.exceptions import HTTPException

REQUEST_ID_HEADER = "X-Request-ID"
DEFAULT_LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"

_LOGGING_EXT_KEY = "ratecompare_logging"
_REQUEST_LOGGING_EXT_KEY = "ratecompare_request_logging"

# Anything on a record beyond these attributes arrived through ``extra``.
_STANDARD_RECORD_FIELDS = frozenset(
    logging.LogRecord("", logging.INFO, "", 0, "", (), None).__dict__
) | {"message", "asctime"}


class JSONLogFormatter(logging.Formatter):
    """Render a record as compact JSON, including its ``extra`` fields."""

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        if record.stack_info:
            payload["stack"] = record.stack_info

        for key, value in record.__dict__.items():
            if key in _STANDARD_RECORD_FIELDS or key.startswith("_"):
                continue
            payload[key] = value

        # Decimals, dates and other non-JSON values are rendered with str().
        return json.dumps(payload, default=str, separators=(",", ":"))


def setup_logging(app: Flask) -> None:
    """Route all logging through one root stream handler built from app config."""

    if app.extensions.get(_LOGGING_EXT_KEY):
        return

    level = _level(app.config.get("LOG_LEVEL"))
    handler = logging.StreamHandler()
    handler.setLevel(level)
    if _flag(app.config.get("LOG_JSON_ENABLED")):
        handler.setFormatter(JSONLogFormatter())
    else:
        handler.setFormatter(logging.Formatter(app.config.get("LOG_FORMAT") or DEFAULT_LOG_FORMAT))

    root = logging.getLogger()
    for existing in root.handlers[:]:
        root.removeHandler(existing)
    root.addHandler(handler)
    root.setLevel(level)

    # Flask and werkzeug propagate to the root handler instead of their own.
    logging.getLogger("werkzeug").handlers.clear()
    app.logger.handlers.clear()
    app.logger.setLevel(level)
    app.logger.propagate = True

    app.extensions[_LOGGING_EXT_KEY] = True


def init_request_logging(app: Flask) -> None:
    """Tag each request with an id and log it once, on success or failure."""

    if app.extensions.get(_REQUEST_LOGGING_EXT_KEY):
        return

    @app.before_request
    def _assign_request_id():
        g.request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex
        g.request_started = time.perf_counter()
        g.request_logged = False

    @app.after_request
    def _log_completed(response):
        request_id = getattr(g, "request_id", None)
        if request_id:
            response.headers.setdefault(REQUEST_ID_HEADER, request_id)
        app.logger.info(
            "Request handled",
            extra=_request_fields("request.completed", response.status_code),
        )
        g.request_logged = True
        return response

    @app.teardown_request
    def _log_failure(exc: BaseException | None):
        if exc is None or getattr(g, "request_logged", False):
            return
        status = exc.code if isinstance(exc, HTTPException) and exc.code else 500
        app.logger.error(
            "Request failed",
            extra=_request_fields("request.failed", status, error=str(exc)),
        )
        g.request_logged = True

    app.extensions[_REQUEST_LOGGING_EXT_KEY] = True


def provider_log_extra(
    *,
    provider: str,
    pair: str,
    on: date,
    event: str,
    status: str,
    duration_ms: float | None,
    error: str | None = None,
) -> dict[str, Any]:
    """Fields attached to each provider fetch log line."""

    return _compact(
        {
            "event": event,
            "provider": provider,
            "pair": pair,
            "rate_date": on.isoformat(),
            "status": status,
            "duration_ms": _round_ms(duration_ms),
            "request_id": getattr(g, "request_id", None) if has_request_context() else None,
            "error": error or None,
        }
    )


def _request_fields(event: str, status: int, *, error: str | None = None) -> dict[str, Any]:
    started = getattr(g, "request_started", None)
    elapsed = (time.perf_counter() - started) * 1000 if started is not None else None
    return _compact(
        {
            "event": event,
            "route": request.url_rule.rule if request.url_rule else request.path,
            "method": request.method,
            "path": request.path,
            "status": status,
            "duration_ms": _round_ms(elapsed),
            "request_id": getattr(g, "request_id", None),
            "client_ip": request.remote_addr,
            "error": error,
        }
    )


def _compact(fields: dict[str, Any]) -> dict[str, Any]:
    return {key: value for key, value in fields.items() if value is not None}


def _round_ms(value: float | None) -> float | None:
    return round(value, 3) if value is not None else None


def _level(value: Any) -> int:
    if isinstance(value, int):
        return value
    resolved = logging.getLevelName(str(value or "INFO").upper())
    return resolved if isinstance(resolved, int) else logging.INFO


def _flag(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    return str(value or "").strip().lower() in {"1", "true", "yes", "on"}
