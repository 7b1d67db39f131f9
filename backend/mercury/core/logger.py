"""Structured logging for the auth service.

Every record leaves the process as one JSON object on stdout carrying the
request correlation id. Credentials never reach the output: extras named in
:data:`REDACTED_KEYS` are masked before formatting.
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any
from uuid import uuid4

from flask import Flask, Response, g, has_request_context, request

REQUEST_ID_HEADER = "X-Request-ID"
CORRELATION_HEADERS = (REQUEST_ID_HEADER, "X-Correlation-ID")

#: ``extra={...}`` attributes promoted to top-level JSON fields
EXTRA_KEYS = ("endpoint", "elapsed_ms", "jti", "user_name", "error_code")

#: ``extra={...}`` attributes that must never be written verbatim
REDACTED_KEYS = ("password", "token", "secret")
REDACTED = "***"


class JSONFormatter(logging.Formatter):
    """Render log records as single-line JSON objects.

    Parameters
    ----------
    service: str
        Value of the ``service`` field, used to tell processes apart once
        their logs are aggregated.
    """

    def __init__(self, service: str = "mercury-auth") -> None:
        super().__init__()
        self.service = service

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "time": datetime.fromtimestamp(record.created, timezone.utc).isoformat(
                timespec="milliseconds"
            ),
            "level": record.levelname,
            "service": self.service,
            "logger": record.name,
            "message": record.getMessage(),
            "request_id": getattr(record, "request_id", None),
        }
        payload.update(
            {key: getattr(record, key) for key in EXTRA_KEYS if hasattr(record, key)}
        )
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload, default=str)


class RequestIdFilter(logging.Filter):
    """Stamp ``request_id`` on records (``None`` outside a request)."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.request_id = ensure_request_id() if has_request_context() else None
        return True


class RedactingFilter(logging.Filter):
    """Mask credential-bearing extras before any handler sees them."""

    def filter(self, record: logging.LogRecord) -> bool:
        for key in REDACTED_KEYS:
            if hasattr(record, key):
                setattr(record, key, REDACTED)
        return True


def ensure_request_id() -> str:
    """Return the correlation id of the current request.

    The first call within a request adopts ``X-Request-ID`` or
    ``X-Correlation-ID`` when the client sent one, otherwise mints a UUID4,
    and caches the result on :data:`flask.g`. Outside a request a fresh UUID4
    is returned on every call.
    """
    if not has_request_context():
        return str(uuid4())
    cached = getattr(g, "request_id", None)
    if cached:
        return cached
    incoming = next(
        (request.headers[h] for h in CORRELATION_HEADERS if request.headers.get(h)), None
    )
    g.request_id = incoming or str(uuid4())
    return g.request_id


def configure_logging(level: str | int = "INFO", *, service: str = "mercury-auth") -> None:
    """Route the root logger to stdout through :class:`JSONFormatter`.

    Existing root handlers are replaced, so calling this twice does not
    duplicate output.

    Parameters
    ----------
    level: str | int
        Logging level name (case-insensitive) or number.
    service: str
        Service name stamped on every line.
    """
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(JSONFormatter(service=service))
    handler.addFilter(RequestIdFilter())
    handler.addFilter(RedactingFilter())

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(level.upper() if isinstance(level, str) else level)


def init_app(app: Flask) -> None:
    """Seed the request id for every request and echo it on the response."""

    app.logger.addFilter(RequestIdFilter())

    @app.before_request
    def _seed_request_id() -> None:
        ensure_request_id()

    @app.after_request
    def _echo_request_id(response: Response) -> Response:
        response.headers.setdefault(REQUEST_ID_HEADER, ensure_request_id())
        return response


__all__ = [
    "JSONFormatter",
    "RedactingFilter",
    "RequestIdFilter",
    "configure_logging",
    "ensure_request_id",
    "init_app",
]
