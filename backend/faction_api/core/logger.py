"""JSON logging for the API, correlated by request id and caller."""

from __future__ import annotations

import json
import logging
import re
import sys
from datetime import UTC, datetime
from typing import Any
from uuid import uuid4

from flask import Flask, g, has_request_context, request

REQUEST_ID_HEADER = "X-Request-ID"
# Client-supplied ids are echoed into logs and headers, so keep them inert
_REQUEST_ID_RE = re.compile(r"^[A-Za-z0-9._:-]{1,64}$")

# ``extra=`` keys copied onto the JSON payload when present
EXTRA_KEYS = ("event", "username", "swept", "endpoint", "elapsed_ms", "status")


class JSONFormatter(logging.Formatter):
    """
    One JSON object per record.

    Inside a request the payload also carries the HTTP method, path and the
    authenticated subject (``user``) when the bearer guard has run.
    """

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "time": datetime.now(UTC).isoformat(timespec="milliseconds"),
            "level": record.levelname,
            "name": record.name,
            "message": record.getMessage(),
            "request_id": getattr(record, "request_id", None),
        }
        if has_request_context():
            payload["method"] = request.method
            payload["path"] = request.path
            identity = g.get("identity")
            if identity is not None:
                payload["user"] = identity.username
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        for key in EXTRA_KEYS:
            if hasattr(record, key):
                payload[key] = getattr(record, key)
        return json.dumps(payload, default=str)


class RequestIdFilter(logging.Filter):
    def filter(self, record: logging.LogRecord) -> bool:
        record.request_id = ensure_request_id() if has_request_context() else None
        return True


def ensure_request_id() -> str:
    """
    Return the id of the current request, assigning one on first use.

    A well-formed ``X-Request-ID`` from the client is adopted; anything else
    is replaced by a fresh hex id.
    """
    if not has_request_context():
        return uuid4().hex
    request_id = g.get("request_id")
    if request_id is None:
        incoming = request.headers.get(REQUEST_ID_HEADER, "")
        request_id = incoming if _REQUEST_ID_RE.match(incoming) else uuid4().hex
        g.request_id = request_id
    return request_id


def configure_logging(level: str | int = "INFO") -> None:
    """Send every record to stdout as JSON at ``level``."""
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(JSONFormatter())
    handler.addFilter(RequestIdFilter())
    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(level.upper() if isinstance(level, str) else level)


def init_app(app: Flask) -> None:
    """Assign request ids up front and echo them on every response."""
    app.logger.addFilter(RequestIdFilter())

    @app.before_request
    def _seed_request_id() -> None:
        ensure_request_id()

    @app.after_request
    def _inject_response_header(response):
        response.headers[REQUEST_ID_HEADER] = ensure_request_id()
        return response


__all__ = ["configure_logging", "ensure_request_id", "init_app", "JSONFormatter"]
