"""Shared API helpers for request parsing and cross-cutting concerns."""

from __future__ import annotations

import functools
import hmac
import time
from collections.abc import Callable
from typing import Any, TypeVar, cast

from flask import Response, current_app, g, jsonify, request
from marshmallow import Schema

from faction_api.core.errors import Unauthorized
from faction_api.core.extensions import AUTH_SERVICE_KEY, STORE_KEY
from faction_api.services._shared.errors import MalformedAuthHeader, MissingAuthHeader
from faction_api.services._shared.ports import DocumentStore
from faction_api.services.auth import AuthService, Identity

F = TypeVar("F", bound=Callable[..., Any])

API_KEY_HEADER = "X-API-KEY"


# --------------------------------------------------------------------------- #
# Wiring
# --------------------------------------------------------------------------- #


def get_store() -> DocumentStore:
    """Return the document store bound to the current application."""

    return cast(DocumentStore, current_app.extensions[STORE_KEY])


def get_auth_service() -> AuthService:
    return cast(AuthService, current_app.extensions[AUTH_SERVICE_KEY])


def load_body(schema: Schema) -> dict[str, Any]:
    """Validate the JSON body with ``schema`` (missing bodies load as ``{}``)."""

    return cast(dict[str, Any], schema.load(request.get_json(silent=True) or {}))


# --------------------------------------------------------------------------- #
# Auth middleware
# --------------------------------------------------------------------------- #


def _bearer_credential() -> str:
    header = request.headers.get("Authorization")
    if header is None or not header.strip():
        raise MissingAuthHeader()
    parts = header.split(" ")
    if len(parts) != 2 or not all(parts):
        raise MalformedAuthHeader()
    return parts[1]


def require_auth(func: F) -> F:
    """Verify the bearer access token and expose the identity on ``g``.

    Stateless: the refresh-token ledger is never consulted and expired
    tokens are never renewed here.
    """

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any):
        token = _bearer_credential()
        g.identity = get_auth_service().tokens.verify_access_token(token)
        return func(*args, **kwargs)

    return wrapper  # type: ignore[return-value]


def current_identity() -> Identity:
    """Identity attached by :func:`require_auth`."""

    identity = g.get("identity")
    if identity is None:
        raise MissingAuthHeader()
    return cast(Identity, identity)


def enforce_api_key() -> None:
    """Reject API calls without the configured ``X-API-KEY`` (if any)."""

    expected = current_app.config.get("API_KEY")
    if not expected or request.method == "OPTIONS":
        return
    presented = request.headers.get(API_KEY_HEADER, "")
    if not hmac.compare_digest(presented.encode("utf-8"), str(expected).encode("utf-8")):
        raise Unauthorized("Invalid or missing API key", code="invalid_api_key")


# --------------------------------------------------------------------------- #
# Responses
# --------------------------------------------------------------------------- #


def json_response(payload: Any, *, status: int = 200) -> Response:
    """Return a JSON response enforcing a consistent MIME type."""

    response = jsonify(payload)
    response.status_code = status
    return response


def timing(func: F) -> F:
    """Decorator capturing handler execution time in milliseconds."""

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any):
        start = time.perf_counter()
        try:
            return func(*args, **kwargs)
        finally:
            elapsed_ms = (time.perf_counter() - start) * 1000
            request_endpoint = getattr(request, "endpoint", None)
            current_app.logger.debug(
                "request.elapsed",
                extra={"endpoint": request_endpoint, "elapsed_ms": round(elapsed_ms, 2)},
            )

    return wrapper  # type: ignore[return-value]
