# faction_api/services/_shared/base.py
from __future__ import annotations

import logging
import time

from faction_api.core import errors as api_errors
from faction_api.services._shared.errors import (
    AuthenticationError,
    ConflictError,
    DependencyError,
    ServiceError,
    ValidationError,
)


class BaseService:
    """
    Base class for application services.

    Responsibilities
    ----------------
    * Provide the clock used for expiry arithmetic.
    * Give each service a module-scoped logger.
    * Keep services thin, orchestration-only, no web leakage.
    """

    def __init__(self) -> None:
        self.log = logging.getLogger(type(self).__module__)

    # ------------------------------ Clock ------------------------------------

    @staticmethod
    def now_ms() -> int:
        """Current time as epoch milliseconds (the store's timestamp unit)."""
        return int(time.time() * 1000)


def translate_exception(exc: ServiceError, *, debug: bool = False) -> api_errors.APIError:
    """
    Map domain/service-level errors to API-level (HTTP) errors.

    :param exc: Exception raised within the service layer.
    :param debug: Expose dependency diagnostics (non-production only).
    :returns: Translated exception ready to be rendered.
    """
    if isinstance(exc, AuthenticationError):
        # → 401, one stable code per failure class
        return api_errors.Unauthorized(exc.message, code=_auth_code(exc))

    if isinstance(exc, ConflictError):
        # → 400; duplicate usernames are reported as a bad request
        return api_errors.APIError(exc.message, status_code=400, code="conflict")

    if isinstance(exc, ValidationError):
        return api_errors.APIError(exc.message, status_code=400, code="validation_error")

    if isinstance(exc, DependencyError):
        details = None
        if debug:
            cause = exc.__cause__
            details = {
                "operation": exc.operation,
                "cause": f"{type(cause).__name__}: {cause}" if cause else None,
            }
        return api_errors.APIError(
            exc.message, status_code=500, code="dependency_error", details=details
        )

    # Any other ServiceError → 500 without leaking internals
    return api_errors.APIError("Unexpected error", status_code=500, code="internal_server_error")


def _auth_code(exc: AuthenticationError) -> str:
    """Snake-case code derived from the concrete authentication error class."""
    name = type(exc).__name__
    out = []
    for i, ch in enumerate(name):
        if ch.isupper() and i:
            out.append("_")
        out.append(ch.lower())
    return "".join(out)
