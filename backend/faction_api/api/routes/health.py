"""Health check endpoint."""

from __future__ import annotations

from flask import Blueprint, current_app

from faction_api.api.deps import get_store, json_response, timing
from faction_api.services._shared.errors import DependencyError

bp = Blueprint("health", __name__)


@bp.get("/health")
@timing
def healthcheck():
    """Return application and document store health information."""

    store_status = "ok"
    try:
        get_store().ping()
    except DependencyError:
        current_app.logger.exception("healthcheck.store_error")
        store_status = "fail"
    version = current_app.config.get("APP_VERSION", "dev")
    payload = {"status": "ok", "store": store_status, "version": version}
    return json_response(payload, status=200 if store_status == "ok" else 503)
