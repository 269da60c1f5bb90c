"""Authentication endpoints using the service layer."""

from __future__ import annotations

from flask import Blueprint, current_app

from faction_api.api.deps import (
    current_identity,
    get_auth_service,
    json_response,
    load_body,
    require_auth,
    timing,
)
from faction_api.api.schemas import LoginSchema, LogoutSchema, RefreshSchema
from faction_api.core.extensions import limiter
from faction_api.services.auth import LoginIn, LogoutIn, RefreshIn

bp = Blueprint("auth", __name__)

login_schema = LoginSchema()
refresh_schema = RefreshSchema()
logout_schema = LogoutSchema()


def _auth_rate_limit() -> str:
    return str(current_app.config.get("AUTH_RATE_LIMIT", "10 per minute"))


@bp.post("/login")
@limiter.limit(_auth_rate_limit)
@timing
def login():
    """Verify credentials and return an access/refresh token pair."""

    data = load_body(login_schema)
    pair = get_auth_service().login(LoginIn(username=data["username"], password=data["password"]))
    return json_response({"accessToken": pair.access_token, "refreshToken": pair.refresh_token})


@bp.post("/refresh")
@limiter.limit(_auth_rate_limit)
@timing
def refresh():
    """Exchange a live refresh token for a new access token."""

    data = load_body(refresh_schema)
    out = get_auth_service().refresh(
        RefreshIn(username=data["username"], refresh_token=data["refresh_token"])
    )
    return json_response({"accessToken": out.access_token})


@bp.post("/logout")
@require_auth
@timing
def logout():
    """Revoke the presented refresh token, or all sessions of the caller."""

    data = load_body(logout_schema)
    revoked = get_auth_service().logout(
        LogoutIn(
            username=current_identity().username,
            refresh_token=data["refresh_token"],
            all_sessions=data["all_sessions"],
        )
    )
    return json_response({"success": True, "revoked": revoked})
