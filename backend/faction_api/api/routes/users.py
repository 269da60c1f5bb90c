"""User registration and lookup endpoints."""

from __future__ import annotations

from flask import Blueprint

from faction_api.api.deps import get_auth_service, json_response, load_body, require_auth, timing
from faction_api.api.schemas import RegisterSchema
from faction_api.core.errors import NotFound
from faction_api.services.auth import RegisterIn

bp = Blueprint("users", __name__)

register_schema = RegisterSchema()


@bp.post("")
@timing
def register():
    """Register a user and return its id."""

    data = load_body(register_schema)
    user_id = get_auth_service().register(
        RegisterIn(
            username=data["username"],
            password=data["password"],
            faction_id=data["faction_id"],
            rank=data["rank"],
        )
    )
    return json_response({"id": user_id}, status=201)


@bp.get("")
@require_auth
@timing
def list_users():
    users = get_auth_service().users.list()
    return json_response([user.to_public() for user in users])


@bp.get("/<username>")
@require_auth
@timing
def get_user(username: str):
    user = get_auth_service().users.get_by_username(username)
    if user is None:
        raise NotFound(f"User '{username}' not found")
    return json_response(user.to_public())
