"""Generic collection proxy over the document store (authenticated)."""

from __future__ import annotations

from flask import Blueprint, request

from faction_api.api.deps import get_store, json_response, require_auth, timing
from faction_api.core.errors import NotFound
from faction_api.services.collections import CollectionService

bp = Blueprint("collections", __name__)

_OK = {"success": True}


def _service() -> CollectionService:
    return CollectionService(get_store())


@bp.get("/<collection>")
@require_auth
@timing
def list_collection(collection: str):
    """Return the whole collection (``{}`` when empty)."""

    return json_response(_service().list(collection) or {})


@bp.post("/<collection>")
@require_auth
@timing
def create_item(collection: str):
    """Append the JSON body under a fresh push key."""

    key = _service().create(collection, request.get_json(silent=True))
    return json_response({"id": key}, status=201)


@bp.get("/<collection>/<key>")
@require_auth
@timing
def get_item(collection: str, key: str):
    value = _service().get(collection, key)
    if value is None:
        raise NotFound(f"'{collection}/{key}' not found")
    return json_response(value)


@bp.put("/<collection>/<key>")
@require_auth
@timing
def replace_item(collection: str, key: str):
    _service().replace(collection, key, request.get_json(silent=True))
    return json_response(_OK)


@bp.patch("/<collection>/<key>")
@require_auth
@timing
def merge_item(collection: str, key: str):
    _service().merge(collection, key, request.get_json(silent=True))
    return json_response(_OK)


@bp.delete("/<collection>/<key>")
@require_auth
@timing
def delete_item(collection: str, key: str):
    _service().delete(collection, key)
    return json_response(_OK)
