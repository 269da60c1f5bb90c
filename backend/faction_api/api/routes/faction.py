"""Faction endpoints: members, leave requests, recruitment codes, stats."""

from __future__ import annotations

from flask import Blueprint

from faction_api.api.deps import get_store, json_response, load_body, require_auth, timing
from faction_api.api.schemas import CodeSchema, LeaveRequestSchema, RankSchema
from faction_api.services.faction import FactionService

bp = Blueprint("faction", __name__)

rank_schema = RankSchema()
code_schema = CodeSchema()
leave_schema = LeaveRequestSchema()

_OK = {"success": True}


def _service() -> FactionService:
    return FactionService(get_store())


# ------------------------------ Members ------------------------------------


@bp.get("/members")
@require_auth
@timing
def list_members():
    return json_response(_service().members())


@bp.get("/players")
@require_auth
@timing
def list_players():
    return json_response(_service().players())


@bp.post("/members/<member_id>/rank")
@require_auth
@timing
def change_rank(member_id: str):
    """Set the rank of one faction member."""

    data = load_body(rank_schema)
    _service().set_member_rank(member_id, data["rank"])
    return json_response(_OK)


# --------------------------- Leave requests --------------------------------


@bp.post("/leave-requests")
@require_auth
@timing
def file_leave_request():
    data = load_body(leave_schema)
    _service().file_leave_request(data["discord_id"], data["start_date"], data["end_date"])
    return json_response(_OK)


@bp.get("/leave-requests/<discord_id>")
@require_auth
@timing
def get_leave_request(discord_id: str):
    return json_response(_service().leave_request(discord_id))


# ---------------------------- Recruitment ----------------------------------


@bp.post("/codes")
@require_auth
@timing
def add_code():
    data = load_body(code_schema)
    _service().add_code(data["code"])
    return json_response(_OK)


@bp.get("/codes/<code>")
@require_auth
@timing
def code_exists(code: str):
    """Report whether a recruitment code is registered."""

    return json_response({"exists": _service().code_exists(code)})


@bp.delete("/codes/<code>")
@require_auth
@timing
def remove_code(code: str):
    _service().remove_code(code)
    return json_response(_OK)


# ------------------------------- Stats -------------------------------------


@bp.get("/stats")
@require_auth
@timing
def stats():
    return json_response(_service().stats())


@bp.get("/stats/version")
@require_auth
@timing
def version():
    return json_response(_service().version())
