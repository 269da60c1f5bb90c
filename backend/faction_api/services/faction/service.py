# faction_api/services/faction/service.py
from __future__ import annotations

from typing import Any

from faction_api.services._shared.base import BaseService
from faction_api.services._shared.errors import ValidationError
from faction_api.services._shared.ports import DocumentStore, check_key, join_path

# Store node names used by the game client
MEMBERS_COLLECTION = "membrifactiune"
PLAYERS_COLLECTION = "jucatoriacc"
LEAVE_REQUESTS_COLLECTION = "invoire"
CODES_COLLECTION = "Codes"
STATS_NODE = "stuff"
VERSION_FIELD = "Version"


class FactionService(BaseService):
    """Faction-scoped shortcuts over well-known store nodes."""

    def __init__(self, store: DocumentStore) -> None:
        super().__init__()
        self.store = store

    # ------------------------------------------------------------------ #
    # Members / players
    # ------------------------------------------------------------------ #

    def members(self) -> Any:
        return self.store.get(MEMBERS_COLLECTION)

    def players(self) -> Any:
        return self.store.get(PLAYERS_COLLECTION)

    def set_member_rank(self, member_id: str, rank: int) -> None:
        self.store.set(join_path(MEMBERS_COLLECTION, check_key(member_id), "rank"), rank)
        self.log.info("Member rank changed", extra={"event": "faction.rank"})

    # ------------------------------------------------------------------ #
    # Leave requests
    # ------------------------------------------------------------------ #

    def file_leave_request(self, discord_id: str, start_date: str, end_date: str) -> None:
        """Store (or overwrite) the single leave request of a member."""
        self.store.set(
            join_path(LEAVE_REQUESTS_COLLECTION, check_key(discord_id)),
            {"Id": discord_id, "StartDate": start_date, "EndDate": end_date},
        )

    def leave_request(self, discord_id: str) -> Any:
        return self.store.get(join_path(LEAVE_REQUESTS_COLLECTION, check_key(discord_id)))

    # ------------------------------------------------------------------ #
    # Recruitment codes
    # ------------------------------------------------------------------ #

    def add_code(self, code: str) -> None:
        if not code:
            raise ValidationError("code is required")
        self.store.set(join_path(CODES_COLLECTION, check_key(code)), {"Code": code})

    def code_exists(self, code: str) -> bool:
        return self.store.get(join_path(CODES_COLLECTION, check_key(code))) is not None

    def remove_code(self, code: str) -> None:
        self.store.delete(join_path(CODES_COLLECTION, check_key(code)))

    # ------------------------------------------------------------------ #
    # Stats
    # ------------------------------------------------------------------ #

    def stats(self) -> dict[str, Any]:
        value = self.store.get(STATS_NODE)
        return value if isinstance(value, dict) else {}

    def version(self) -> Any:
        return self.store.get(join_path(STATS_NODE, VERSION_FIELD))
