"""
Credential store adapter.

Reads and writes user documents and refresh-token ledger records in the
document store. Path construction only; no auth rules live here.

Layout
------
- ``Users/<userId>``: ``{username, passwordHash, factionId, rank, blocked, createdAt}``
- ``RefreshTokens/<username>/<recordKey>``: ``{tokenHash, issuedAt, expiresAt}``
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from faction_api.services._shared.ports import DocumentStore, join_path

USERS_COLLECTION = "Users"
REFRESH_TOKENS_COLLECTION = "RefreshTokens"

log = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class UserRecord:
    """
    Stored user identity.

    :param id: Store key of the user document.
    :param username: Unique, case-sensitive login name.
    :param password_hash: Opaque hasher output.
    :param faction_id: Owning faction.
    :param rank: Rank inside the faction.
    :param blocked: Blocked accounts cannot authenticate.
    :param created_at: Epoch milliseconds.
    """

    id: str
    username: str
    password_hash: str
    faction_id: str
    rank: int = 0
    blocked: bool = False
    created_at: int | None = None

    def to_document(self) -> dict[str, Any]:
        doc: dict[str, Any] = {
            "username": self.username,
            "passwordHash": self.password_hash,
            "factionId": self.faction_id,
            "rank": self.rank,
            "blocked": self.blocked,
        }
        if self.created_at is not None:
            doc["createdAt"] = self.created_at
        return doc

    def to_public(self) -> dict[str, Any]:
        """Client-safe projection (never includes the password hash)."""
        doc = self.to_document()
        doc.pop("passwordHash")
        doc["id"] = self.id
        return doc

    @classmethod
    def from_document(cls, key: str, doc: dict[str, Any]) -> UserRecord:
        return cls(
            id=key,
            username=str(doc.get("username", "")),
            password_hash=str(doc.get("passwordHash", "")),
            faction_id=str(doc.get("factionId", "")),
            rank=int(doc.get("rank", 0) or 0),
            blocked=bool(doc.get("blocked", False)),
            created_at=doc.get("createdAt"),
        )


class UserRepository:
    """User documents under ``Users/``."""

    def __init__(self, store: DocumentStore) -> None:
        self.store = store

    def get_by_username(self, username: str) -> UserRecord | None:
        matches = self.store.query_by_field(USERS_COLLECTION, "username", username)
        if not matches:
            return None
        if len(matches) > 1:
            # Registration race left duplicates behind; the oldest key wins
            log.warning(
                "Duplicate user documents for one username",
                extra={"event": "users.duplicate", "username": username},
            )
        key = sorted(matches)[0]
        return UserRecord.from_document(key, matches[key])

    def list(self) -> list[UserRecord]:
        docs = self.store.get(USERS_COLLECTION) or {}
        if not isinstance(docs, dict):
            return []
        return [
            UserRecord.from_document(key, doc)
            for key, doc in sorted(docs.items())
            if isinstance(doc, dict)
        ]

    def new_id(self) -> str:
        return self.store.generate_unique_key(USERS_COLLECTION)

    def add(self, user: UserRecord) -> str:
        self.store.set(join_path(USERS_COLLECTION, user.id), user.to_document())
        return user.id


class RefreshTokenRepository:
    """Ledger records under ``RefreshTokens/<username>/``."""

    def __init__(self, store: DocumentStore) -> None:
        self.store = store

    def _collection(self, username: str) -> str:
        return join_path(REFRESH_TOKENS_COLLECTION, username)

    def list_for(self, username: str) -> dict[str, Any]:
        records = self.store.get(self._collection(username))
        return records if isinstance(records, dict) else {}

    def add(self, username: str, record: dict[str, Any]) -> str:
        collection = self._collection(username)
        key = self.store.generate_unique_key(collection)
        self.store.set(join_path(collection, key), record)
        return key

    def delete(self, username: str, key: str) -> None:
        self.store.delete(join_path(self._collection(username), key))

    def delete_all(self, username: str) -> None:
        self.store.delete(self._collection(username))
