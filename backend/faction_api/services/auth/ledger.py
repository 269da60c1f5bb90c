# faction_api/services/auth/ledger.py
from __future__ import annotations

import hashlib
import hmac
from datetime import timedelta
from typing import Any

from faction_api.services._shared.base import BaseService
from faction_api.services._shared.ports import DocumentStore
from faction_api.services.credentials import RefreshTokenRepository


def token_digest(raw_token: str) -> str:
    """Deterministic SHA-256 hex digest of a raw refresh token."""
    return hashlib.sha256(raw_token.encode("utf-8")).hexdigest()


def _expires_at(record: Any) -> int | None:
    if not isinstance(record, dict):
        return None
    value = record.get("expiresAt")
    if isinstance(value, bool) or not isinstance(value, int | float):
        return None
    return int(value)


class RefreshTokenLedger(BaseService):
    """
    Server-side trace of issued refresh tokens.

    One record per issued token under ``RefreshTokens/<username>/``; records
    only ever hold the digest. Expired records are evicted lazily by
    :meth:`sweep_expired`, which runs before every validation. There is no
    background reaper.

    Sweeps and lookups are check-then-act: two concurrent refreshes for the
    same user may both sweep the same record, which is harmless, and a
    revocation racing a validation may lose.
    """

    def __init__(self, store: DocumentStore) -> None:
        super().__init__()
        self.records = RefreshTokenRepository(store)

    def store(self, username: str, raw_token: str, ttl: timedelta) -> str:
        """
        Persist the digest of ``raw_token`` next to existing sessions.

        :returns: Key of the new ledger record.
        """
        now = self.now_ms()
        record = {
            "tokenHash": token_digest(raw_token),
            "issuedAt": now,
            "expiresAt": now + int(ttl.total_seconds() * 1000),
        }
        return self.records.add(username, record)

    def sweep_expired(self, username: str) -> int:
        """
        Delete every record whose ``expiresAt`` is past or missing.

        :returns: Number of records evicted.
        """
        now = self.now_ms()
        swept = 0
        for key, record in self.records.list_for(username).items():
            expires_at = _expires_at(record)
            if expires_at is None or expires_at <= now:
                self.records.delete(username, key)
                swept += 1
        if swept:
            self.log.info(
                "Expired refresh tokens swept",
                extra={"event": "ledger.sweep", "username": username, "swept": swept},
            )
        return swept

    def find(self, username: str, raw_token: str) -> str | None:
        """Key of the live record matching ``raw_token`` (no sweep)."""
        wanted = token_digest(raw_token)
        now = self.now_ms()
        for key, record in self.records.list_for(username).items():
            expires_at = _expires_at(record)
            if expires_at is None or expires_at <= now:
                continue
            stored = record.get("tokenHash")
            if isinstance(stored, str) and hmac.compare_digest(stored, wanted):
                return key
        return None

    def validate(self, username: str, raw_token: str) -> bool:
        """
        Sweep, then check ``raw_token`` against the remaining records.

        The matched record is left in place; refresh tokens are reusable
        until they expire or are revoked.
        """
        self.sweep_expired(username)
        return self.find(username, raw_token) is not None

    def revoke(self, username: str, raw_token: str) -> bool:
        """Delete the record for ``raw_token``; ``False`` if none matched."""
        key = self.find(username, raw_token)
        if key is None:
            return False
        self.records.delete(username, key)
        return True

    def revoke_all(self, username: str) -> None:
        self.records.delete_all(username)
