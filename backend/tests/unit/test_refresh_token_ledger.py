"""
Unit tests for RefreshTokenLedger over the in-memory document store.

Flows covered:
- store + validate
- multiple concurrent sessions per user
- sweep of expired and malformed records
- revoke / revoke_all
"""

from __future__ import annotations

from datetime import timedelta

import pytest
from faction_api.infra.store import InMemoryDocumentStore
from faction_api.services.auth import RefreshTokenLedger
from faction_api.services.auth.ledger import token_digest
from freezegun import freeze_time

TTL = timedelta(days=30)


@pytest.fixture()
def store() -> InMemoryDocumentStore:
    return InMemoryDocumentStore()


@pytest.fixture()
def ledger(store) -> RefreshTokenLedger:
    return RefreshTokenLedger(store)


def _records(store, username="alice") -> dict:
    return store.get(f"RefreshTokens/{username}") or {}


def test_store_then_validate(ledger, store):
    ledger.store("alice", "raw-token-1", TTL)
    assert ledger.validate("alice", "raw-token-1") is True

    (record,) = _records(store).values()
    assert record["tokenHash"] == token_digest("raw-token-1")
    assert "raw-token-1" not in str(record)
    assert record["expiresAt"] - record["issuedAt"] == int(TTL.total_seconds() * 1000)


def test_validate_unknown_token_is_false(ledger):
    ledger.store("alice", "raw-token-1", TTL)
    assert ledger.validate("alice", "other") is False
    assert ledger.validate("bob", "raw-token-1") is False


def test_sessions_are_appended_not_overwritten(ledger, store):
    ledger.store("alice", "phone", TTL)
    ledger.store("alice", "laptop", TTL)
    assert len(_records(store)) == 2
    assert ledger.validate("alice", "phone") is True
    assert ledger.validate("alice", "laptop") is True


def test_validate_does_not_consume_token(ledger):
    ledger.store("alice", "raw", TTL)
    assert ledger.validate("alice", "raw") is True
    assert ledger.validate("alice", "raw") is True


def test_expired_token_fails_and_is_swept(ledger, store):
    with freeze_time("2025-01-01 00:00:00") as frozen:
        ledger.store("alice", "short", timedelta(days=1))
        ledger.store("alice", "long", timedelta(days=10))

        frozen.tick(timedelta(days=2))
        assert ledger.validate("alice", "short") is False

        remaining = _records(store)
        assert len(remaining) == 1
        assert next(iter(remaining.values()))["tokenHash"] == token_digest("long")


def test_sweep_removes_records_without_expiry(ledger, store):
    ledger.store("alice", "good", TTL)
    store.set("RefreshTokens/alice/legacy", {"tokenHash": token_digest("legacy")})
    store.set("RefreshTokens/alice/broken", {"tokenHash": "x", "expiresAt": "soon"})

    assert ledger.sweep_expired("alice") == 2
    assert len(_records(store)) == 1


def test_sweep_of_unknown_user_is_noop(ledger):
    assert ledger.sweep_expired("nobody") == 0


def test_revoke_single_session(ledger, store):
    ledger.store("alice", "phone", TTL)
    ledger.store("alice", "laptop", TTL)

    assert ledger.revoke("alice", "phone") is True
    assert ledger.revoke("alice", "phone") is False
    assert ledger.validate("alice", "phone") is False
    assert ledger.validate("alice", "laptop") is True


def test_revoke_all(ledger, store):
    ledger.store("alice", "phone", TTL)
    ledger.store("alice", "laptop", TTL)
    ledger.store("bob", "desk", TTL)

    ledger.revoke_all("alice")
    assert _records(store) == {}
    assert ledger.validate("bob", "desk") is True
