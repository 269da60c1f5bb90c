"""Unit tests for access/refresh token issuance and verification."""

from __future__ import annotations

import base64
from datetime import timedelta

import jwt
import pytest
from faction_api.core.config import AuthSettings
from faction_api.services._shared.errors import (
    InvalidSignature,
    InvalidToken,
    MalformedToken,
    TokenExpired,
)
from faction_api.services.auth import TokenIssuer
from freezegun import freeze_time

SECRET = "unit-test-secret-key-long-enough-for-hs256"
CLAIMS = {"sub": "alice", "fid": "f1", "rank": 2}


@pytest.fixture()
def issuer() -> TokenIssuer:
    return TokenIssuer(AuthSettings(secret_key=SECRET, bcrypt_rounds=4))


def test_round_trip_returns_claims(issuer):
    identity = issuer.verify_access_token(issuer.issue_access_token(CLAIMS))
    assert identity.username == "alice"
    assert identity.faction_id == "f1"
    assert identity.rank == 2
    assert identity.expires_at - identity.issued_at == 30 * 60


def test_two_tokens_in_same_second_differ(issuer):
    with freeze_time("2025-01-01 12:00:00"):
        assert issuer.issue_access_token(CLAIMS) != issuer.issue_access_token(CLAIMS)


def test_expiry_boundary():
    issuer = TokenIssuer(
        AuthSettings(secret_key=SECRET, access_ttl=timedelta(minutes=30), bcrypt_rounds=4)
    )
    with freeze_time("2025-01-01 12:00:00") as frozen:
        token = issuer.issue_access_token(CLAIMS)

        frozen.tick(timedelta(minutes=29, seconds=59))
        assert issuer.verify_access_token(token).username == "alice"

        frozen.tick(timedelta(seconds=2))
        with pytest.raises(TokenExpired):
            issuer.verify_access_token(token)


def test_token_is_valid_at_exactly_its_expiry():
    issuer = TokenIssuer(
        AuthSettings(secret_key=SECRET, access_ttl=timedelta(minutes=30), bcrypt_rounds=4)
    )
    with freeze_time("2025-01-01 12:00:00") as frozen:
        token = issuer.issue_access_token(CLAIMS)

        frozen.tick(timedelta(minutes=30))
        identity = issuer.verify_access_token(token)
        assert identity.username == "alice"
        assert identity.expires_at == identity.issued_at + 30 * 60

        frozen.tick(timedelta(seconds=1))
        with pytest.raises(TokenExpired):
            issuer.verify_access_token(token)


def test_non_integer_expiry_is_malformed(issuer):
    token = jwt.encode(
        {"sub": "alice", "iat": 1, "exp": "soon", "type": "access"}, SECRET, algorithm="HS256"
    )
    with pytest.raises(MalformedToken):
        issuer.verify_access_token(token)


def test_wrong_secret_is_invalid_signature(issuer):
    other = TokenIssuer(
        AuthSettings(secret_key="another-secret-key-that-is-long-too", bcrypt_rounds=4)
    )
    with pytest.raises(InvalidSignature):
        issuer.verify_access_token(other.issue_access_token(CLAIMS))


def test_tampered_payload_is_invalid_signature(issuer):
    header, _, signature = issuer.issue_access_token(CLAIMS).split(".")
    forged = base64.urlsafe_b64encode(b'{"sub":"mallory","exp":9999999999,"iat":1}')
    token = ".".join([header, forged.decode().rstrip("="), signature])
    with pytest.raises(InvalidSignature):
        issuer.verify_access_token(token)


@pytest.mark.parametrize("token", ["", "not-a-jwt", "a.b", "a.b.c"])
def test_garbage_is_malformed(issuer, token):
    with pytest.raises(MalformedToken):
        issuer.verify_access_token(token)


def test_non_access_type_is_malformed(issuer):
    token = jwt.encode(
        {"sub": "alice", "iat": 1, "exp": 9999999999, "type": "refresh"}, SECRET, algorithm="HS256"
    )
    with pytest.raises(MalformedToken):
        issuer.verify_access_token(token)


def test_missing_subject_is_malformed(issuer):
    token = jwt.encode({"iat": 1, "exp": 9999999999, "type": "access"}, SECRET, algorithm="HS256")
    with pytest.raises(MalformedToken):
        issuer.verify_access_token(token)


def test_all_failures_share_the_invalid_token_base(issuer):
    with pytest.raises(InvalidToken):
        issuer.verify_access_token("garbage")


def test_issuer_claim_is_enforced():
    stamped = TokenIssuer(AuthSettings(secret_key=SECRET, issuer="faction-api", bcrypt_rounds=4))
    plain = TokenIssuer(AuthSettings(secret_key=SECRET, bcrypt_rounds=4))
    assert stamped.verify_access_token(stamped.issue_access_token(CLAIMS)).username == "alice"
    with pytest.raises(MalformedToken):
        stamped.verify_access_token(plain.issue_access_token(CLAIMS))


def test_refresh_tokens_are_opaque_and_high_entropy(issuer):
    first, second = issuer.issue_refresh_token(), issuer.issue_refresh_token()
    assert first != second
    assert "." not in first
    # 48 random bytes -> 64 url-safe characters
    assert len(first) == 64
