"""The bearer-token gate in front of every non-auth route."""

from __future__ import annotations

from datetime import timedelta

import jwt
import pytest
from faction_api.core.config import AuthSettings, TestingConfig
from faction_api.services.auth import TokenIssuer
from freezegun import freeze_time

PROTECTED = "/api/membrifactiune"


def test_missing_header(client) -> None:
    resp = client.get(PROTECTED)
    assert resp.status_code == 401
    body = resp.get_json()
    assert body["code"] == "missing_auth_header"
    assert body["error"]


@pytest.mark.parametrize("header", ["Bearer", "Bearer a b", "Bearer  token", " Bearer"])
def test_malformed_header(client, header) -> None:
    resp = client.get(PROTECTED, headers={"Authorization": header})
    assert resp.status_code == 401
    assert resp.get_json()["code"] == "malformed_auth_header"


def test_expired_token(client, user) -> None:
    issuer = TokenIssuer(AuthSettings(secret_key=TestingConfig.JWT_SECRET_KEY, bcrypt_rounds=4))
    with freeze_time("2025-01-01 00:00:00") as frozen:
        token = issuer.issue_access_token({"sub": user["username"], "fid": "f1", "rank": 0})
        frozen.tick(timedelta(minutes=31))
        resp = client.get(PROTECTED, headers={"Authorization": f"Bearer {token}"})
    assert resp.status_code == 401
    assert resp.get_json()["code"] == "token_expired"


def test_token_signed_with_other_secret(client) -> None:
    token = jwt.encode(
        {"sub": "alice", "iat": 1, "exp": 9999999999, "type": "access"},
        "some-other-secret-of-reasonable-length",
        algorithm="HS256",
    )
    resp = client.get(PROTECTED, headers={"Authorization": f"Bearer {token}"})
    assert resp.status_code == 401
    assert resp.get_json()["code"] == "invalid_signature"


def test_garbage_token(client) -> None:
    resp = client.get(PROTECTED, headers={"Authorization": "Bearer not.a.jwt"})
    assert resp.status_code == 401
    assert resp.get_json()["code"] == "malformed_token"


def test_valid_token_passes_and_never_touches_ledger(client, auth_header, store, user) -> None:
    store.delete(f"RefreshTokens/{user['username']}")
    resp = client.get(PROTECTED, headers=auth_header)
    assert resp.status_code == 200


@pytest.mark.parametrize(
    ("method", "path"),
    [
        ("get", "/api/users"),
        ("get", "/api/users/alice"),
        ("get", "/api/members"),
        ("get", "/api/codes/ABC"),
        ("post", "/api/members/1/rank"),
        ("get", "/api/stats"),
        ("get", "/api/stats/version"),
        ("get", "/api/anything"),
        ("post", "/api/anything"),
        ("delete", "/api/anything/key"),
    ],
)
def test_every_data_route_requires_auth(client, method, path) -> None:
    resp = getattr(client, method)(path, json={})
    assert resp.status_code == 401


def test_health_is_public(client) -> None:
    assert client.get("/api/health").status_code == 200
