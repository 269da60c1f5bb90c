"""Unit tests for the bcrypt password hasher."""

from __future__ import annotations

import pytest
from faction_api.services._shared.errors import HashFormatError, ValidationError
from faction_api.services.auth import PasswordHasher


@pytest.fixture()
def hasher() -> PasswordHasher:
    return PasswordHasher(rounds=4)


def test_hash_embeds_cost_and_verifies(hasher):
    digest = hasher.hash("Secret1!")
    assert digest.startswith("$2b$04$")
    assert hasher.verify("Secret1!", digest) is True


def test_hash_is_salted(hasher):
    assert hasher.hash("Secret1!") != hasher.hash("Secret1!")


def test_verify_mismatch_returns_false(hasher):
    digest = hasher.hash("Secret1!")
    assert hasher.verify("wrong", digest) is False


def test_verify_accepts_hash_from_other_cost(hasher):
    digest = PasswordHasher(rounds=5).hash("Secret1!")
    assert hasher.verify("Secret1!", digest) is True


@pytest.mark.parametrize("digest", ["", "plain-text", "$2b$04$tooshort", "$argon2id$v=19$x"])
def test_verify_rejects_malformed_digest(hasher, digest):
    with pytest.raises(HashFormatError):
        hasher.verify("Secret1!", digest)


def test_hash_rejects_passwords_over_72_bytes(hasher):
    with pytest.raises(ValidationError):
        hasher.hash("é" * 37)  # 74 bytes


def test_verify_never_matches_overlong_password(hasher):
    digest = hasher.hash("a" * 72)
    assert hasher.verify("a" * 73, digest) is False
