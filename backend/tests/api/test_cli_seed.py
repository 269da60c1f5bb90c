"""``flask seed admin`` registers accounts through the auth service."""

from __future__ import annotations

from faction_api.services.auth import LoginIn

ARGS = ["seed", "admin", "--username", "boss", "--password", "Secret1!", "--faction-id", "f1"]


def test_seed_admin_creates_a_usable_account(app) -> None:
    result = app.test_cli_runner().invoke(args=[*ARGS, "--rank", "9"])
    assert result.exit_code == 0, result.output
    assert "Created user 'boss'" in result.output

    service = app.extensions["auth_service"]
    user = service.users.get_by_username("boss")
    assert user is not None
    assert user.rank == 9
    assert service.login(LoginIn(username="boss", password="Secret1!")).access_token


def test_seed_admin_duplicate_fails_cleanly(app) -> None:
    runner = app.test_cli_runner()
    assert runner.invoke(args=ARGS).exit_code == 0

    result = runner.invoke(args=ARGS)
    assert result.exit_code == 1
    assert "Username already exists" in result.output
