"""Flask CLI commands for seeding the document store."""

from __future__ import annotations

import logging

import click
from flask import current_app
from flask.cli import AppGroup

from faction_api.core.extensions import AUTH_SERVICE_KEY
from faction_api.services._shared.errors import ServiceError
from faction_api.services.auth import AuthService, RegisterIn

LOGGER = logging.getLogger(__name__)


def _configure_logging(verbose: bool) -> None:
    """Raise logging verbosity for seed and auth modules when requested."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.getLogger("faction_api.services.auth").setLevel(level)
    LOGGER.setLevel(level)


@click.group("seed", cls=AppGroup)
@click.option("--verbose", is_flag=True, help="Enable verbose logging for seeding.")
def seed_cli(verbose: bool) -> None:
    """Collection of document store seeding commands."""
    _configure_logging(verbose)


@seed_cli.command("admin")
@click.option("--username", required=True, help="Login name of the account.")
@click.option(
    "--password",
    prompt=True,
    hide_input=True,
    confirmation_prompt=True,
    help="Account password (prompted when omitted).",
)
@click.option("--faction-id", "faction_id", required=True, help="Owning faction id.")
@click.option("--rank", type=int, default=0, show_default=True, help="Rank in the faction.")
def admin_command(username: str, password: str, faction_id: str, rank: int) -> None:
    """Register an account directly against the configured store."""
    service: AuthService = current_app.extensions[AUTH_SERVICE_KEY]
    try:
        user_id = service.register(
            RegisterIn(username=username, password=password, faction_id=faction_id, rank=rank)
        )
    except ServiceError as exc:
        raise click.ClickException(exc.message) from exc
    LOGGER.info("Seeded account", extra={"event": "seed.admin", "username": username})
    click.echo(f"Created user '{username}' with id {user_id}")
