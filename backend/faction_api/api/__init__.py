"""API blueprint package aggregating the faction endpoints."""

from __future__ import annotations

from collections.abc import Iterable

from flask import Blueprint, Flask, request


def register_blueprint_group(
    app: Flask,
    *,
    base_prefix: str,
    entries: Iterable[tuple[Blueprint, str]],
) -> None:
    """Register related blueprints beneath a common prefix.

    Parameters
    ----------
    app:
        Application instance receiving the blueprints.
    base_prefix:
        Prefix applied to all entries, typically ``"/api"``.
    entries:
        Iterable of ``(blueprint, relative_prefix)`` pairs where
        ``relative_prefix`` is appended to ``base_prefix``.

    Notes
    -----
    Empty relative prefixes mount a blueprint at the API root. Order
    matters only for readability: static rules always win over the generic
    ``/<collection>`` rules.
    """

    for bp, rel_prefix in entries:
        full_prefix = "/".join(
            segment for segment in [base_prefix.rstrip("/"), rel_prefix.strip("/")] if segment
        )
        full_prefix = "/" + full_prefix if not full_prefix.startswith("/") else full_prefix
        app.register_blueprint(bp, url_prefix=full_prefix)


def init_app(app: Flask) -> None:
    """Register the API blueprints and the client API-key gate."""

    api_base = app.config.get("API_BASE_PREFIX", "/api")

    from faction_api.api.deps import enforce_api_key
    from faction_api.api.routes import REGISTRY

    register_blueprint_group(app, base_prefix=api_base, entries=REGISTRY)

    @app.before_request
    def _api_key_gate() -> None:
        if request.path.startswith(api_base):
            enforce_api_key()


__all__ = ["init_app", "register_blueprint_group"]
