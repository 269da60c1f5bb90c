"""Global Flask extension instances and initialization helpers."""

from __future__ import annotations

import logging

import redis  # type: ignore[import-untyped]
from flask import Flask
from flask_limiter import Limiter
from flask_limiter.util import get_remote_address
from redis.exceptions import RedisError  # type: ignore[import-untyped]

from faction_api.core.config import AuthSettings
from faction_api.infra.store import InMemoryDocumentStore, RedisDocumentStore
from faction_api.services._shared.ports import DocumentStore
from faction_api.services.auth import AuthService

log = logging.getLogger(__name__)

# Global singletons (import-safe)
limiter = Limiter(key_func=get_remote_address)

STORE_KEY = "document_store"
AUTH_SERVICE_KEY = "auth_service"


def build_store(app: Flask) -> DocumentStore:
    """Return the document store selected by ``REDIS_URL``.

    Parameters
    ----------
    app: flask.Flask
        Application whose ``REDIS_URL`` and ``STORE_NAMESPACE`` are consulted.
        Without ``REDIS_URL`` an in-process store is used (tests, local runs).

    Raises
    ------
    RuntimeError
        If Redis is configured but unreachable at startup.
    """
    redis_url = app.config.get("REDIS_URL")
    if not redis_url:
        log.info("Using in-memory document store")
        return InMemoryDocumentStore()

    client = redis.Redis.from_url(redis_url, decode_responses=True)
    try:
        client.ping()
    except RedisError as exc:
        raise RuntimeError(f"Failed to connect to Redis at {redis_url!r}") from exc
    return RedisDocumentStore(client, namespace=app.config.get("STORE_NAMESPACE", "faction"))


def init_app(app: Flask, store: DocumentStore | None = None) -> None:
    """Build auth settings, the store and services, and bind Flask-Limiter.

    Parameters
    ----------
    app: flask.Flask
        Application receiving the instances in ``app.extensions``.
    store: DocumentStore, optional
        Pre-built store (tests inject one); built from config otherwise.

    Raises
    ------
    faction_api.core.config.MissingSecretError
        If ``JWT_SECRET_KEY`` is unset or blank.
    """
    # Fail fast before touching any backend
    settings = AuthSettings.from_config(app.config)

    if store is None:
        store = build_store(app)

    app.extensions[STORE_KEY] = store
    app.extensions[AUTH_SERVICE_KEY] = AuthService(store, settings)

    limiter.init_app(app)
