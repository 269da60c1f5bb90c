"""API route blueprints mounted under ``API_BASE_PREFIX``."""

from __future__ import annotations

from flask import Blueprint

# Import blueprints *only here* to keep imports localized and avoid cycles.
from .auth import bp as auth_bp  # noqa: E402
from .collections import bp as collections_bp  # noqa: E402
from .faction import bp as faction_bp  # noqa: E402
from .health import bp as health_bp  # noqa: E402
from .users import bp as users_bp  # noqa: E402

# Each tuple: (blueprint, url_prefix_relative_to_api_root)
REGISTRY: list[tuple[Blueprint, str]] = [
    (health_bp, ""),  # -> /api/health
    (auth_bp, ""),  # -> /api/login, /api/refresh, /api/logout
    (users_bp, "/users"),
    (faction_bp, ""),
    (collections_bp, ""),  # -> /api/<collection>[/<key>]
]
