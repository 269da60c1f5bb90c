"""
faction_api.services._shared.ports
==================================

*Ports* (hexagonal interfaces) decoupling the service layer from storage.

Modules
-------
- :mod:`document_store`:
    Defines :class:`~.DocumentStore`, the hierarchical key-value store the
    whole application persists into, plus path helpers.

Concrete adapters (in-memory, Redis) live under ``faction_api.infra.store``.
"""

from __future__ import annotations

from .document_store import DocumentStore, check_key, join_path, split_path

__all__ = ["DocumentStore", "check_key", "join_path", "split_path"]
