"""Concrete :class:`~faction_api.services._shared.ports.DocumentStore` adapters."""

from __future__ import annotations

from .keys import PushKeyGenerator
from .memory import InMemoryDocumentStore
from .redis_store import RedisDocumentStore

__all__ = ["InMemoryDocumentStore", "PushKeyGenerator", "RedisDocumentStore"]
