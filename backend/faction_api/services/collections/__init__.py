from __future__ import annotations

from .service import RESERVED_COLLECTIONS, CollectionService, ReservedCollection

__all__ = ["RESERVED_COLLECTIONS", "CollectionService", "ReservedCollection"]
