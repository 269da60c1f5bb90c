# faction_api/services/collections/service.py
from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from faction_api.services._shared.base import BaseService
from faction_api.services._shared.errors import ValidationError
from faction_api.services._shared.ports import DocumentStore, check_key, join_path
from faction_api.services.credentials import REFRESH_TOKENS_COLLECTION, USERS_COLLECTION

RESERVED_COLLECTIONS = frozenset(
    name.lower() for name in (USERS_COLLECTION, REFRESH_TOKENS_COLLECTION)
)


class ReservedCollection(ValidationError):
    default_message = "Collection is not accessible"


class CollectionService(BaseService):
    """
    Trusted pass-through from ``/api/<collection>`` to store sub-trees.

    The auth layer only gates access; collection contents are not
    interpreted. Credential collections are never reachable from here.
    """

    def __init__(self, store: DocumentStore) -> None:
        super().__init__()
        self.store = store

    def _collection(self, name: str) -> str:
        name = check_key(name)
        if name.lower() in RESERVED_COLLECTIONS:
            raise ReservedCollection()
        return name

    def list(self, collection: str) -> Any:
        return self.store.get(self._collection(collection))

    def get(self, collection: str, key: str) -> Any:
        return self.store.get(join_path(self._collection(collection), check_key(key)))

    def create(self, collection: str, value: Any) -> str:
        """Append ``value`` under a fresh push key and return the key."""
        if value is None:
            raise ValidationError("Request body is required")
        name = self._collection(collection)
        key = self.store.generate_unique_key(name)
        self.store.set(join_path(name, key), value)
        return key

    def replace(self, collection: str, key: str, value: Any) -> None:
        if value is None:
            raise ValidationError("Request body is required")
        self.store.set(join_path(self._collection(collection), check_key(key)), value)

    def merge(self, collection: str, key: str, partial: Mapping[str, Any]) -> None:
        if not isinstance(partial, Mapping) or not partial:
            raise ValidationError("Request body must be a non-empty object")
        self.store.update(join_path(self._collection(collection), check_key(key)), partial)

    def delete(self, collection: str, key: str) -> None:
        self.store.delete(join_path(self._collection(collection), check_key(key)))
