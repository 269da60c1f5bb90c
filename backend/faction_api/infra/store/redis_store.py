# comments in English; reST docstrings
from __future__ import annotations

import json
from collections.abc import Iterator, Mapping
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Any

import redis  # type: ignore[import-untyped]
from redis.exceptions import RedisError  # type: ignore[import-untyped]

from faction_api.infra.store.keys import PushKeyGenerator
from faction_api.services._shared.errors import DependencyError
from faction_api.services._shared.ports import DocumentStore, check_key, split_path


@contextmanager
def _guard(operation: str) -> Iterator[None]:
    """Surface backend failures as :class:`DependencyError` (no retry)."""
    try:
        yield
    except RedisError as exc:
        raise DependencyError(operation=operation) from exc


def _s(value: bytes | str) -> str:
    return value.decode() if isinstance(value, bytes | bytearray) else str(value)


@dataclass(slots=True)
class RedisDocumentStore(DocumentStore):
    """
    Redis-backed document tree.

    The tree is flattened into two key families under ``namespace``:

    - ``<ns>:v:<path>``: JSON-encoded scalar stored at a leaf.
    - ``<ns>:c:<path>``: set of child segment names of an inner node
      (``<ns>:c:`` is the root).

    Each write runs in one MULTI/EXEC pipeline. Reads of a subtree walk the
    child sets and are not isolated from concurrent writers.

    :param r: A Redis client (already connected).
    :param namespace: Key prefix isolating this tree.
    """

    r: redis.Redis
    namespace: str = "faction"
    _keys: PushKeyGenerator = field(default_factory=PushKeyGenerator)

    # -------------------- helpers --------------------

    def _kv(self, segments: list[str]) -> str:
        return f"{self.namespace}:v:{'/'.join(segments)}"

    def _kc(self, segments: list[str]) -> str:
        return f"{self.namespace}:c:{'/'.join(segments)}"

    def _read(self, segments: list[str]) -> Any | None:
        raw = self.r.get(self._kv(segments))
        if raw is not None:
            return json.loads(_s(raw))
        children = sorted(_s(c) for c in self.r.smembers(self._kc(segments)))
        if not children:
            return None
        out: dict[str, Any] = {}
        for child in children:
            value = self._read(segments + [child])
            if value is not None:
                out[child] = value
        return out or None

    def _subtree_keys(self, segments: list[str]) -> list[str]:
        keys = [self._kv(segments), self._kc(segments)]
        for child in self.r.smembers(self._kc(segments)):
            keys.extend(self._subtree_keys(segments + [_s(child)]))
        return keys

    def _flatten(
        self, segments: list[str], value: Any, leaves: dict[str, str], edges: list[tuple[str, str]]
    ) -> None:
        if isinstance(value, list):
            value = {str(i): v for i, v in enumerate(value)}
        if isinstance(value, Mapping):
            for key, child in value.items():
                key = check_key(key)
                if child is None or child == {} or child == []:
                    continue
                edges.append((self._kc(segments), key))
                self._flatten(segments + [key], child, leaves, edges)
            return
        leaves[self._kv(segments)] = json.dumps(value)

    def _prune_ancestors(self, segments: list[str]) -> None:
        # Detach emptied nodes from their parents, bottom-up
        for depth in range(len(segments), 0, -1):
            node, parent = segments[:depth], segments[: depth - 1]
            if self.r.exists(self._kv(node)) or self.r.scard(self._kc(node)):
                return
            self.r.srem(self._kc(parent), node[-1])

    def _write(self, segments: list[str], value: Any) -> None:
        stale = self._subtree_keys(segments)
        leaves: dict[str, str] = {}
        edges: list[tuple[str, str]] = []
        if value is not None:
            self._flatten(segments, value, leaves, edges)

        pipe = self.r.pipeline(transaction=True)
        pipe.delete(*stale)
        if leaves:
            # link the node into every ancestor; ancestors stop being leaves
            for depth in range(len(segments)):
                pipe.delete(self._kv(segments[:depth]))
                pipe.sadd(self._kc(segments[:depth]), segments[depth])
            for parent_key, child in edges:
                pipe.sadd(parent_key, child)
            pipe.mset(leaves)
        pipe.execute()

        if not leaves:
            self._prune_ancestors(segments)

    # -------------------- API ------------------------

    def get(self, path: str) -> Any | None:
        segments = split_path(path)
        with _guard("get"):
            return self._read(segments)

    def set(self, path: str, value: Any) -> None:
        segments = split_path(path)
        with _guard("set"):
            self._write(segments, value)

    def update(self, path: str, partial: Mapping[str, Any]) -> None:
        segments = split_path(path)
        children = [(split_path(key), value) for key, value in partial.items()]
        with _guard("update"):
            for child, value in children:
                self._write(segments + child, value)

    def delete(self, path: str) -> None:
        segments = split_path(path)
        with _guard("delete"):
            self._write(segments, None)

    def query_by_field(self, collection: str, field: str, value: Any) -> dict[str, Any]:
        segments = split_path(collection)
        field_key = check_key(field)
        matches: dict[str, Any] = {}
        with _guard("query_by_field"):
            for child in sorted(_s(c) for c in self.r.smembers(self._kc(segments))):
                raw = self.r.get(self._kv(segments + [child, field_key]))
                if raw is None or json.loads(_s(raw)) != value:
                    continue
                record = self._read(segments + [child])
                if record is not None:
                    matches[child] = record
        return matches

    def generate_unique_key(self, collection: str) -> str:
        split_path(collection)
        return self._keys()

    def ping(self) -> bool:
        with _guard("ping"):
            return bool(self.r.ping())
