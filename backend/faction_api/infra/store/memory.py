from __future__ import annotations

import copy
import threading
from collections.abc import Mapping
from typing import Any

from faction_api.infra.store.keys import PushKeyGenerator
from faction_api.services._shared.ports import DocumentStore, check_key, split_path


class InMemoryDocumentStore(DocumentStore):
    """
    Process-local document tree backed by nested dicts.

    .. note::
       A single lock serialises operations; values are deep-copied in and out
       so callers never alias the stored tree. Used for development and tests.
    """

    def __init__(self, initial: Mapping[str, Any] | None = None) -> None:
        self._root: dict[str, Any] = copy.deepcopy(_prune(dict(initial or {})))
        self._lock = threading.Lock()
        self._keys = PushKeyGenerator()

    # ------------------------- helpers -------------------------

    def _walk(self, segments: list[str]) -> Any | None:
        node: Any = self._root
        for seg in segments:
            if not isinstance(node, dict) or seg not in node:
                return None
            node = node[seg]
        return node

    def _remove(self, segments: list[str]) -> None:
        trail: list[tuple[dict[str, Any], str]] = []
        node: Any = self._root
        for seg in segments:
            if not isinstance(node, dict) or seg not in node:
                return
            trail.append((node, seg))
            node = node[seg]
        parent, seg = trail[-1]
        del parent[seg]
        # prune ancestors left empty
        for parent, seg in reversed(trail[:-1]):
            if parent[seg]:
                break
            del parent[seg]

    def _write(self, segments: list[str], value: Any) -> None:
        value = _prune(value)
        if value is None or value == {}:
            self._remove(segments)
            return
        node = self._root
        for seg in segments[:-1]:
            child = node.get(seg)
            if not isinstance(child, dict):
                child = {}
                node[seg] = child
            node = child
        node[segments[-1]] = copy.deepcopy(value)

    # -------------------------- API ----------------------------

    def get(self, path: str) -> Any | None:
        segments = split_path(path)
        with self._lock:
            return copy.deepcopy(self._walk(segments))

    def set(self, path: str, value: Any) -> None:
        segments = split_path(path)
        with self._lock:
            self._write(segments, value)

    def update(self, path: str, partial: Mapping[str, Any]) -> None:
        segments = split_path(path)
        children = [(split_path(key), value) for key, value in partial.items()]
        with self._lock:
            for child, value in children:
                self._write(segments + child, value)

    def delete(self, path: str) -> None:
        segments = split_path(path)
        with self._lock:
            self._remove(segments)

    def query_by_field(self, collection: str, field: str, value: Any) -> dict[str, Any]:
        segments = split_path(collection)
        with self._lock:
            node = self._walk(segments)
            if not isinstance(node, dict):
                return {}
            return {
                key: copy.deepcopy(record)
                for key, record in node.items()
                if isinstance(record, dict) and record.get(field) == value
            }

    def generate_unique_key(self, collection: str) -> str:
        split_path(collection)
        return self._keys()

    def ping(self) -> bool:
        return True


def _prune(value: Any) -> Any:
    """
    Normalise a value into tree form.

    Lists become index-keyed children, and ``None`` or empty children are
    dropped so the tree never stores them.
    """
    if isinstance(value, list):
        value = {str(i): child for i, child in enumerate(value)}
    if not isinstance(value, Mapping):
        return value
    out = {}
    for key, child in value.items():
        key = check_key(key)
        child = _prune(child)
        if child is None or child == {}:
            continue
        out[key] = child
    return out
