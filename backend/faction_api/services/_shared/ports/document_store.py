from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Protocol

from faction_api.services._shared.errors import ValidationError

# Characters a path segment may not contain (same rules as hosted JSON trees)
FORBIDDEN_SEGMENT_CHARS = frozenset(".#$[]")


def split_path(path: str) -> list[str]:
    """
    Split a ``/``-separated store path into validated segments.

    Leading and trailing slashes are ignored; empty inner segments are not.

    :raises ValidationError: For an empty path or an illegal segment.
    """
    if not isinstance(path, str):
        raise ValidationError("Store path must be a string")
    segments = path.strip("/").split("/")
    if segments == [""]:
        raise ValidationError("Store path must not be empty")
    for seg in segments:
        if not seg or seg != seg.strip():
            raise ValidationError(f"Invalid path segment in {path!r}")
        if FORBIDDEN_SEGMENT_CHARS.intersection(seg) or any(ord(c) < 32 for c in seg):
            raise ValidationError(f"Invalid path segment {seg!r}")
    return segments


def check_key(key: Any) -> str:
    """Validate a single child key (no ``/`` allowed) and return it as ``str``."""
    key = str(key)
    if "/" in key:
        raise ValidationError(f"Invalid key {key!r}")
    split_path(key)
    return key


def join_path(*parts: str) -> str:
    """Join segments into a normalized store path (validated)."""
    return "/".join(split_path("/".join(p.strip("/") for p in parts)))


class DocumentStore(Protocol):
    """
    Port for a hierarchical JSON document store addressed by string paths.

    Semantics
    ---------
    - ``get`` returns the subtree at ``path`` (scalar, dict) or ``None``.
    - ``set`` overwrites the subtree; ``None`` (or an empty dict) deletes it.
    - ``update`` replaces each top-level child named in ``partial``.
    - ``delete`` removes the subtree and prunes ancestors left empty.
    - ``query_by_field`` scans direct children of ``collection`` and returns
      those whose ``field`` equals ``value``.
    - ``generate_unique_key`` returns a collision-resistant, time-ordered key.

    Implementations raise :class:`~faction_api.services._shared.errors.DependencyError`
    when the backend call fails. No operation retries.
    """

    def get(self, path: str) -> Any | None: ...

    def set(self, path: str, value: Any) -> None: ...

    def update(self, path: str, partial: Mapping[str, Any]) -> None: ...

    def delete(self, path: str) -> None: ...

    def query_by_field(self, collection: str, field: str, value: Any) -> dict[str, Any]: ...

    def generate_unique_key(self, collection: str) -> str: ...

    def ping(self) -> bool: ...
