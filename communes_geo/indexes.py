"""
Exact-match lookups built once at construction time.

UniqueKeyIndex: identity key -> record (last write wins).
MultiKeyIndex:  secondary key -> records carrying it, in insertion order.
"""

from __future__ import annotations

from typing import Generic, Hashable, Iterator, Optional, TypeVar

K = TypeVar("K", bound=Hashable)
V = TypeVar("V")


class UniqueKeyIndex(Generic[K, V]):
    def __init__(self) -> None:
        self._entries: dict[K, V] = {}

    def put(self, key: K, record: V) -> bool:
        """Insert or overwrite. Returns True when an existing entry was replaced."""
        replaced = key in self._entries
        self._entries[key] = record
        return replaced

    def get(self, key: K) -> Optional[V]:
        return self._entries.get(key)

    def keys(self) -> Iterator[K]:
        return iter(self._entries)

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    def __len__(self) -> int:
        return len(self._entries)


class MultiKeyIndex(Generic[K, V]):
    def __init__(self) -> None:
        self._buckets: dict[K, list[V]] = {}

    def add(self, key: K, record: V) -> None:
        self._buckets.setdefault(key, []).append(record)

    def get(self, key: K) -> tuple[V, ...]:
        """Records filed under key, oldest first; empty when the key is unknown."""
        return tuple(self._buckets.get(key, ()))

    def keys(self) -> Iterator[K]:
        return iter(self._buckets)

    def __contains__(self, key: object) -> bool:
        return key in self._buckets

    def __len__(self) -> int:
        return len(self._buckets)
