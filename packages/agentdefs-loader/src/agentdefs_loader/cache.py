"""Snapshot cache: one registry snapshot per root, with time-based expiry."""
from __future__ import annotations

import time
from typing import TYPE_CHECKING, NamedTuple

if TYPE_CHECKING:
    from collections.abc import Callable

    from agentdefs_loader.types import RegistrySnapshot

DEFAULT_EXPIRY_SECONDS = 60.0


class _Entry(NamedTuple):
    snapshot: RegistrySnapshot
    invalidated: bool = False


class DefinitionCache:
    """In-memory snapshot cache keyed by root path, with expiry.

    Each root maps to at most one snapshot.  Entries are immutable tuples
    swapped in by a single assignment, so readers see either the old or
    the new snapshot, never a partial one.
    """

    def __init__(
        self,
        expiry_seconds: float = DEFAULT_EXPIRY_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._store: dict[str, _Entry] = {}
        self._expiry = expiry_seconds
        self._clock = clock

    @property
    def expiry_seconds(self) -> float:
        return self._expiry

    def now(self) -> float:
        """Current reading of the cache clock; used to stamp snapshots."""
        return self._clock()

    def get(self, root: str) -> RegistrySnapshot | None:
        """Return the snapshot for *root* if it is fresh, else None."""
        entry = self._store.get(root)
        if entry is None or entry.invalidated:
            return None
        if self._clock() - entry.snapshot.loaded_at >= self._expiry:
            return None
        return entry.snapshot

    def peek(self, root: str) -> RegistrySnapshot | None:
        """Return the last snapshot for *root* regardless of freshness."""
        entry = self._store.get(root)
        return entry.snapshot if entry is not None else None

    def put(self, root: str, snapshot: RegistrySnapshot) -> None:
        """Replace the snapshot for *root*."""
        self._store[root] = _Entry(snapshot)

    def invalidate(self, root: str) -> None:
        """Force the next ``get`` for *root* to report stale."""
        entry = self._store.get(root)
        if entry is not None:
            self._store[root] = entry._replace(invalidated=True)

    def clear(self) -> None:
        """Clear all cached entries."""
        self._store.clear()
