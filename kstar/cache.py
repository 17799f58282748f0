"""
Per-attribute memo of resolved blend parameters.

Each attribute gets its own cache, stamped with the training-set generation
it was built for. Entries are never evicted or recomputed: a cache is
dropped as a whole when the generation moves on.
"""

import threading
from dataclasses import dataclass
from typing import Callable, Dict, Hashable, Optional


@dataclass(frozen=True)
class CacheEntry:
    """
    Parameters resolved for one test value.

    Attributes:
        value: Stop probability (nominal) or scale factor (numeric)
        missing_prob: Probability of transforming into a missing value
    """
    value: float
    missing_prob: float


class AttributeCache:
    """
    Cache of CacheEntry objects keyed by test value.

    Lookups of existing entries take no lock. Filling a missing entry is
    serialised so every caller sees the entry computed by the first writer.
    """

    def __init__(self, attr_index: int, generation: int):
        self.attr_index = attr_index
        self.generation = generation
        self._table: Dict[Hashable, CacheEntry] = {}
        self._lock = threading.Lock()

    def get(self, key: Hashable) -> Optional[CacheEntry]:
        """Cached entry, or None on a miss."""
        return self._table.get(key)

    def put(self, key: Hashable, entry: CacheEntry) -> CacheEntry:
        """Store an entry unless one exists; returns the stored entry."""
        with self._lock:
            return self._table.setdefault(key, entry)

    def get_or_compute(self, key: Hashable,
                       compute: Callable[[], CacheEntry]) -> CacheEntry:
        """Cached entry for key, computing and storing it on a miss."""
        entry = self._table.get(key)
        if entry is not None:
            return entry
        with self._lock:
            entry = self._table.get(key)
            if entry is None:
                entry = compute()
                self._table[key] = entry
        return entry

    def is_current(self, generation: int) -> bool:
        return self.generation == generation

    def __contains__(self, key: Hashable) -> bool:
        return key in self._table

    def __len__(self) -> int:
        return len(self._table)

    def __repr__(self) -> str:
        return (f"AttributeCache(attr_index={self.attr_index}, "
                f"generation={self.generation}, entries={len(self._table)})")
