# strivio/utils/query_cache.py
from __future__ import annotations

import logging
from typing import Any, Callable, Dict, Hashable, Sequence, Tuple

logger = logging.getLogger(__name__)

Key = Tuple[Hashable, ...]


class QueryCache:
    """Fetched results per query key, kept for one browser tab.

    Keys are tuples such as ``("tasks",)`` or ``("tasks", project_id)``;
    invalidating ``("tasks",)`` drops both.
    """

    def __init__(self):
        self._entries: Dict[Key, Any] = {}
        self.invalidations = 0

    def __contains__(self, key: Sequence[Hashable]) -> bool:
        return tuple(key) in self._entries

    def fetch(self, key: Sequence[Hashable], loader: Callable[[], Any]) -> Any:
        key = tuple(key)
        if key in self._entries:
            return self._entries[key]
        value = loader()
        self._entries[key] = value
        return value

    def invalidate(self, *prefixes: Sequence[Hashable]) -> int:
        """Drop every key under any of ``prefixes``; counts as one invalidation."""
        prefixes = [tuple(p) for p in prefixes]
        stale = [k for k in self._entries if any(k[:len(p)] == p for p in prefixes)]
        for k in stale:
            del self._entries[k]
        self.invalidations += 1
        logger.debug("invalidated %s (%d entries)", prefixes, len(stale))
        return len(stale)

    def clear(self) -> None:
        self._entries.clear()
