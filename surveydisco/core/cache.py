"""Bounded in-memory cache with oldest-entry eviction.

Used for soft-feature lookups (thumbnail URLs) that are cheap to lose.
Each instance is owned by the service that constructs it; there is no
module-level cache.
"""

from __future__ import annotations

import time
from collections import OrderedDict
from collections.abc import Hashable
from typing import Any, Callable

_MISSING = object()


class BoundedCache:
    """Fixed-capacity LRU map with optional per-entry TTL.

    Example:
        >>> cache = BoundedCache(capacity=2)
        >>> cache.set("a", 1); cache.set("b", 2); cache.set("c", 3)
        >>> cache.get("a") is None
        True
    """

    def __init__(
        self,
        capacity: int = 256,
        ttl_seconds: float | None = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        if capacity < 1:
            raise ValueError("capacity must be at least 1")
        self.capacity = capacity
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._entries: OrderedDict[Hashable, tuple[float, Any]] = OrderedDict()

    def get(self, key: Hashable, default: Any = None) -> Any:
        entry = self._entries.get(key, _MISSING)
        if entry is _MISSING:
            return default

        stored_at, value = entry
        if self.ttl_seconds is not None and self._clock() - stored_at > self.ttl_seconds:
            del self._entries[key]
            return default

        self._entries.move_to_end(key)
        return value

    def set(self, key: Hashable, value: Any) -> None:
        if key in self._entries:
            self._entries.move_to_end(key)
        self._entries[key] = (self._clock(), value)
        while len(self._entries) > self.capacity:
            self._entries.popitem(last=False)

    def __contains__(self, key: Hashable) -> bool:
        return self.get(key, _MISSING) is not _MISSING

    def pop(self, key: Hashable) -> None:
        self._entries.pop(key, None)

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)
