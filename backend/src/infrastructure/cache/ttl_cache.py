"""Small in-process cache with per-entry expiry and LRU eviction."""

import time
from collections import OrderedDict
from typing import Any, Callable, Hashable, Optional

_MISSING = object()


class TTLCache:
    """
    Maps keys to values for ``ttl_seconds``; the least recently used entry
    is evicted once ``max_size`` is reached.
    """

    def __init__(self, ttl_seconds: float, max_size: int, clock: Callable[[], float] = time.monotonic):
        self.ttl_seconds = ttl_seconds
        self.max_size = max_size
        self._clock = clock
        self._entries: OrderedDict[Hashable, tuple[float, Any]] = OrderedDict()

    def get(self, key: Hashable, default: Any = None) -> Any:
        entry = self._entries.get(key, _MISSING)
        if entry is _MISSING:
            return default

        expires_at, value = entry
        if expires_at <= self._clock():
            del self._entries[key]
            return default

        self._entries.move_to_end(key)
        return value

    def set(self, key: Hashable, value: Any) -> None:
        if self.max_size <= 0:
            return
        self._entries[key] = (self._clock() + self.ttl_seconds, value)
        self._entries.move_to_end(key)
        while len(self._entries) > self.max_size:
            self._entries.popitem(last=False)

    def invalidate(self, key: Hashable) -> None:
        self._entries.pop(key, None)

    def clear(self) -> None:
        self._entries.clear()

    def __contains__(self, key: Hashable) -> bool:
        return self.get(key, _MISSING) is not _MISSING

    def __len__(self) -> int:
        return len(self._entries)
