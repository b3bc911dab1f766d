"""
Memory Cache

In-process LRU backend for purified results.
"""

import time
import threading
from typing import Any, Callable, Optional
from collections import OrderedDict
from dataclasses import dataclass
import logging

from .base import CacheInterface, CacheStats

logger = logging.getLogger(__name__)


@dataclass
class _Slot:
    value: Any
    expires_at: Optional[float] = None


class LRUCache(CacheInterface):
    """
    Thread-safe LRU (Least Recently Used) cache.

    - O(1) get/set
    - evicts the least recently used key past max_size
    - optional TTL per key, measured with the injected clock
    """

    def __init__(
        self,
        max_size: int = 1000,
        default_ttl: Optional[float] = None,
        clock: Callable[[], float] = time.time,
    ):
        if max_size <= 0:
            raise ValueError("max_size must be positive")
        self.max_size = max_size
        self.default_ttl = default_ttl
        self._clock = clock
        self._data: "OrderedDict[str, _Slot]" = OrderedDict()
        self._lock = threading.RLock()
        self._stats = CacheStats(max_size=max_size)

    def _expired(self, slot: _Slot) -> bool:
        return slot.expires_at is not None and self._clock() > slot.expires_at

    def get(self, key: str) -> Optional[Any]:
        with self._lock:
            slot = self._data.get(key)
            if slot is None:
                self._stats.misses += 1
                return None
            if self._expired(slot):
                del self._data[key]
                self._stats.misses += 1
                return None
            self._data.move_to_end(key)
            self._stats.hits += 1
            return slot.value

    def set(self, key: str, value: Any, ttl: Optional[float] = None) -> bool:
        with self._lock:
            ttl = ttl if ttl is not None else self.default_ttl
            expires_at = self._clock() + ttl if ttl else None
            if key in self._data:
                self._data.move_to_end(key)
            self._data[key] = _Slot(value, expires_at)
            self._stats.writes += 1

            while len(self._data) > self.max_size:
                evicted, _ = self._data.popitem(last=False)
                logger.debug(f"LRU evicted {evicted}")
            return True

    def delete(self, key: str) -> bool:
        with self._lock:
            return self._data.pop(key, None) is not None

    def clear(self) -> int:
        with self._lock:
            count = len(self._data)
            self._data.clear()
            return count

    def __len__(self) -> int:
        with self._lock:
            return len(self._data)

    def stats(self) -> CacheStats:
        with self._lock:
            self._stats.size = len(self._data)
            return self._stats

    def cleanup_expired(self) -> int:
        """Remove all expired entries"""
        with self._lock:
            expired = [k for k, slot in self._data.items() if self._expired(slot)]
            for key in expired:
                del self._data[key]
            return len(expired)
