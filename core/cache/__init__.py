"""
Cache Module

Exports:
- PurificationCache, CacheEntry (accepted results, versioned and TTL-bound)
- compute_content_hash (stable cache key digest)
- CacheInterface, CacheStats (backend interface)
- LRUCache (in-memory backend)
"""

from .base import CacheInterface, CacheStats
from .memory_cache import LRUCache
from .purity_cache import PurificationCache, CacheEntry, compute_content_hash

__all__ = [
    'CacheInterface',
    'CacheStats',
    'LRUCache',
    'PurificationCache',
    'CacheEntry',
    'compute_content_hash',
]
