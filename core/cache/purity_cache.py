#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Purification Cache

Memoizes gate-accepted results keyed by (content hash, target language).

Key Features:
- Stable SHA256 content hash of (raw text, source language, target language)
- Entries carry the sanitizer rule-set version; a version bump invalidates them
- TTL expiry
- Any backend failure or malformed entry is a miss, never an error

Writes are last-writer-wins without locking: two requests for the same key
compute equivalent entries.
"""

import hashlib
import json
import logging
import time
from dataclasses import dataclass, asdict
from typing import Any, Callable, Dict, Optional

from config.constants import CACHE_MAX_ENTRIES, CACHE_TTL_SECONDS, SANITIZER_RULESET_VERSION
from core.language import Language

from .base import CacheInterface, CacheStats
from .memory_cache import LRUCache

logger = logging.getLogger(__name__)


def _code(language: Optional[Language]) -> str:
    if language is None:
        return ""
    return Language(language).value


def compute_content_hash(
    raw_text: str,
    source_language: Optional[Language],
    target_language: Language,
) -> str:
    """
    Stable cache key digest for a purification request.

    Examples:
        >>> h1 = compute_content_hash("الشهود", Language.ARABIC, Language.FRENCH)
        >>> h2 = compute_content_hash("الشهود", Language.ARABIC, Language.FRENCH)
        >>> h1 == h2
        True
        >>> h1 != compute_content_hash("الشهود", None, Language.FRENCH)
        True
    """
    key_components = {
        'text': raw_text or "",
        'source_lang': _code(source_language),
        'target_lang': _code(target_language),
    }
    payload = json.dumps(key_components, sort_keys=True, ensure_ascii=False)
    return hashlib.sha256(payload.encode('utf-8')).hexdigest()


@dataclass(frozen=True)
class CacheEntry:
    """Accepted purification result"""
    content_hash: str
    target_language: Language
    purified_text: str
    purity_score: float
    created_at: float
    expires_at: float
    ruleset_version: str
    path: str = "provider_accepted"

    def is_expired(self, now: float) -> bool:
        return now >= self.expires_at

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data['target_language'] = _code(self.target_language)
        return data


class PurificationCache:
    """
    Cache of accepted results on top of a key/value backend.

    Usage:
        cache = PurificationCache(ttl_seconds=3600, ruleset_version="2024.4")
        entry = cache.make_entry(h, Language.FRENCH, "Les témoins", 100.0, "provider_accepted")
        cache.store(entry)
        cache.lookup(h, Language.FRENCH)   # -> entry
    """

    def __init__(
        self,
        backend: Optional[CacheInterface] = None,
        ttl_seconds: float = CACHE_TTL_SECONDS,
        ruleset_version: str = SANITIZER_RULESET_VERSION,
        max_entries: int = CACHE_MAX_ENTRIES,
        clock: Callable[[], float] = time.time,
    ):
        if ttl_seconds <= 0:
            raise ValueError("ttl_seconds must be positive")
        self.backend = backend if backend is not None else LRUCache(max_size=max_entries)
        self.ttl_seconds = ttl_seconds
        self.ruleset_version = ruleset_version
        self._clock = clock
        self._stats = CacheStats(max_size=max_entries)

    @staticmethod
    def key_for(content_hash: str, target_language: Language) -> str:
        return f"{content_hash}:{_code(target_language)}"

    def make_entry(
        self,
        content_hash: str,
        target_language: Language,
        purified_text: str,
        purity_score: float,
        path: str = "provider_accepted",
    ) -> CacheEntry:
        now = self._clock()
        return CacheEntry(
            content_hash=content_hash,
            target_language=Language(target_language),
            purified_text=purified_text,
            purity_score=purity_score,
            created_at=now,
            expires_at=now + self.ttl_seconds,
            ruleset_version=self.ruleset_version,
            path=path,
        )

    def lookup(self, content_hash: str, target_language: Language) -> Optional[CacheEntry]:
        key = self.key_for(content_hash, target_language)
        try:
            entry = self.backend.get(key)
        except Exception as e:
            self._stats.errors += 1
            self._stats.misses += 1
            logger.warning(f"Cache backend read failed, treating as miss: {e}")
            return None

        if entry is None:
            self._stats.misses += 1
            logger.debug(f"Cache miss {key[:16]}")
            return None

        if (
            not isinstance(entry, CacheEntry)
            or entry.content_hash != content_hash
            or entry.target_language != target_language
        ):
            self._stats.errors += 1
            self._stats.misses += 1
            logger.warning(f"Discarding malformed cache entry {key[:16]}")
            self._discard(key)
            return None

        if entry.ruleset_version != self.ruleset_version or entry.is_expired(self._clock()):
            self._stats.stale += 1
            self._stats.misses += 1
            logger.debug(
                f"Discarding stale cache entry {key[:16]} "
                f"(version {entry.ruleset_version}, current {self.ruleset_version})"
            )
            self._discard(key)
            return None

        self._stats.hits += 1
        return entry

    def store(self, entry: CacheEntry) -> bool:
        key = self.key_for(entry.content_hash, entry.target_language)
        try:
            self.backend.set(key, entry, ttl=self.ttl_seconds)
        except Exception as e:
            self._stats.errors += 1
            logger.warning(f"Cache backend write failed: {e}")
            return False
        self._stats.writes += 1
        return True

    def _discard(self, key: str):
        try:
            self.backend.delete(key)
        except Exception as e:
            logger.debug(f"Cache delete failed for {key[:16]}: {e}")

    def clear(self) -> int:
        return self.backend.clear()

    def stats(self) -> CacheStats:
        try:
            self._stats.size = self.backend.stats().size
        except Exception as e:
            logger.debug(f"Cache backend stats unavailable: {e}")
        return self._stats
