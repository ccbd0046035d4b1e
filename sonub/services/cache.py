"""
Caches for slow-changing server data (system settings, categories).

- MemoryCache: process lifetime, no TTL, no eviction. Always consulted first.
- DomainCache: JSON snapshots in a key/value store, keyed by site domain, so
  the last known value survives a restart. Corrupt snapshots are a miss.
"""

import json
from dataclasses import dataclass
from typing import Any

from loguru import logger

from sonub.storage import KeyValueStore

DOMAIN_CACHE_PREFIX = "cache_"


@dataclass
class CacheStats:
    """Cache statistics."""

    hits: int = 0
    misses: int = 0
    size: int = 0

    @property
    def hit_rate(self) -> float:
        total = self.hits + self.misses
        if total == 0:
            return 0.0
        return self.hits / total

    def to_dict(self) -> dict[str, Any]:
        return {
            "hits": self.hits,
            "misses": self.misses,
            "size": self.size,
            "hit_rate": f"{self.hit_rate:.2%}",
        }


class MemoryCache:
    """
    In-memory map from cache key to the last value fetched.

    Usage:
        cache = MemoryCache()
        data = cache.get("systemSettings")
        if data is None:
            data = await fetch()
            cache.set("systemSettings", data)
    """

    def __init__(self, debug: bool = False):
        self._memory: dict[str, Any] = {}
        self._debug = debug
        self._stats = CacheStats()

    def get(self, key: str) -> Any | None:
        if key not in self._memory:
            self._stats.misses += 1
            self._log(f"MISS: {key}")
            return None
        self._stats.hits += 1
        self._log(f"HIT: {key}")
        return self._memory[key]

    def set(self, key: str, data: Any) -> None:
        self._memory[key] = data
        self._log(f"SET: {key}")

    def __contains__(self, key: str) -> bool:
        return key in self._memory

    def get_stats(self) -> CacheStats:
        self._stats.size = len(self._memory)
        return self._stats

    def _log(self, message: str) -> None:
        if self._debug:
            logger.debug(f"[MemoryCache] {message}")


class DomainCache:
    """
    Persistent cache keyed by (domain, key).

    Values are stored as JSON text. A value that cannot be decoded is
    reported once and treated as absent; it never raises to the caller.
    """

    def __init__(self, store: KeyValueStore, debug: bool = False):
        self._store = store
        self._debug = debug
        self._reported: set[str] = set()

    @staticmethod
    def storage_key(domain: str, key: str) -> str:
        return f"{DOMAIN_CACHE_PREFIX}{domain}_{key}"

    def get(self, domain: str, key: str) -> Any | None:
        storage_key = self.storage_key(domain, key)
        raw = self._store.get(storage_key)
        if raw is None:
            self._log(f"MISS: {storage_key}")
            return None
        try:
            data = json.loads(raw)
        except ValueError as e:
            if storage_key not in self._reported:
                self._reported.add(storage_key)
                logger.warning(f"Ignoring corrupt cache entry {storage_key}: {e}")
            return None
        self._log(f"HIT: {storage_key}")
        return data

    def set(self, domain: str, key: str, data: Any) -> None:
        storage_key = self.storage_key(domain, key)
        try:
            raw = json.dumps(data, ensure_ascii=False)
        except (TypeError, ValueError) as e:
            logger.warning(f"Not caching {storage_key}, value is not JSON: {e}")
            return
        self._store.set(storage_key, raw)
        self._reported.discard(storage_key)
        self._log(f"SET: {storage_key}")

    def _log(self, message: str) -> None:
        if self._debug:
            logger.debug(f"[DomainCache] {message}")
