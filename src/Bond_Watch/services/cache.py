"""In-memory TTL cache for prices and per-network bond snapshots.

Values are JSON strings so cached objects round-trip through the same
serializers the API layer uses and callers never share mutable state.
"""

from __future__ import annotations

import datetime
import logging
from typing import Final

from pydantic import BaseModel, ConfigDict

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

# 0 means never expires
TTL_PERMANENT: Final[int] = 0

# Data type string constants (second segment of a cache key)
DATA_TYPE_BONDS: Final[str] = "bonds"
DATA_TYPE_PRICE: Final[str] = "price"

# Lazy cleanup: run eviction at most every N accesses
LAZY_CLEANUP_INTERVAL: Final[int] = 100


class CacheEntry(BaseModel):
    """A single cached value with metadata for expiration checking."""

    model_config = ConfigDict(frozen=True)

    key: str
    value: str  # JSON-serialized payload
    created_at: datetime.datetime
    ttl_seconds: int

    def is_expired(self) -> bool:
        """Return True if this entry has exceeded its TTL.

        A ttl_seconds of 0 means the entry never expires.
        """
        if self.ttl_seconds == TTL_PERMANENT:
            return False
        now = datetime.datetime.now(datetime.UTC)
        age = (now - self.created_at).total_seconds()
        return age > self.ttl_seconds


class ServiceCache:
    """In-memory key/value cache with per-entry TTL and lazy eviction.

    Usage::

        cache = ServiceCache()

        cached = await cache.get("coingecko:price:olympus")
        if cached is None:
            price = await fetch_price("olympus")
            await cache.set("coingecko:price:olympus", str(price), 300)
    """

    def __init__(self) -> None:
        self._memory_cache: dict[str, CacheEntry] = {}
        self._access_count: int = 0

    async def get(self, key: str) -> str | None:
        """Retrieve a cached value by key, or None on miss or expiry."""
        self._increment_access_count()

        entry = self._memory_cache.get(key)
        if entry is None:
            logger.debug("Cache miss: %s", key)
            return None
        if entry.is_expired():
            del self._memory_cache[key]
            logger.debug("Cache expired: %s", key)
            return None
        logger.debug("Cache hit: %s", key)
        return entry.value

    async def set(self, key: str, value: str, ttl_seconds: int) -> None:
        """Store a value in the cache for *ttl_seconds* (0 = forever)."""
        self._memory_cache[key] = CacheEntry(
            key=key,
            value=value,
            created_at=datetime.datetime.now(datetime.UTC),
            ttl_seconds=ttl_seconds,
        )
        logger.debug("Cache set: %s (ttl=%ds)", key, ttl_seconds)

    async def invalidate(self, key: str) -> None:
        """Remove a specific key."""
        self._memory_cache.pop(key, None)
        logger.debug("Cache invalidated: %s", key)

    async def invalidate_pattern(self, pattern: str) -> None:
        """Remove all keys matching a pattern.

        Supports ``*`` as a wildcard suffix, e.g. ``"bond_watch:bonds:*"``.
        """
        if pattern.endswith("*"):
            prefix = pattern[:-1]
            keys_to_remove = [k for k in self._memory_cache if k.startswith(prefix)]
        else:
            keys_to_remove = [k for k in self._memory_cache if k == pattern]

        for key in keys_to_remove:
            del self._memory_cache[key]

        logger.debug(
            "Cache invalidated pattern '%s': %d entries removed",
            pattern,
            len(keys_to_remove),
        )

    def __len__(self) -> int:
        return len(self._memory_cache)

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _increment_access_count(self) -> None:
        """Track accesses and trigger lazy cleanup when threshold is reached."""
        self._access_count += 1
        if self._access_count >= LAZY_CLEANUP_INTERVAL:
            self._access_count = 0
            self._evict_expired_entries()

    def _evict_expired_entries(self) -> None:
        """Remove every expired entry."""
        expired_keys = [k for k, v in self._memory_cache.items() if v.is_expired()]
        for key in expired_keys:
            del self._memory_cache[key]

        if expired_keys:
            logger.debug(
                "Lazy cleanup: evicted %d expired entries, %d remain",
                len(expired_keys),
                len(self),
            )
