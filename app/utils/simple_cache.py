"""In-memory TTL cache used to avoid repeated LLM calls.

Entries expire a fixed time after insertion and are dropped lazily on lookup
or by a sweep. Capacity is unbounded unless ``max_entries`` is set.
"""

from __future__ import annotations

import logging
import threading
import time
from collections import OrderedDict
from dataclasses import dataclass
from hashlib import sha256
from typing import Callable

from app.utils.text_normalizer import normalize_key_field

logger = logging.getLogger(__name__)

DEFAULT_TTL_SECONDS = 24 * 60 * 60


@dataclass
class CacheEntry:
    """Cached provider response with its lifetime."""

    value: str
    inserted_at: float
    expires_at: float


class SimpleTTLCache:
    """Thread-safe, in-memory TTL cache with optional LRU bound.

    Attributes:
        name: Label used in logs and stats.
        ttl_seconds: Default time-to-live applied to entries.
        max_entries: Maximum number of cached items (None for unlimited).
    """

    def __init__(
        self,
        ttl_seconds: int = DEFAULT_TTL_SECONDS,
        max_entries: int | None = None,
        *,
        name: str = "cache",
        clock: Callable[[], float] = time.time,
    ) -> None:
        if ttl_seconds <= 0:
            raise ValueError("ttl_seconds must be > 0")
        if max_entries is not None and max_entries < 1:
            raise ValueError("max_entries must be >= 1 or None")

        self.name = name
        self._ttl = ttl_seconds
        self._max_entries = max_entries
        self._clock = clock
        self._store: OrderedDict[str, CacheEntry] = OrderedDict()
        self._lock = threading.RLock()
        self._hits = 0
        self._misses = 0
        self._evictions = 0

    def __repr__(self) -> str:  # pragma: no cover - representation only
        return (
            f"SimpleTTLCache(name={self.name!r}, ttl_seconds={self._ttl}, "
            f"max_entries={self._max_entries}, size={len(self._store)}, "
            f"hits={self._hits}, misses={self._misses}, evictions={self._evictions})"
        )

    def __len__(self) -> int:
        with self._lock:
            return len(self._store)

    @property
    def ttl_seconds(self) -> int:
        return self._ttl

    def get(self, key: str) -> str | None:
        """Retrieve a cached value if it exists and is not expired.

        Args:
            key: Cache key.

        Returns:
            Cached value or None if not found/expired.
        """

        with self._lock:
            entry = self._store.get(key)
            if entry is None:
                self._misses += 1
                logger.debug(
                    "cache.miss",
                    extra={"cache": self.name, "cache_key": key[:16], "reason": "not_found"},
                )
                return None

            if self._is_expired(entry, self._clock()):
                self._evict_single(key)
                self._misses += 1
                logger.debug(
                    "cache.miss",
                    extra={"cache": self.name, "cache_key": key[:16], "reason": "expired"},
                )
                return None

            self._hits += 1
            self._store.move_to_end(key)
            logger.debug("cache.hit", extra={"cache": self.name, "cache_key": key[:16]})
            return entry.value

    def set(self, key: str, value: str, ttl: int | None = None) -> None:
        """Store a value, replacing any previous entry for the key.

        Args:
            key: Cache key.
            value: Provider response text.
            ttl: Optional per-entry TTL in seconds; defaults to the cache TTL.
        """
        ttl_seconds = self._ttl if ttl is None else ttl
        if ttl_seconds <= 0:
            raise ValueError("ttl must be > 0")

        with self._lock:
            now = self._clock()
            self._evict_expired_locked(now)
            self._store[key] = CacheEntry(
                value=value,
                inserted_at=now,
                expires_at=now + ttl_seconds,
            )
            self._store.move_to_end(key)
            self._evict_if_over_capacity_locked()

            logger.debug(
                "cache.set",
                extra={
                    "cache": self.name,
                    "cache_key": key[:16],
                    "size": len(self._store),
                    "ttl_s": ttl_seconds,
                },
            )

    def evict_expired(self) -> int:
        """Sweep all expired entries.

        Returns:
            Number of entries removed.
        """
        with self._lock:
            before = len(self._store)
            self._evict_expired_locked(self._clock())
            return before - len(self._store)

    def clear(self) -> None:
        """Remove all cached entries and reset counters."""

        with self._lock:
            self._store.clear()
            self._hits = 0
            self._misses = 0
            self._evictions = 0

    def stats(self) -> dict[str, int | None]:
        """Return lightweight cache metrics without exposing values."""

        with self._lock:
            return {
                "size": len(self._store),
                "hits": self._hits,
                "misses": self._misses,
                "evictions": self._evictions,
                "ttl_seconds": self._ttl,
                "max_entries": self._max_entries,
            }

    def _evict_single(self, key: str) -> None:
        if self._store.pop(key, None) is not None:
            self._evictions += 1

    def _evict_expired_locked(self, now: float) -> None:
        expired_keys = [k for k, entry in self._store.items() if self._is_expired(entry, now)]
        for key in expired_keys:
            self._evict_single(key)

    def _evict_if_over_capacity_locked(self) -> None:
        if self._max_entries is None:
            return

        while len(self._store) > self._max_entries:
            # popitem(last=False) removes the least recently used entry
            self._store.popitem(last=False)
            self._evictions += 1

    @staticmethod
    def _is_expired(entry: CacheEntry, now: float) -> bool:
        return now >= entry.expires_at


def build_cache_key(*fields: object, salt: str | None = None) -> str:
    """Build a stable cache key from request fields.

    Fields are normalized (trimmed, whitespace-collapsed, lower-cased) before
    hashing, so requests differing only in case or spacing share a key.

    Args:
        *fields: Request values in a fixed order (e.g. word, age, language).
        salt: Optional namespace, e.g. a prompt version.

    Returns:
        Hex-encoded SHA-256 digest string.
    """

    hasher = sha256()
    if salt:
        hasher.update(salt.encode())
    for field in fields:
        hasher.update(b"\x1f")
        hasher.update(normalize_key_field(field).encode("utf-8", errors="ignore"))
    return hasher.hexdigest()
