from __future__ import annotations

import contextvars
import threading
import time
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Any, Callable, Iterator

"""
Simple in-process TTL cache.

This cache is intentionally lightweight:
- Values live in a dict keyed by (namespace, key).
- TTL is enforced on read; expired entries are never evicted proactively,
  a later `set` simply overwrites them.

It is used by the travel time service (60 minutes) and the forecast
provider (15 minutes) to avoid recomputing per-destination results.
"""


@dataclass(frozen=True)
class CacheEntry:
    """Cached value plus the moment it was stored."""

    created_at_unix: float
    ttl_seconds: int
    value: Any


@dataclass
class CacheStats:
    """Per-request cache usage stats; safe to share between threads."""

    hits: int = 0
    misses: int = 0
    expired: int = 0
    sets: int = 0
    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False, compare=False)

    def record(self, *, hits: int = 0, misses: int = 0, expired: int = 0, sets: int = 0) -> None:
        # One instance is shared by every worker thread of a request.
        with self._lock:
            self.hits += hits
            self.misses += misses
            self.expired += expired
            self.sets += sets

    def as_dict(self) -> dict[str, int]:
        return {
            "hits": int(self.hits),
            "misses": int(self.misses),
            "expired": int(self.expired),
            "sets": int(self.sets),
        }


_cache_stats_var: contextvars.ContextVar[CacheStats | None] = contextvars.ContextVar(
    "wavefinder_cache_stats", default=None
)


def _stats() -> CacheStats | None:
    return _cache_stats_var.get()


@contextmanager
def record_cache_stats() -> Iterator[CacheStats]:
    """Capture cache stats within the current context (thread/task-safe)."""

    stats = CacheStats()
    token = _cache_stats_var.set(stats)
    try:
        yield stats
    finally:
        _cache_stats_var.reset(token)


class TTLCache:
    """A thread-safe in-memory cache keyed by (namespace, key)."""

    def __init__(self, enabled: bool = True, default_ttl_seconds: int = 3600):
        self._enabled = enabled
        self._default_ttl_seconds = default_ttl_seconds
        self._entries: dict[tuple[str, str], CacheEntry] = {}
        self._lock = threading.Lock()

    @property
    def enabled(self) -> bool:
        return self._enabled

    def __len__(self) -> int:
        return len(self._entries)

    def get(self, namespace: str, key: str, ttl_seconds: int | None = None) -> Any | None:
        """Return a cached value if present and younger than its TTL; otherwise None."""
        if not self._enabled:
            return None

        with self._lock:
            entry = self._entries.get((namespace, key))

        st = _stats()
        if entry is None:
            if st:
                st.record(misses=1)
            return None

        effective_ttl = ttl_seconds if ttl_seconds is not None else entry.ttl_seconds
        if time.time() - entry.created_at_unix >= effective_ttl:
            if st:
                st.record(misses=1, expired=1)
            return None

        if st:
            st.record(hits=1)
        return entry.value

    def set(self, namespace: str, key: str, value: Any, ttl_seconds: int | None = None) -> None:
        """Store a value; last write wins."""
        if not self._enabled:
            return None

        ttl = ttl_seconds if ttl_seconds is not None else self._default_ttl_seconds
        entry = CacheEntry(created_at_unix=time.time(), ttl_seconds=int(ttl), value=value)
        with self._lock:
            self._entries[(namespace, key)] = entry
        st = _stats()
        if st:
            st.record(sets=1)

    def get_or_set(
        self,
        namespace: str,
        key: str,
        builder: Callable[[], Any],
        ttl_seconds: int | None = None,
    ) -> Any:
        """Return cached value, or compute/store it via `builder`.

        Exceptions raised by `builder` propagate and nothing is stored.
        """
        cached = self.get(namespace, key, ttl_seconds=ttl_seconds)
        if cached is not None:
            return cached
        value = builder()
        self.set(namespace, key, value, ttl_seconds=ttl_seconds)
        return value

    def clear(self, namespace: str | None = None) -> None:
        """Drop every entry, or only the entries of one namespace."""
        with self._lock:
            if namespace is None:
                self._entries.clear()
                return
            for k in [k for k in self._entries if k[0] == namespace]:
                del self._entries[k]
