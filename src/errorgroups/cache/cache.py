"""Process-local TTL cache for deserialized API results.

Entries are held in a :class:`cachetools.TLRUCache` and are never
persisted; the cache does not survive a restart and is not shared between
processes. Each entry expires ``ttl`` seconds after it was set. Entries
are only ever replaced or removed as a whole, and once
``CacheConfig.max_entries`` is reached the least recently used entry makes
room for a new one.

The clock is handed to cachetools as its timer, so tests can step time
deterministically instead of sleeping.

See Also:
    :class:`~errorgroups.models.CacheConfig` -- the Pydantic model that
    controls ``enabled``, ``ttl_seconds`` and ``max_entries``.
"""

from __future__ import annotations

import time
from typing import Any, Callable, NamedTuple, Optional

from cachetools import TLRUCache

from errorgroups.models import CacheConfig

DEFAULT_TTL_SECONDS = 60 * 60

_MISSING = object()


class _Entry(NamedTuple):
    value: Any
    ttl: float


def _time_to_use(key: str, entry: _Entry, now: float) -> float:
    return now + entry.ttl


class MemoryCache:
    """In-memory cache with a per-entry time-to-live.

    Args:
        config: Cache configuration (``enabled`` flag, default
            ``ttl_seconds`` and ``max_entries``). Defaults to an enabled
            one-hour cache.
        clock: Zero-argument callable returning the current time in
            seconds. Defaults to :func:`time.monotonic`.

    Example::

        from errorgroups.cache import MemoryCache

        cache = MemoryCache()
        cache.set("ALL_SERVICES-NO_GROUP", groups)
        hit = cache.get("ALL_SERVICES-NO_GROUP")
        cache.flush_all()
    """

    def __init__(
        self,
        config: Optional[CacheConfig] = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._config = config or CacheConfig(ttl_seconds=DEFAULT_TTL_SECONDS)
        self._store: TLRUCache = TLRUCache(
            maxsize=self._config.max_entries, ttu=_time_to_use, timer=clock
        )
        self._hits = 0
        self._misses = 0

    @property
    def enabled(self) -> bool:
        """Whether the cache stores anything at all."""
        return self._config.enabled

    @property
    def ttl_seconds(self) -> int:
        """The default time-to-live applied by :meth:`set`."""
        return self._config.ttl_seconds

    def get(self, key: str) -> Optional[Any]:
        """Look up a live entry.

        Args:
            key: The cache key.

        Returns:
            The stored value, or ``None`` on a miss, when the entry has
            expired, or when caching is disabled.
        """
        if not self.enabled:
            self._misses += 1
            return None

        self._store.expire()
        entry = self._store.get(key, _MISSING)
        if entry is _MISSING:
            self._misses += 1
            return None

        self._hits += 1
        return entry.value

    def set(self, key: str, value: Any, ttl: Optional[float] = None) -> None:
        """Store *value* under *key*, replacing any previous entry.

        Args:
            key: The cache key.
            value: The value to store. It is kept by reference.
            ttl: Lifetime in seconds; defaults to :attr:`ttl_seconds`.
                A lifetime of zero or less stores nothing.
        """
        if not self.enabled:
            return
        self._store.pop(key, None)
        self._store[key] = _Entry(value, self._config.ttl_seconds if ttl is None else ttl)

    def delete(self, key: str) -> None:
        """Remove one entry. Missing keys are ignored."""
        self._store.pop(key, None)

    def flush_all(self) -> None:
        """Remove every entry."""
        self._store.clear()

    def keys(self) -> list[str]:
        """Return the keys of all live entries, evicting expired ones."""
        self._store.expire()
        return sorted(self._store)

    def stats(self) -> dict[str, Any]:
        """Return cache statistics.

        Returns:
            A ``dict`` with ``enabled`` (bool), and when enabled:
            ``size`` (live entries), ``hits``, ``misses`` and
            ``ttl_seconds``.
        """
        if not self.enabled:
            return {"enabled": False}
        return {
            "enabled": True,
            "size": len(self),
            "hits": self._hits,
            "misses": self._misses,
            "ttl_seconds": self._config.ttl_seconds,
        }

    def __len__(self) -> int:
        return len(self.keys())

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and key in self.keys()
