"""In-memory result caching for errorgroups.

This package provides :class:`MemoryCache`, a process-local key/value store
in which every entry expires independently after a time-to-live. It is
owned by :class:`~errorgroups.stats.GroupStatsCache` and controlled by the
``cache`` section of the global configuration
(:class:`~errorgroups.models.CacheConfig`).
"""

from errorgroups.cache.cache import DEFAULT_TTL_SECONDS, MemoryCache

__all__ = ["DEFAULT_TTL_SECONDS", "MemoryCache"]
