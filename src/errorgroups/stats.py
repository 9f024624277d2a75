"""Cached access to error-group statistics.

:class:`GroupStatsCache` sits between callers and the
:class:`~errorgroups.client.gateway.RequestGateway`. A listing is fetched
once, deserialized, and then served from an in-memory
:class:`~errorgroups.cache.MemoryCache` for an hour.

Cache keys are built from the only two filters the listing supports, the
service name and the group id (see :func:`cache_key`). The page size is
*not* part of the key: ``list_groups(5)`` followed by ``list_groups(50)``
within the TTL returns the five groups fetched by the first call. Treat
``page_size`` as a hint that only matters on a cache miss.

Any mutation flushes the whole cache, because a group's tracking issue is
embedded in every listing that contains it.

There is no locking. Two concurrent misses on the same key both fetch and
the last one to finish wins; a flush can race a fetch that is still in
flight and be overwritten by its (now stale) result.
"""

from __future__ import annotations

from typing import Any, Optional, TypedDict

from errorgroups.cache import MemoryCache
from errorgroups.client.gateway import RequestGateway
from errorgroups.models import ErrorGroup, ErrorGroupStats
from errorgroups.output import info
from errorgroups.serialization import deserialize

SECONDS_IN_DAY = 60 * 60 * 24
DEFAULT_PAGE_SIZE = 20

ALL_SERVICES = "ALL_SERVICES"
NO_GROUP = "NO_GROUP"

GroupStatsQuery = TypedDict(
    "GroupStatsQuery",
    {"pageSize": int, "groupId": str, "serviceFilter.service": str},
    total=False,
)
"""Caller-supplied ``groupStats.list`` parameters."""

_DEFAULT_QUERY: dict[str, Any] = {
    "timeRange.period": "PERIOD_1_DAY",
    "timedCountDuration": f"{SECONDS_IN_DAY}s",
}


def cache_key(service: Optional[str] = None, group_id: Optional[str] = None) -> str:
    """Return the cache key for a listing filtered by *service* and *group_id*.

    Empty or missing filters fall back to ``ALL_SERVICES`` / ``NO_GROUP``,
    and line breaks are stripped so a caller-supplied name cannot forge a
    multi-line key.

    Example::

        >>> cache_key()
        'ALL_SERVICES-NO_GROUP'
        >>> cache_key("frontend", "abc")
        'frontend-abc'
    """
    key = f"{service or ALL_SERVICES}-{group_id or NO_GROUP}"
    return key.replace("\n", "").replace("\r", "")


class GroupStatsCache:
    """Fetch, deserialize and cache error-group statistics for one project.

    Args:
        gateway: An entered :class:`~errorgroups.client.gateway.RequestGateway`.
        cache: The cache to use. Defaults to a fresh one-hour
            :class:`~errorgroups.cache.MemoryCache`; pass your own to share
            it, to change the TTL, or to drive it with a fake clock.

    Example::

        async with RequestGateway(profile, auth_manager=am) as gateway:
            stats = GroupStatsCache(gateway)
            top = await stats.list_groups(page_size=10)
            one = await stats.get_group(top[0].group.group_id)
    """

    def __init__(self, gateway: RequestGateway, cache: Optional[MemoryCache] = None) -> None:
        self._gateway = gateway
        self._cache = cache if cache is not None else MemoryCache()

    @property
    def cache(self) -> MemoryCache:
        return self._cache

    async def list_groups(
        self, page_size: int = DEFAULT_PAGE_SIZE
    ) -> tuple[ErrorGroupStats, ...]:
        """List error groups across all services."""
        info(f"Fetching first {page_size} error groups")
        return await self._get_groups({"pageSize": page_size})

    async def list_service_groups(
        self, service_name: str, page_size: int = DEFAULT_PAGE_SIZE
    ) -> tuple[ErrorGroupStats, ...]:
        """List error groups reported by one service."""
        info(f"Fetching first {page_size} error groups for {service_name}")
        return await self._get_groups(
            {"pageSize": page_size, "serviceFilter.service": service_name}
        )

    async def get_group(self, group_id: str) -> Optional[ErrorGroupStats]:
        """Return stats for one group, or ``None`` if the service has none for *group_id*."""
        info(f'Fetching group stats for error group "{group_id}"')
        groups = await self._get_groups({"groupId": group_id})
        return groups[0] if groups else None

    async def set_group_issue(self, group_id: str, issue_url: str) -> ErrorGroup:
        """Attach a tracking issue to a group and return the updated group.

        The whole cache is flushed before the request is sent, whether or
        not it succeeds.

        See https://cloud.google.com/error-reporting/reference/rest/v1beta1/projects.groups/update
        """
        info(f'Updating tracking issue for error group "{group_id}" to "{issue_url}"')
        self._cache.flush_all()
        data = await self._gateway.call(
            f"groups/{group_id}",
            "PUT",
            {"trackingIssues": [{"url": issue_url}]},
        )
        return ErrorGroup.model_validate(data)

    async def _get_groups(self, opts: GroupStatsQuery) -> tuple[ErrorGroupStats, ...]:
        """Serve a listing from the cache, or fetch and cache it.

        See https://cloud.google.com/error-reporting/reference/rest/v1beta1/projects.groupStats/list
        """
        key = cache_key(opts.get("serviceFilter.service"), opts.get("groupId"))
        error_groups: Optional[tuple[ErrorGroupStats, ...]] = self._cache.get(key)

        if error_groups is None:
            payload = await self._gateway.call("groupStats", "GET", {**_DEFAULT_QUERY, **opts})
            records = payload.get("errorGroupStats")
            if not isinstance(records, list):
                records = []
            error_groups = tuple(deserialize(record) for record in records)
            self._cache.set(key, error_groups)
        else:
            info(f'Returning error reporting results from local cache for key "{key}"')

        return error_groups
