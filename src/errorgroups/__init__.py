"""errorgroups -- caching client for the Cloud Error Reporting API.

This package fetches aggregated error groups for a project, converts the
string-typed wire payload into typed models, and lets callers attach a
tracking issue to a group. Listings are cached in memory for an hour and
the whole cache is flushed whenever a group is updated.

Typical usage::

    from errorgroups import GroupStatsCache, RequestGateway

    async with RequestGateway(profile, auth_manager=manager) as gateway:
        stats = GroupStatsCache(gateway)
        groups = await stats.list_groups(page_size=10)

Modules:
    app: Typer application and CLI entry point.
    models: Pydantic models for configuration and error-group data.
    serialization: Wire-to-domain conversion of group stats.
    stats: The caching :class:`GroupStatsCache` orchestration layer.
    config: XDG-aware configuration and profile management.
    exceptions: Exception hierarchy with exit-code mapping.
    output: stdout/stderr formatting system with Rich support.
"""

__version__ = "0.1.0"

from errorgroups.cache import MemoryCache  # noqa: E402
from errorgroups.client import RequestGateway  # noqa: E402
from errorgroups.stats import GroupStatsCache  # noqa: E402

__all__ = ["GroupStatsCache", "MemoryCache", "RequestGateway", "__version__"]
