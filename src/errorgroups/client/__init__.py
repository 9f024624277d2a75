"""HTTP access to the Cloud Error Reporting API.

:class:`RequestGateway` wraps :class:`httpx.AsyncClient`. It resolves the
project-scoped resource URL, asks the credential provider for a token on
every call, and returns the decoded JSON body. It knows nothing about
caching or error-group semantics; that is the job of
:class:`~errorgroups.stats.GroupStatsCache`.

Example::

    from errorgroups.client import RequestGateway

    async with RequestGateway(profile, auth_manager=manager) as gateway:
        payload = await gateway.call("groupStats", "GET", {"pageSize": 5})
"""

from errorgroups.client.gateway import RequestGateway

__all__ = ["RequestGateway"]
