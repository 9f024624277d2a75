"""Static bearer token provider.

See Also:
    :class:`~errorgroups.plugins.bearer.plugin.BearerAuthPlugin`
"""

from errorgroups.plugins.bearer.plugin import BearerAuthPlugin

__all__ = ["BearerAuthPlugin"]
