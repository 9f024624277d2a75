"""Google Cloud SDK token provider.

See Also:
    :class:`~errorgroups.plugins.gcloud.plugin.GcloudAuthPlugin`
"""

from errorgroups.plugins.gcloud.plugin import GcloudAuthPlugin

__all__ = ["GcloudAuthPlugin"]
