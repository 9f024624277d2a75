"""Google Application Default Credentials and service account keys.

See Also:
    :class:`~errorgroups.plugins.application_default.plugin.ApplicationDefaultAuthPlugin`
"""

from errorgroups.plugins.application_default.plugin import ApplicationDefaultAuthPlugin

__all__ = ["ApplicationDefaultAuthPlugin"]
