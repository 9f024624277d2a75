"""Pluggable credential providers for errorgroups.

The Error Reporting API takes OAuth2 bearer tokens with the
``cloud-platform`` scope. How that token is obtained is up to a plugin:

- :class:`AuthPlugin` -- abstract base class for a credential provider.
- :class:`AuthManager` -- registry mapping ``AuthConfig.type`` strings to
  plugin instances and dispatching authentication for a profile.
- :func:`create_default_manager` -- a manager with every built-in plugin.

Typical usage::

    from errorgroups.auth import create_default_manager

    manager = create_default_manager()
    auth_result = manager.authenticate(profile)
"""

from errorgroups.auth.base import AuthPlugin, AuthResult
from errorgroups.auth.manager import AuthManager, create_default_manager

__all__ = [
    "AuthPlugin",
    "AuthResult",
    "AuthManager",
    "create_default_manager",
]
