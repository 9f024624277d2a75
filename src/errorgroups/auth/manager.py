"""Auth manager -- registry and dispatcher for credential providers.

:class:`AuthManager` maps auth-type strings to
:class:`~errorgroups.auth.base.AuthPlugin` instances and exposes the single
:meth:`~AuthManager.authenticate` method the gateway calls before each
request. :func:`create_default_manager` returns one with every built-in
provider registered.
"""

from __future__ import annotations

from errorgroups.auth.base import AuthPlugin, AuthResult
from errorgroups.exceptions import AuthFailure
from errorgroups.models import Profile


class AuthManager:
    """Registry and dispatcher for credential providers.

    Example::

        from errorgroups.auth import AuthManager
        from errorgroups.plugins.bearer import BearerAuthPlugin

        manager = AuthManager()
        manager.register(BearerAuthPlugin())
        result = manager.authenticate(profile)
    """

    def __init__(self) -> None:
        self._plugins: dict[str, AuthPlugin] = {}

    def register(self, plugin: AuthPlugin) -> None:
        """Register *plugin* under its ``auth_type``, replacing any previous one."""
        self._plugins[plugin.auth_type] = plugin

    def get_plugin(self, auth_type: str) -> AuthPlugin:
        """Return the plugin registered for *auth_type*.

        Raises:
            AuthFailure: If no plugin is registered for *auth_type*.
        """
        plugin = self._plugins.get(auth_type)
        if plugin is None:
            available = ", ".join(sorted(self._plugins)) or "(none)"
            raise AuthFailure(
                f"No auth plugin registered for type '{auth_type}'. "
                f"Available types: {available}"
            )
        return plugin

    def authenticate(self, profile: Profile) -> AuthResult:
        """Return credentials for *profile*.

        Returns an empty :class:`~errorgroups.auth.base.AuthResult` when the
        profile has no auth section.

        Raises:
            AuthFailure: If the auth type is unknown or the plugin fails.
        """
        if profile.auth is None:
            return AuthResult()
        plugin = self.get_plugin(profile.auth.type)
        return plugin.authenticate(profile.auth)

    def list_types(self) -> list[str]:
        return sorted(self._plugins.keys())


def create_default_manager() -> AuthManager:
    """Create an :class:`AuthManager` with the built-in providers.

    - ``application_default`` -- google-auth Application Default Credentials
      or a service account key.
    - ``bearer`` -- a ready-made access token from a credential source.
    - ``gcloud`` -- a token printed by the Google Cloud SDK.
    """
    from errorgroups.plugins.application_default import ApplicationDefaultAuthPlugin
    from errorgroups.plugins.bearer import BearerAuthPlugin
    from errorgroups.plugins.gcloud import GcloudAuthPlugin

    manager = AuthManager()
    manager.register(ApplicationDefaultAuthPlugin())
    manager.register(BearerAuthPlugin())
    manager.register(GcloudAuthPlugin())
    return manager
