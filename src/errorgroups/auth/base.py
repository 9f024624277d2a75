"""Abstract base class for credential providers.

- :class:`AuthResult` -- the headers and query parameters a provider wants
  added to every request.
- :class:`AuthPlugin` -- the interface every provider implements.

Providers are synchronous. :class:`~errorgroups.client.gateway.RequestGateway`
runs them in a worker thread so that token fetches do not block the event
loop. A provider that talks to a token endpoint is expected to cache the
token itself; the gateway asks for credentials on every call.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from errorgroups.models import AuthConfig


class AuthResult:
    """Authentication artifacts to merge into an outgoing request.

    Args:
        headers: HTTP headers to add (e.g. ``{"Authorization": "Bearer ..."}``).
        params: Query-string parameters to add (e.g. ``{"key": "..."}``).
    """

    def __init__(
        self,
        headers: dict[str, str] | None = None,
        params: dict[str, str] | None = None,
    ):
        self.headers = headers or {}
        self.params = params or {}


class AuthPlugin(ABC):
    """A credential provider selected by ``AuthConfig.type``."""

    @property
    @abstractmethod
    def auth_type(self) -> str:
        """The ``AuthConfig.type`` value this plugin handles, e.g. ``"gcloud"``."""
        ...

    @abstractmethod
    def authenticate(self, auth_config: AuthConfig) -> AuthResult:
        """Return credentials for the next request.

        Raises:
            AuthFailure: If no credential can be obtained.
            ConfigError: If the configured credential source is unusable.
        """
        ...

    def refresh(self, auth_config: AuthConfig) -> AuthResult:
        """Discard cached credentials and authenticate again.

        The default implementation just calls :meth:`authenticate`.
        """
        return self.authenticate(auth_config)

    def validate_config(self, auth_config: AuthConfig) -> list[str]:
        """Return human-readable problems with *auth_config*; empty when valid."""
        return []
