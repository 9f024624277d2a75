"""Bearer token authentication plugin.

Resolves an already-issued access token from the configured ``source``
(e.g. ``env:ERROR_REPORTING_TOKEN`` or ``file:~/.config/token``) and sends
it as ``Authorization: Bearer <token>``. No exchange or refresh happens
here; use the ``application_default`` or ``gcloud`` providers for
tokens that expire during a session.
"""

from __future__ import annotations

from errorgroups.auth.base import AuthPlugin, AuthResult
from errorgroups.config import resolve_credential
from errorgroups.models import AuthConfig


class BearerAuthPlugin(AuthPlugin):
    """Send a token from ``auth_config.source`` as a Bearer header."""

    @property
    def auth_type(self) -> str:
        return "bearer"

    def authenticate(self, auth_config: AuthConfig) -> AuthResult:
        token = resolve_credential(auth_config.source)
        return AuthResult(headers={"Authorization": f"Bearer {token}"})

    def validate_config(self, auth_config: AuthConfig) -> list[str]:
        errors: list[str] = []
        if not auth_config.source:
            errors.append("Bearer auth requires a 'source' for the token")
        return errors
