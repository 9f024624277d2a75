"""Access tokens from google-auth credentials.

With no ``key_file`` configured, credentials come from
:func:`google.auth.default`: the ``GOOGLE_APPLICATION_CREDENTIALS`` key,
``gcloud auth application-default login``, or the metadata server when
running on Google Cloud. With ``key_file`` set, that service account key
is used instead. Either way the credentials are requested for
``AuthConfig.scopes`` (the ``cloud-platform`` scope by default).

Credentials are loaded once and refreshed only when google-auth no longer
considers them valid, so most calls reuse the current access token.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Optional

import google.auth
from google.auth.exceptions import GoogleAuthError
from google.auth.transport.requests import Request
from google.oauth2 import service_account

from errorgroups.auth.base import AuthPlugin, AuthResult
from errorgroups.exceptions import AuthFailure
from errorgroups.models import AuthConfig


class ApplicationDefaultAuthPlugin(AuthPlugin):
    """Authenticate with Google credentials resolved by google-auth."""

    def __init__(self) -> None:
        self._credentials: Optional[Any] = None

    @property
    def auth_type(self) -> str:
        return "application_default"

    def authenticate(self, auth_config: AuthConfig) -> AuthResult:
        if self._credentials is None:
            self._credentials = self._load_credentials(auth_config)

        credentials = self._credentials
        if not credentials.valid:
            try:
                credentials.refresh(Request())
            except GoogleAuthError as exc:
                raise AuthFailure(f"Could not refresh Google credentials: {exc}") from exc

        return AuthResult(headers={"Authorization": f"Bearer {credentials.token}"})

    def refresh(self, auth_config: AuthConfig) -> AuthResult:
        self._credentials = None
        return self.authenticate(auth_config)

    def validate_config(self, auth_config: AuthConfig) -> list[str]:
        errors: list[str] = []
        if auth_config.key_file and not Path(auth_config.key_file).expanduser().is_file():
            errors.append(f"Service account key file not found: {auth_config.key_file}")
        if not auth_config.scopes:
            errors.append("At least one OAuth2 scope is required")
        return errors

    def _load_credentials(self, auth_config: AuthConfig) -> Any:
        """Resolve credentials for *auth_config*.

        Raises:
            AuthFailure: If no credentials can be found or the key file
                cannot be read.
        """
        if auth_config.key_file:
            path = Path(auth_config.key_file).expanduser()
            try:
                return service_account.Credentials.from_service_account_file(
                    str(path), scopes=auth_config.scopes
                )
            except (OSError, ValueError) as exc:
                raise AuthFailure(f"Cannot load service account key {path}: {exc}") from exc

        try:
            credentials, _project = google.auth.default(scopes=auth_config.scopes)
        except GoogleAuthError as exc:
            raise AuthFailure(f"No Application Default Credentials: {exc}") from exc
        return credentials
