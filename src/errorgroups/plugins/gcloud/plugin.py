"""Access tokens from the Google Cloud SDK.

Runs ``gcloud auth print-access-token`` (or the command configured in
``AuthConfig.gcloud_command``) and sends the printed token as a Bearer
header. gcloud access tokens are valid for one hour; the token is reused
until :data:`TOKEN_LIFETIME_SECONDS` minus a 60-second margin has passed.
"""

from __future__ import annotations

import shlex
import subprocess
import time

from errorgroups.auth.base import AuthPlugin, AuthResult
from errorgroups.exceptions import AuthFailure
from errorgroups.models import AuthConfig

TOKEN_LIFETIME_SECONDS = 3600.0
_EXPIRY_MARGIN_SECONDS = 60.0


class GcloudAuthPlugin(AuthPlugin):
    """Authenticate with the active ``gcloud`` account."""

    def __init__(self) -> None:
        self._cached_token: str | None = None
        self._token_expiry: float = 0.0

    @property
    def auth_type(self) -> str:
        return "gcloud"

    def authenticate(self, auth_config: AuthConfig) -> AuthResult:
        if self._cached_token and time.monotonic() < (
            self._token_expiry - _EXPIRY_MARGIN_SECONDS
        ):
            return AuthResult(headers={"Authorization": f"Bearer {self._cached_token}"})

        self._cached_token = self._print_access_token(auth_config.gcloud_command)
        self._token_expiry = time.monotonic() + TOKEN_LIFETIME_SECONDS
        return AuthResult(headers={"Authorization": f"Bearer {self._cached_token}"})

    def refresh(self, auth_config: AuthConfig) -> AuthResult:
        self._cached_token = None
        self._token_expiry = 0.0
        return self.authenticate(auth_config)

    def _print_access_token(self, command: str) -> str:
        """Run *command* and return its stripped stdout.

        Raises:
            AuthFailure: If the command is missing, fails, times out, or
                prints nothing.
        """
        try:
            completed = subprocess.run(
                shlex.split(command),
                capture_output=True,
                text=True,
                timeout=60,
                check=True,
            )
        except FileNotFoundError as exc:
            raise AuthFailure(f"Cannot run '{command}': {exc}") from exc
        except subprocess.TimeoutExpired as exc:
            raise AuthFailure(f"'{command}' timed out") from exc
        except subprocess.CalledProcessError as exc:
            detail = (exc.stderr or "").strip()
            raise AuthFailure(
                f"'{command}' exited with status {exc.returncode}: {detail}"
            ) from exc

        token = completed.stdout.strip()
        if not token:
            raise AuthFailure(f"'{command}' did not print an access token")
        return token
