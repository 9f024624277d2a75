"""Authenticated, non-caching calls against project-scoped API resources.

Every call goes to ``{base_url}/v1beta1/projects/{project_id}/{endpoint}``.
GET calls carry their body as query parameters; PUT calls carry it as a
JSON payload. The gateway performs no retries: a failed call raises once,
as a :class:`~errorgroups.exceptions.RequestFailure` subclass chained to
the underlying :mod:`httpx` error. Timeouts are whatever the profile's
:class:`~errorgroups.models.RequestConfig` sets on the transport.
"""

from __future__ import annotations

import asyncio
from collections.abc import Mapping
from typing import Any, Optional

import httpx

from errorgroups.auth.base import AuthResult
from errorgroups.auth.manager import AuthManager
from errorgroups.exceptions import (
    AuthFailure,
    ConfigError,
    InvalidUsageError,
    TransportFailure,
)
from errorgroups.models import Profile
from errorgroups.output import debug

API_VERSION = "v1beta1"
SUPPORTED_METHODS = ("GET", "PUT")


class RequestGateway:
    """Asynchronous gateway to one Google Cloud project's Error Reporting API.

    Must be used as an async context manager; the underlying
    :class:`httpx.AsyncClient` lives for the duration of the ``async with``
    block.

    Args:
        profile: Connection profile providing ``base_url``, ``project_id``,
            auth config, and request settings (timeout, SSL verify).
        auth_manager: Resolves credentials before every call. When
            ``None``, or when the profile has no auth section, requests
            are sent without credentials.
        transport: Optional :mod:`httpx` transport, e.g.
            :class:`httpx.MockTransport` in tests.

    Example::

        async with RequestGateway(profile, auth_manager=am) as gateway:
            group = await gateway.call("groups/abc", "PUT", {"trackingIssues": []})
    """

    def __init__(
        self,
        profile: Profile,
        auth_manager: Optional[AuthManager] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._profile = profile
        self._auth_manager = auth_manager
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    @property
    def base_url(self) -> str:
        """Project-scoped API root, always ending in ``/``."""
        root = self._profile.base_url.rstrip("/")
        return f"{root}/{API_VERSION}/projects/{self._profile.project_id}/"

    # ------------------------------------------------------------------ #
    # Async context manager
    # ------------------------------------------------------------------ #

    async def __aenter__(self) -> RequestGateway:
        config = self._profile.request
        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=config.timeout,
            verify=config.verify_ssl,
            follow_redirects=True,
            transport=self._transport,
        )
        return self

    async def __aexit__(self, *args: object) -> None:
        if self._client:
            await self._client.aclose()
            self._client = None

    # ------------------------------------------------------------------ #
    # Public API
    # ------------------------------------------------------------------ #

    async def call(
        self,
        endpoint: str,
        method: str,
        body: Optional[Mapping[str, Any]] = None,
    ) -> dict[str, Any]:
        """Make one authenticated request and return its decoded JSON body.

        Args:
            endpoint: Resource path relative to the project, e.g.
                ``"groupStats"`` or ``"groups/abc123"``.
            method: ``"GET"`` or ``"PUT"`` (case-insensitive).
            body: Query parameters for GET (``None`` values are dropped),
                or the JSON payload for PUT.

        Returns:
            The parsed JSON response; ``{}`` for an empty body.

        Raises:
            InvalidUsageError: For any other method, or outside ``async with``.
            AuthFailure: If credentials cannot be obtained, or on HTTP 401/403.
            TransportFailure: On network errors, timeouts, any other
                non-2xx status, or a non-JSON body.
        """
        method = method.upper()
        if method not in SUPPORTED_METHODS:
            raise InvalidUsageError(
                f"Unsupported method '{method}'; expected one of {', '.join(SUPPORTED_METHODS)}"
            )
        if self._client is None:
            raise InvalidUsageError("RequestGateway must be used as an async context manager")

        auth = await self._authenticate()
        headers: dict[str, str] = dict(auth.headers)
        params: dict[str, Any] = dict(auth.params)

        kwargs: dict[str, Any] = {}
        if method == "GET":
            params.update({k: v for k, v in (body or {}).items() if v is not None})
        elif body is not None:
            kwargs["json"] = dict(body)

        path = endpoint.lstrip("/")
        debug(f"{method} {self.base_url}{path}")

        try:
            response = await self._client.request(
                method, path, params=params, headers=headers, **kwargs
            )
        except httpx.HTTPError as exc:
            raise TransportFailure(f"{method} {path} failed: {exc}") from exc

        self._map_response_error(response)

        if not response.content:
            return {}
        try:
            return response.json()
        except ValueError as exc:
            raise TransportFailure(
                f"{method} {path} returned a body that is not JSON",
                status_code=response.status_code,
            ) from exc

    # ------------------------------------------------------------------ #
    # Private helpers
    # ------------------------------------------------------------------ #

    async def _authenticate(self) -> AuthResult:
        if self._auth_manager is None or self._profile.auth is None:
            return AuthResult()
        try:
            return await asyncio.to_thread(self._auth_manager.authenticate, self._profile)
        except ConfigError as exc:
            # An unreadable credential source is a failure to authenticate.
            raise AuthFailure(str(exc)) from exc

    def _map_response_error(self, response: httpx.Response) -> None:
        """Raise a typed exception for a non-2xx status."""
        status = response.status_code
        if 200 <= status < 300:
            return

        msg = _error_message(response)
        full_msg = f"HTTP {status}: {msg}" if msg else f"HTTP {status}"

        try:
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            if status in (401, 403):
                raise AuthFailure(full_msg) from exc
            raise TransportFailure(full_msg, status_code=status) from exc
        raise TransportFailure(full_msg, status_code=status)


def _error_message(response: httpx.Response) -> str:
    """Pull the message out of a Google API error body (``{"error": {"message": ...}}``)."""
    try:
        detail = response.json()
    except ValueError:
        return response.text[:200] if response.text else ""

    if isinstance(detail, dict):
        inner = detail.get("error")
        if isinstance(inner, dict):
            return str(inner.get("message") or inner.get("status") or "")
        return str(inner or detail.get("message") or "")
    return str(detail)
