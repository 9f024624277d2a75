"""Tests for the asynchronous RequestGateway."""

from __future__ import annotations

import asyncio
import json
from typing import Any, Callable, Optional
from unittest.mock import MagicMock

import httpx
import pytest

from errorgroups.auth.base import AuthResult
from errorgroups.auth.manager import AuthManager, create_default_manager
from errorgroups.client import RequestGateway
from errorgroups.exceptions import (
    AuthFailure,
    ConfigError,
    InvalidUsageError,
    RequestFailure,
    TransportFailure,
)
from errorgroups.exit_codes import (
    EXIT_AUTH_FAILURE,
    EXIT_CONNECTION_ERROR,
    EXIT_SERVER_ERROR,
)
from errorgroups.models import AuthConfig, Profile


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _make_profile(
    base_url: str = "https://errors.example.com",
    auth: Optional[AuthConfig] = None,
) -> Profile:
    return Profile(name="test", project_id="my-project", base_url=base_url, auth=auth)


def _call(
    handler: Callable[[httpx.Request], httpx.Response],
    endpoint: str,
    method: str,
    body: Optional[dict[str, Any]] = None,
    profile: Optional[Profile] = None,
    auth_manager: Optional[AuthManager] = None,
) -> dict[str, Any]:
    async def _go() -> dict[str, Any]:
        async with RequestGateway(
            profile or _make_profile(),
            auth_manager=auth_manager,
            transport=httpx.MockTransport(handler),
        ) as gateway:
            return await gateway.call(endpoint, method, body)

    return asyncio.run(_go())


@pytest.fixture(autouse=True)
def _quiet(quiet_output):
    yield


# ---------------------------------------------------------------------------
# Context manager
# ---------------------------------------------------------------------------


class TestContextManager:
    def test_enter_creates_and_exit_closes_client(self) -> None:
        gateway = RequestGateway(_make_profile())

        async def _go() -> None:
            assert gateway._client is None
            async with gateway:
                assert gateway._client is not None
            assert gateway._client is None

        asyncio.run(_go())

    def test_call_outside_context_raises(self) -> None:
        gateway = RequestGateway(_make_profile())
        with pytest.raises(InvalidUsageError):
            asyncio.run(gateway.call("groupStats", "GET"))

    def test_base_url(self) -> None:
        gateway = RequestGateway(_make_profile(base_url="https://errors.example.com/"))
        assert gateway.base_url == "https://errors.example.com/v1beta1/projects/my-project/"


# ---------------------------------------------------------------------------
# Requests
# ---------------------------------------------------------------------------


class TestGet:
    def test_body_becomes_query_parameters(self) -> None:
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json={"ok": True})

        result = _call(handler, "groupStats", "GET", {"pageSize": 5, "groupId": None})

        assert result == {"ok": True}
        assert str(seen[0].url) == (
            "https://errors.example.com/v1beta1/projects/my-project/groupStats?pageSize=5"
        )
        assert seen[0].content == b""

    def test_method_is_case_insensitive(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            assert request.method == "GET"
            return httpx.Response(200, json={})

        assert _call(handler, "groupStats", "get") == {}


class TestPut:
    def test_body_is_json_payload(self) -> None:
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json={"groupId": "abc"})

        body = {"trackingIssues": [{"url": "https://tracker.example.com/1"}]}
        result = _call(handler, "groups/abc", "PUT", body)

        assert result == {"groupId": "abc"}
        assert seen[0].url.path == "/v1beta1/projects/my-project/groups/abc"
        assert seen[0].headers["content-type"] == "application/json"
        assert json.loads(seen[0].content) == body
        assert seen[0].url.query == b""

    def test_empty_response_is_empty_dict(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200)

        assert _call(handler, "groups/abc", "PUT", {}) == {}


class TestUnsupportedMethod:
    @pytest.mark.parametrize("method", ["POST", "DELETE", "PATCH"])
    def test_rejected_before_sending(self, method: str) -> None:
        handler = MagicMock()
        with pytest.raises(InvalidUsageError):
            _call(handler, "groups/abc", method)
        handler.assert_not_called()

    def test_unreadable_credential_source_is_auth_failure(
        self, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.delenv("MISSING_TOKEN", raising=False)
        profile = _make_profile(auth=AuthConfig(type="bearer", source="env:MISSING_TOKEN"))
        handler = MagicMock()

        with pytest.raises(AuthFailure, match="MISSING_TOKEN") as exc_info:
            _call(
                handler,
                "groupStats",
                "GET",
                profile=profile,
                auth_manager=create_default_manager(),
            )
        assert isinstance(exc_info.value, RequestFailure)
        assert isinstance(exc_info.value.__cause__, ConfigError)
        assert exc_info.value.exit_code == EXIT_AUTH_FAILURE
        handler.assert_not_called()


# ---------------------------------------------------------------------------
# Authentication
# ---------------------------------------------------------------------------


class TestAuthentication:
    def test_credentials_requested_on_every_call(self) -> None:
        profile = _make_profile(auth=AuthConfig(type="bearer", source="env:TOKEN"))
        manager = MagicMock(spec=AuthManager)
        manager.authenticate.return_value = AuthResult(
            headers={"Authorization": "Bearer t0k"}, params={"key": "k1"}
        )
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json={})

        async def _go() -> None:
            async with RequestGateway(
                profile, auth_manager=manager, transport=httpx.MockTransport(handler)
            ) as gateway:
                await gateway.call("groupStats", "GET", {"pageSize": 1})
                await gateway.call("groups/a", "PUT", {})

        asyncio.run(_go())

        assert manager.authenticate.call_count == 2
        manager.authenticate.assert_called_with(profile)
        assert all(r.headers["authorization"] == "Bearer t0k" for r in seen)
        assert seen[0].url.params["key"] == "k1"
        assert seen[0].url.params["pageSize"] == "1"

    def test_no_auth_section_skips_manager(self) -> None:
        manager = MagicMock(spec=AuthManager)

        def handler(request: httpx.Request) -> httpx.Response:
            assert "authorization" not in request.headers
            return httpx.Response(200, json={})

        _call(handler, "groupStats", "GET", auth_manager=manager)
        manager.authenticate.assert_not_called()

    def test_credential_failure_propagates(self) -> None:
        profile = _make_profile(auth=AuthConfig(type="gcloud"))
        manager = MagicMock(spec=AuthManager)
        manager.authenticate.side_effect = AuthFailure("no token")
        handler = MagicMock()

        with pytest.raises(AuthFailure, match="no token"):
            _call(handler, "groupStats", "GET", profile=profile, auth_manager=manager)
        handler.assert_not_called()


# ---------------------------------------------------------------------------
# Error mapping
# ---------------------------------------------------------------------------


class TestErrors:
    @pytest.mark.parametrize("status", [401, 403])
    def test_auth_statuses(self, status: int) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(
                status, json={"error": {"code": status, "message": "denied"}}
            )

        with pytest.raises(AuthFailure, match="denied") as exc_info:
            _call(handler, "groupStats", "GET")
        assert isinstance(exc_info.value.__cause__, httpx.HTTPStatusError)

    @pytest.mark.parametrize("status", [400, 404, 429, 500, 503])
    def test_other_statuses(self, status: int) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(status, json={"error": {"message": "nope"}})

        with pytest.raises(TransportFailure) as exc_info:
            _call(handler, "groupStats", "GET")
        assert exc_info.value.status_code == status
        assert exc_info.value.exit_code == EXIT_SERVER_ERROR
        assert f"HTTP {status}: nope" in str(exc_info.value)
        assert isinstance(exc_info.value.__cause__, httpx.HTTPStatusError)

    def test_non_json_error_body(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(502, text="Bad Gateway")

        with pytest.raises(TransportFailure, match="HTTP 502: Bad Gateway"):
            _call(handler, "groupStats", "GET")

    def test_network_error(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        with pytest.raises(TransportFailure) as exc_info:
            _call(handler, "groupStats", "GET")
        assert exc_info.value.status_code is None
        assert exc_info.value.exit_code == EXIT_CONNECTION_ERROR
        assert isinstance(exc_info.value.__cause__, httpx.ConnectError)

    def test_timeout(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ReadTimeout("timed out", request=request)

        with pytest.raises(TransportFailure) as exc_info:
            _call(handler, "groupStats", "GET")
        assert isinstance(exc_info.value.__cause__, httpx.TimeoutException)

    def test_non_json_success_body(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, text="<html></html>")

        with pytest.raises(TransportFailure, match="not JSON"):
            _call(handler, "groupStats", "GET")

    def test_no_retry(self) -> None:
        calls: list[int] = []

        def handler(request: httpx.Request) -> httpx.Response:
            calls.append(1)
            return httpx.Response(503)

        with pytest.raises(TransportFailure):
            _call(handler, "groupStats", "GET")
        assert len(calls) == 1
