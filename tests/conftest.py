"""Shared test fixtures for errorgroups.

Provides isolated config directories, a sample profile, a controllable
clock for the result cache, canned Error Reporting payloads, and a
CLI runner. Fixtures are discovered by pytest automatically.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import pytest

from errorgroups.models import AuthConfig, Profile, RequestConfig
from errorgroups.output import OutputFormat, OutputManager, reset_output, set_output


# ---------------------------------------------------------------------------
# Auto-reset global output state between tests
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _reset_output_between_tests() -> None:
    """Reset the global OutputManager after every test.

    The OutputManager keeps references to sys.stdout/sys.stderr from the
    moment it was created. CliRunner swaps those streams for the duration
    of an invocation, so a manager left over from one test would write to
    a closed file in the next.
    """
    yield
    reset_output()


# ---------------------------------------------------------------------------
# Clock
# ---------------------------------------------------------------------------


class FakeClock:
    """A monotonic clock that only moves when told to."""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


# ---------------------------------------------------------------------------
# Payload fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def sample_record() -> dict[str, Any]:
    """One ``ErrorGroupStats`` record exactly as the API encodes it."""
    return {
        "group": {
            "name": "projects/my-project/groups/abc123",
            "groupId": "abc123",
            "trackingIssues": [{"url": "https://tracker.example.com/1"}],
            "resolutionStatus": "OPEN",
        },
        "count": "42",
        "affectedUsersCount": "7",
        "timedCounts": [
            {
                "count": "40",
                "startTime": "2020-01-01T00:00:00Z",
                "endTime": "2020-01-02T00:00:00Z",
            },
            {
                "count": "2",
                "startTime": "2020-01-02T00:00:00Z",
                "endTime": "2020-01-03T00:00:00Z",
            },
        ],
        "firstSeenTime": "2020-01-01T00:00:00.123456789Z",
        "lastSeenTime": "2020-01-02T12:00:00Z",
        "numAffectedServices": "1",
        "affectedServices": [{"service": "frontend", "version": "v1"}],
        "representative": {
            "message": "TypeError: x is undefined\n    at main.js:1",
            "eventTime": "2020-01-02T12:00:00Z",
            "serviceContext": {"service": "frontend"},
        },
    }


# ---------------------------------------------------------------------------
# Profile fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def sample_profile() -> Profile:
    """A profile for project ``my-project`` with a bearer token from ``$TEST_TOKEN``."""
    return Profile(
        name="test",
        project_id="my-project",
        base_url="https://errors.example.com",
        auth=AuthConfig(type="bearer", source="env:TEST_TOKEN"),
        request=RequestConfig(timeout=5),
    )


# ---------------------------------------------------------------------------
# Config isolation fixture
# ---------------------------------------------------------------------------


@pytest.fixture
def isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Isolate configuration to a temporary directory.

    Points XDG_CONFIG_HOME and XDG_DATA_HOME at subdirectories of
    tmp_path, forces the XDG layout, clears ERRORGROUPS_* variables and
    changes the working directory to tmp_path.

    Returns:
        The tmp_path root directory for additional file creation.
    """
    monkeypatch.setattr("errorgroups.config._is_xdg_platform", lambda: True)
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "config"))
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "data"))

    for var in ["ERRORGROUPS_PROFILE", "ERRORGROUPS_PROJECT"]:
        monkeypatch.delenv(var, raising=False)

    monkeypatch.chdir(tmp_path)
    return tmp_path


# ---------------------------------------------------------------------------
# Output fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def quiet_output() -> OutputManager:
    """Install a PLAIN-format, quiet OutputManager for the duration of a test."""
    output = OutputManager(format=OutputFormat.PLAIN, quiet=True)
    set_output(output)
    yield output
    reset_output()


@pytest.fixture
def plain_output() -> OutputManager:
    """Install a colourless PLAIN OutputManager that keeps info lines."""
    output = OutputManager(format=OutputFormat.PLAIN, no_color=True)
    set_output(output)
    yield output
    reset_output()


# ---------------------------------------------------------------------------
# CLI runner fixture
# ---------------------------------------------------------------------------


@pytest.fixture
def cli_runner():
    from typer.testing import CliRunner

    return CliRunner()
