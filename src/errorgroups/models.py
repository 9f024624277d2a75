"""Canonical Pydantic models shared across all errorgroups modules.

The models fall into three groups:

**Configuration models** -- serialised as JSON in the user's config directory:
    :class:`AuthConfig`, :class:`RequestConfig`, :class:`CacheConfig`,
    :class:`OutputConfig`, :class:`GlobalConfig`, and :class:`Profile`.

**Wire models** -- the shape the Error Reporting API actually returns, with
numbers encoded as strings and timestamps as RFC 3339 strings:
    :class:`SerializedTimedCount` and :class:`SerializedErrorGroupStats`.

**Domain models** -- what callers receive, with real numbers and
:class:`~datetime.datetime` values:
    :class:`TrackingIssue`, :class:`ErrorGroup`, :class:`ServiceContext`,
    :class:`ErrorEvent`, :class:`TimedCount`, and :class:`ErrorGroupStats`.

Domain models are frozen and use tuples for sequences; a cached listing can
be handed to any number of callers without being mutated underneath them.
The conversion between wire and domain models lives in
:mod:`errorgroups.serialization`.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Optional, Union

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

SERVICE_URL = "https://clouderrorreporting.googleapis.com"
CLOUD_PLATFORM_SCOPE = "https://www.googleapis.com/auth/cloud-platform"

Number = Union[int, float]


# --- Configuration ---


class AuthConfig(BaseModel):
    """Authentication configuration embedded in a :class:`Profile`.

    ``type`` selects the credential provider registered with
    :class:`~errorgroups.auth.manager.AuthManager` (``application_default``,
    ``bearer`` or ``gcloud``); the remaining fields are provider specific.

    Example::

        AuthConfig(type="application_default", key_file="~/keys/reporter.json")
    """

    model_config = ConfigDict(extra="allow")

    type: str = Field(description="Auth type: application_default, bearer, gcloud")
    source: str = Field(
        default="prompt",
        description="Credential source: env:VAR, file:/path, prompt",
    )
    key_file: Optional[str] = Field(
        default=None,
        description="Service account key file; Application Default Credentials when unset",
    )
    scopes: list[str] = Field(default_factory=lambda: [CLOUD_PLATFORM_SCOPE])
    gcloud_command: str = Field(
        default="gcloud auth print-access-token",
        description="Command printing an access token for the gcloud provider",
    )


class RequestConfig(BaseModel):
    """HTTP settings applied to every call made through a profile."""

    timeout: int = Field(default=30, description="Request timeout in seconds")
    verify_ssl: bool = Field(default=True, description="Verify SSL certificates")


class CacheConfig(BaseModel):
    """In-memory result cache settings stored in :class:`GlobalConfig`."""

    enabled: bool = Field(default=True, description="Enable result caching")
    ttl_seconds: int = Field(default=3600, description="Cache TTL in seconds")
    max_entries: int = Field(
        default=1024, description="Entries kept before the least recently used is dropped"
    )


class OutputConfig(BaseModel):
    """Default output format preferences stored in :class:`GlobalConfig`."""

    format: str = Field(default="auto", description="Output format: auto, json, plain, rich")


class GlobalConfig(BaseModel):
    """User-wide configuration persisted at ``~/.config/errorgroups/config.json``."""

    default_profile: Optional[str] = None
    output: OutputConfig = Field(default_factory=OutputConfig)
    cache: CacheConfig = Field(default_factory=CacheConfig)


class Profile(BaseModel):
    """One Google Cloud project to report on, stored under ``profiles/``.

    Example::

        Profile(
            name="prod",
            project_id="my-project",
            auth=AuthConfig(type="gcloud"),
        )
    """

    model_config = ConfigDict(extra="allow")

    name: str
    project_id: str = Field(description="Google Cloud project id")
    base_url: str = Field(default=SERVICE_URL, description="Error Reporting API root")
    auth: Optional[AuthConfig] = None
    request: RequestConfig = Field(default_factory=RequestConfig)


# --- Wire format ---


class _WireModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="allow",
    )


class SerializedTimedCount(_WireModel):
    """A ``TimedErrorCount`` as sent by the API."""

    count: Any = None
    start_time: Any = None
    end_time: Any = None


class SerializedErrorGroupStats(_WireModel):
    """An ``ErrorGroupStats`` record as sent by the API.

    Fields are left untyped so that parsing a record never fails, whatever
    the service sends. Values of the wrong shape surface later as the
    invalid sentinels of :mod:`errorgroups.serialization`.
    """

    group: Any = None
    count: Any = None
    timed_counts: Any = None
    first_seen_time: Any = None
    num_affected_services: Any = None
    affected_services: Any = None
    representative: Any = None


# --- Domain ---


class _DomainModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )


class TrackingIssue(_DomainModel):
    """An external bug-tracker link attached to an error group."""

    url: str


class ErrorGroup(_DomainModel):
    """An error group and its mutable metadata.

    Unknown API fields are kept in ``model_extra`` so nothing the service
    returns is lost on a round trip through this model.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
        extra="allow",
    )

    name: Optional[str] = None
    group_id: Optional[str] = None
    tracking_issues: tuple[TrackingIssue, ...] = ()
    resolution_status: Optional[str] = None


class ServiceContext(_DomainModel):
    """A service (and optionally version) an error group was seen in."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
        extra="allow",
    )

    service: Optional[str] = None
    version: Optional[str] = None
    resource_type: Optional[str] = None


class ErrorEvent(_DomainModel):
    """The representative occurrence of a group; only its message is kept."""

    message: str = ""


class TimedCount(_DomainModel):
    """Number of occurrences within ``[start_time, end_time)``."""

    count: Number
    start_time: datetime
    end_time: datetime


class ErrorGroupStats(_DomainModel):
    """Aggregated statistics for one error group over the queried window."""

    group: ErrorGroup
    count: Number
    timed_counts: tuple[TimedCount, ...] = ()
    first_seen_time: datetime
    num_affected_services: Number
    affected_services: tuple[ServiceContext, ...] = ()
    representative: ErrorEvent = Field(default_factory=ErrorEvent)
