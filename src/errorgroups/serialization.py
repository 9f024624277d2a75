"""Conversion of Error Reporting wire records into domain models.

The API encodes 64-bit counters as JSON strings and timestamps as RFC 3339
strings. :func:`deserialize` turns one ``ErrorGroupStats`` record into an
:class:`~errorgroups.models.ErrorGroupStats` with real numbers and
timezone-aware :class:`~datetime.datetime` values.

The conversion is best effort and never raises on bad data. A value that
cannot be parsed becomes a well-defined sentinel instead:

* numbers -> ``math.nan`` (test with :func:`math.isnan`)
* timestamps -> :data:`INVALID_TIMESTAMP` (test with :func:`is_valid_timestamp`)

so that one malformed record degrades a listing instead of failing it.
"""

from __future__ import annotations

import math
import re
from collections.abc import Mapping
from datetime import datetime, timezone
from typing import Any, Optional, Union

from pydantic import ValidationError

from errorgroups.models import (
    ErrorEvent,
    ErrorGroup,
    ErrorGroupStats,
    Number,
    SerializedErrorGroupStats,
    SerializedTimedCount,
    ServiceContext,
    TimedCount,
    TrackingIssue,
)

INVALID_TIMESTAMP = datetime.min.replace(tzinfo=timezone.utc)
"""Sentinel for a timestamp that could not be parsed."""

# Python's fromisoformat accepts at most microseconds; the API sends nanoseconds.
_FRACTION_RE = re.compile(r"(\.\d{6})\d+")


def coerce_number(value: Any) -> Number:
    """Convert a wire counter to ``int`` (or ``float`` when it has a fraction).

    Args:
        value: Usually a decimal string such as ``"42"``. Numbers are
            passed through unchanged.

    Returns:
        The parsed number, or ``math.nan`` if *value* is missing or not
        numeric.
    """
    if isinstance(value, bool):
        return math.nan
    if isinstance(value, (int, float)):
        return value
    if not isinstance(value, str) or not value.strip():
        return math.nan
    text = value.strip()
    try:
        return int(text)
    except ValueError:
        pass
    try:
        return float(text)
    except ValueError:
        return math.nan


def coerce_timestamp(value: Any) -> datetime:
    """Parse an RFC 3339 timestamp into an aware :class:`~datetime.datetime`.

    Accepts a trailing ``Z``, explicit offsets and fractional seconds of any
    precision (truncated to microseconds). Timestamps without an offset are
    taken as UTC.

    Args:
        value: The wire string, e.g. ``"2020-01-01T00:00:00.123456789Z"``.

    Returns:
        The parsed timestamp, or :data:`INVALID_TIMESTAMP` if *value* is
        missing or malformed.
    """
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, str) and value.strip():
        text = value.strip()
        if text[-1] in "zZ":
            text = text[:-1] + "+00:00"
        text = _FRACTION_RE.sub(r"\1", text)
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError:
            return INVALID_TIMESTAMP
    else:
        return INVALID_TIMESTAMP

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def is_valid_timestamp(value: datetime) -> bool:
    """Return ``False`` for :data:`INVALID_TIMESTAMP`, ``True`` otherwise."""
    return value != INVALID_TIMESTAMP


def _text(value: Any) -> Optional[str]:
    return value if isinstance(value, str) else None


def _items(value: Any) -> list[Any]:
    return value if isinstance(value, list) else []


def coerce_group(value: Any) -> ErrorGroup:
    """Build an :class:`~errorgroups.models.ErrorGroup` from a wire ``group``.

    A well-formed object validates as is, keeping unknown fields. When
    validation fails, the fields that do have the expected type are
    salvaged and the rest are dropped. Anything that is not an object
    yields an empty group.
    """
    if not isinstance(value, Mapping):
        return ErrorGroup()
    try:
        return ErrorGroup.model_validate(dict(value))
    except ValidationError:
        issues = _items(value.get("trackingIssues"))
        return ErrorGroup(
            name=_text(value.get("name")),
            group_id=_text(value.get("groupId")),
            tracking_issues=tuple(
                TrackingIssue(url=issue["url"])
                for issue in issues
                if isinstance(issue, Mapping) and isinstance(issue.get("url"), str)
            ),
            resolution_status=_text(value.get("resolutionStatus")),
        )


def _coerce_service(value: Mapping[str, Any]) -> ServiceContext:
    try:
        return ServiceContext.model_validate(dict(value))
    except ValidationError:
        return ServiceContext(
            service=_text(value.get("service")),
            version=_text(value.get("version")),
            resource_type=_text(value.get("resourceType")),
        )


def _coerce_timed_count(value: Any) -> TimedCount:
    raw = SerializedTimedCount.model_validate(dict(value) if isinstance(value, Mapping) else {})
    return TimedCount(
        count=coerce_number(raw.count),
        start_time=coerce_timestamp(raw.start_time),
        end_time=coerce_timestamp(raw.end_time),
    )


def deserialize(
    record: Union[SerializedErrorGroupStats, Mapping[str, Any]],
) -> ErrorGroupStats:
    """Convert one wire ``ErrorGroupStats`` record into the domain model.

    ``count``, ``numAffectedServices`` and every timed count's ``count`` go
    through :func:`coerce_number`; ``firstSeenTime`` and every timed count's
    ``startTime``/``endTime`` go through :func:`coerce_timestamp`.
    ``group`` goes through :func:`coerce_group`, ``affectedServices`` is
    passed through, and only the ``message`` of ``representative`` is kept.

    Values of the wrong shape never raise. A timed count that is not an
    object becomes an entry of sentinels, so positions in the series are
    kept; affected services that are not objects are skipped.

    Args:
        record: A parsed :class:`~errorgroups.models.SerializedErrorGroupStats`
            or the raw JSON mapping for one record. Anything else is read
            as an empty record.

    Returns:
        A new, frozen :class:`~errorgroups.models.ErrorGroupStats`.
    """
    if not isinstance(record, SerializedErrorGroupStats):
        record = SerializedErrorGroupStats.model_validate(
            dict(record) if isinstance(record, Mapping) else {}
        )

    representative = record.representative
    message = representative.get("message") if isinstance(representative, Mapping) else None

    return ErrorGroupStats(
        group=coerce_group(record.group),
        count=coerce_number(record.count),
        timed_counts=tuple(_coerce_timed_count(tc) for tc in _items(record.timed_counts)),
        first_seen_time=coerce_timestamp(record.first_seen_time),
        num_affected_services=coerce_number(record.num_affected_services),
        affected_services=tuple(
            _coerce_service(svc)
            for svc in _items(record.affected_services)
            if isinstance(svc, Mapping)
        ),
        representative=ErrorEvent(message=_text(message) or ""),
    )
