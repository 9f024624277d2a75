"""Groups commands -- list, show, and link error groups to tracking issues.

Each command resolves the active profile, opens a
:class:`~errorgroups.client.gateway.RequestGateway`, and runs one
:class:`~errorgroups.stats.GroupStatsCache` operation inside
:func:`asyncio.run`. Failures reported by the service are printed to
stderr and turned into the matching exit code.
"""

from __future__ import annotations

import asyncio
import math
from collections.abc import Awaitable, Callable, Sequence
from typing import Any, Optional, TypeVar

import typer

from errorgroups.exit_codes import EXIT_INVALID_USAGE, EXIT_NOT_FOUND
from errorgroups.models import ErrorGroupStats, Number
from errorgroups.output import (
    OutputFormat,
    error,
    format_response,
    get_output,
    print_table,
    success,
)
from errorgroups.serialization import is_valid_timestamp
from errorgroups.stats import DEFAULT_PAGE_SIZE, GroupStatsCache

T = TypeVar("T")

groups_app = typer.Typer(no_args_is_help=True)

_HEADERS = ["Group", "Count", "Services", "First seen", "Message", "Issue"]


def _run(ctx: typer.Context, operation: Callable[[GroupStatsCache], Awaitable[T]]) -> T:
    """Run *operation* against a freshly opened gateway for the active profile."""
    from errorgroups.auth import create_default_manager
    from errorgroups.cache import MemoryCache
    from errorgroups.client import RequestGateway
    from errorgroups.config import resolve_config
    from errorgroups.exceptions import ErrorGroupsError

    obj = ctx.obj or {}
    try:
        config, profile = resolve_config(obj.get("profile"), obj.get("project"))
    except ErrorGroupsError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None
    if profile is None:
        error("No profile configured. Run 'errorgroups init --project <id>' or pass --project.")
        raise typer.Exit(code=EXIT_INVALID_USAGE)

    async def _call() -> T:
        async with RequestGateway(profile, auth_manager=create_default_manager()) as gateway:
            stats = GroupStatsCache(gateway, MemoryCache(config.cache))
            return await operation(stats)

    try:
        return asyncio.run(_call())
    except ErrorGroupsError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None


def _format_number(value: Number) -> str:
    if isinstance(value, float) and math.isnan(value):
        return "?"
    return str(value)


def _row(stats: ErrorGroupStats) -> list[str]:
    message = stats.representative.message.splitlines()[0] if stats.representative.message else ""
    if len(message) > 80:
        message = message[:77] + "..."
    first_seen = (
        stats.first_seen_time.isoformat() if is_valid_timestamp(stats.first_seen_time) else "?"
    )
    services = ", ".join(s.service for s in stats.affected_services if s.service)
    issue = stats.group.tracking_issues[0].url if stats.group.tracking_issues else ""
    return [
        stats.group.group_id or "",
        _format_number(stats.count),
        services or _format_number(stats.num_affected_services),
        first_seen,
        message,
        issue,
    ]


def _render(groups: Sequence[ErrorGroupStats], title: str) -> None:
    if get_output().format == OutputFormat.JSON:
        format_response([g.model_dump(mode="json", by_alias=True) for g in groups])
        return
    print_table(_HEADERS, [_row(g) for g in groups], title=title)


@groups_app.command("list")
def groups_list(
    ctx: typer.Context,
    service: Optional[str] = typer.Option(
        None, "--service", "-s", help="Only groups reported by this service."
    ),
    page_size: int = typer.Option(
        DEFAULT_PAGE_SIZE, "--page-size", "-n", min=1, help="Maximum number of groups."
    ),
) -> None:
    """List the most frequent error groups of the last day.

    Example::

        errorgroups groups list
        errorgroups groups list --service frontend --page-size 5
    """
    if service:
        groups = _run(ctx, lambda stats: stats.list_service_groups(service, page_size))
        title = f"Error groups for {service}"
    else:
        groups = _run(ctx, lambda stats: stats.list_groups(page_size))
        title = "Error groups"
    _render(groups, title)


@groups_app.command("show")
def groups_show(
    ctx: typer.Context,
    group_id: str = typer.Argument(help="Error group id."),
) -> None:
    """Show the stats of one error group.

    Exits with code 4 when the service reports nothing for *group_id*.
    """
    group = _run(ctx, lambda stats: stats.get_group(group_id))
    if group is None:
        error(f'No error group "{group_id}" in the last day.')
        raise typer.Exit(code=EXIT_NOT_FOUND)
    _render([group], f"Error group {group_id}")


@groups_app.command("set-issue")
def groups_set_issue(
    ctx: typer.Context,
    group_id: str = typer.Argument(help="Error group id."),
    issue_url: str = typer.Argument(help="URL of the tracking issue."),
) -> None:
    """Link an error group to a tracking issue."""
    group = _run(ctx, lambda stats: stats.set_group_issue(group_id, issue_url))
    success(f'Linked error group "{group_id}" to {issue_url}')
    payload: dict[str, Any] = group.model_dump(mode="json", by_alias=True)
    format_response(payload)
