"""Init command -- create a profile for a Google Cloud project."""

from __future__ import annotations

from typing import Optional

import typer

from errorgroups.exit_codes import EXIT_INVALID_USAGE
from errorgroups.output import error, info, success


def init_command(
    project: str = typer.Option(..., "--project", help="Google Cloud project id."),
    name: Optional[str] = typer.Option(
        None, "--name", "-n", help="Profile name (defaults to the project id)."
    ),
    auth_type: str = typer.Option(
        "application_default",
        "--auth-type",
        help="Credential provider: application_default, gcloud, bearer.",
    ),
    key_file: Optional[str] = typer.Option(
        None,
        "--key-file",
        help="Service account key for application_default auth (default: ADC).",
    ),
    source: Optional[str] = typer.Option(
        None, "--source", help="Credential source for bearer auth, e.g. env:TOKEN."
    ),
    make_default: bool = typer.Option(
        False, "--default", help="Make this the default profile."
    ),
) -> None:
    """Create (or overwrite) a profile and optionally make it the default.

    The first profile created always becomes the default.

    Example::

        errorgroups init --project my-project
        errorgroups init --project my-project --key-file ~/keys/reporter.json
        errorgroups init --project my-project --auth-type bearer --source env:TOKEN
    """
    from errorgroups.auth import create_default_manager
    from errorgroups.config import (
        load_global_config,
        profile_exists,
        save_global_config,
        save_profile,
    )
    from errorgroups.exceptions import AuthFailure
    from errorgroups.models import AuthConfig, Profile

    profile_name = name or project
    auth = AuthConfig(type=auth_type, key_file=key_file)
    if source:
        auth.source = source

    try:
        plugin = create_default_manager().get_plugin(auth_type)
    except AuthFailure as exc:
        error(str(exc))
        raise typer.Exit(code=EXIT_INVALID_USAGE) from None

    problems = plugin.validate_config(auth)
    if problems:
        for problem in problems:
            error(problem)
        raise typer.Exit(code=EXIT_INVALID_USAGE)

    if profile_exists(profile_name):
        info(f'Profile "{profile_name}" already exists and will be overwritten.')

    save_profile(Profile(name=profile_name, project_id=project, auth=auth))

    config = load_global_config()
    if make_default or config.default_profile is None:
        config.default_profile = profile_name
        save_global_config(config)
        info(f'Default profile set to "{profile_name}".')

    success(f'Profile "{profile_name}" created for project {project}.')
