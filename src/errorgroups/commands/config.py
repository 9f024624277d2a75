"""Config commands -- view and modify the global configuration.

Provides ``errorgroups config show|set|reset`` for the
:class:`~errorgroups.models.GlobalConfig` file, which holds the default
profile, the output format, and the cache settings.
"""

from __future__ import annotations

import typer

from errorgroups.exit_codes import EXIT_INVALID_USAGE
from errorgroups.output import error, format_response, info, success

config_app = typer.Typer(no_args_is_help=True)


@config_app.command("show")
def config_show() -> None:
    """Show the global configuration and the stored profiles."""
    from errorgroups.config import get_config_dir, list_profiles, load_global_config

    config = load_global_config()
    info(f"Config directory: {get_config_dir()}")
    data = config.model_dump(mode="json")
    data["profiles"] = list_profiles()
    format_response(data)


@config_app.command("set")
def config_set(
    key: str = typer.Argument(help="Config key (dot notation, e.g., 'cache.ttl_seconds')."),
    value: str = typer.Argument(help="Value to set."),
) -> None:
    """Set a configuration value, coerced to the type of the current one.

    Example::

        errorgroups config set default_profile prod
        errorgroups config set cache.ttl_seconds 600
        errorgroups config set cache.enabled false
    """
    from pydantic import ValidationError

    from errorgroups.config import load_global_config, save_global_config
    from errorgroups.models import GlobalConfig

    data = load_global_config().model_dump(mode="json")

    keys = key.split(".")
    target = data
    for k in keys[:-1]:
        if not isinstance(target.get(k), dict):
            error(f"Invalid config key: {key}")
            raise typer.Exit(code=EXIT_INVALID_USAGE)
        target = target[k]

    final_key = keys[-1]
    if final_key not in target:
        error(f"Unknown config key: {key}")
        raise typer.Exit(code=EXIT_INVALID_USAGE)

    current = target[final_key]
    coerced: object = value
    if isinstance(current, bool):
        coerced = value.lower() in ("true", "1", "yes")
    elif isinstance(current, int):
        try:
            coerced = int(value)
        except ValueError:
            error(f"Expected integer for {key}, got: {value}")
            raise typer.Exit(code=EXIT_INVALID_USAGE) from None
    elif isinstance(current, dict):
        error(f"Cannot set a whole section: {key}")
        raise typer.Exit(code=EXIT_INVALID_USAGE)

    target[final_key] = coerced

    try:
        new_config = GlobalConfig.model_validate(data)
    except ValidationError as exc:
        error(f"Validation error: {exc}")
        raise typer.Exit(code=EXIT_INVALID_USAGE) from None

    save_global_config(new_config)
    success(f"Set {key} = {coerced}")


@config_app.command("reset")
def config_reset(ctx: typer.Context) -> None:
    """Reset the global configuration to defaults (asks unless ``--force``)."""
    from errorgroups.config import save_global_config
    from errorgroups.models import GlobalConfig

    force = ctx.obj.get("force", False) if ctx.obj else False
    if not force and not typer.confirm("Reset all config to defaults?"):
        info("Cancelled.")
        raise typer.Exit()

    save_global_config(GlobalConfig())
    success("Configuration reset to defaults.")
