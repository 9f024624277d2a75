"""Typer application and CLI entry point for errorgroups.

The :func:`main` function is the console-script entry point declared in
``pyproject.toml``. It registers the sub-commands, runs the Typer app, and
turns :class:`~errorgroups.exceptions.ErrorGroupsError` into a clean exit
with the matching exit code. Any other exception is written to a crash log
under the data directory.
"""

from __future__ import annotations

import signal
import sys
import traceback
from datetime import datetime
from typing import TYPE_CHECKING, Any, Optional

import typer

from errorgroups import __version__
from errorgroups.exit_codes import EXIT_GENERIC_FAILURE

if TYPE_CHECKING:
    from errorgroups.output import OutputFormat

app = typer.Typer(
    name="errorgroups",
    help="Inspect Cloud Error Reporting error groups and link them to issues.",
    no_args_is_help=True,
    add_completion=True,
    rich_markup_mode="rich",
)


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"errorgroups {__version__}")
        raise typer.Exit()


@app.callback()
def main_callback(
    ctx: typer.Context,
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
    profile: Optional[str] = typer.Option(
        None, "--profile", "-p", help="Profile name to use."
    ),
    project: Optional[str] = typer.Option(
        None, "--project", help="Google Cloud project id (overrides the profile)."
    ),
    json_output: bool = typer.Option(False, "--json", help="JSON output format."),
    plain_output: bool = typer.Option(False, "--plain", help="Plain text output."),
    no_color: bool = typer.Option(False, "--no-color", help="Disable color output."),
    quiet: bool = typer.Option(
        False, "--quiet", "-q", help="Suppress non-essential output."
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug output."),
    force: bool = typer.Option(False, "--force", "-f", help="Skip confirmations."),
) -> None:
    """Install the output manager and stash shared options in ``ctx.obj``."""
    from errorgroups.output import OutputFormat, OutputManager, set_output

    if json_output:
        fmt = OutputFormat.JSON
    elif plain_output:
        fmt = OutputFormat.PLAIN
    else:
        fmt = _configured_format()

    set_output(OutputManager(format=fmt, no_color=no_color, quiet=quiet, verbose=verbose))

    ctx.ensure_object(dict)
    ctx.obj["profile"] = profile
    ctx.obj["project"] = project
    ctx.obj["force"] = force


def _configured_format() -> OutputFormat:
    """Return ``output.format`` from the global config, or ``AUTO`` when it is unusable."""
    from errorgroups.config import load_global_config
    from errorgroups.exceptions import ConfigError
    from errorgroups.output import OutputFormat

    try:
        return OutputFormat(load_global_config().output.format)
    except (ConfigError, ValueError):
        return OutputFormat.AUTO


def _setup_signal_handlers() -> None:
    """Install a SIGINT handler so Ctrl-C exits cleanly."""

    def _handler(signum: int, frame: Any) -> None:  # noqa: ANN401
        sys.stderr.write("\nCancelled.\n")
        sys.exit(130)

    signal.signal(signal.SIGINT, _handler)


def _write_crash_log(exc: Exception) -> str:
    """Write the current traceback to ``<data_dir>/logs/`` and return the file path."""
    from errorgroups.config import get_data_dir

    logs_dir = get_data_dir() / "logs"
    logs_dir.mkdir(parents=True, exist_ok=True)
    timestamp = datetime.now().strftime("%Y%m%d-%H%M%S")
    log_path = logs_dir / f"crash-{timestamp}.log"
    log_path.write_text(traceback.format_exc())
    return str(log_path)


def register_commands() -> None:
    from errorgroups.commands.config import config_app
    from errorgroups.commands.groups import groups_app
    from errorgroups.commands.init import init_command

    app.command("init")(init_command)
    app.add_typer(groups_app, name="groups", help="List, show and update error groups.")
    app.add_typer(config_app, name="config", help="Configuration management.")


register_commands()


def main() -> None:
    """CLI entry point invoked by the ``errorgroups`` console script.

    Unhandled :class:`~errorgroups.exceptions.ErrorGroupsError` instances
    cause a clean exit with the error's ``exit_code``. All other exceptions
    produce a crash log and a generic failure exit.

    Raises:
        SystemExit: Always raised (either by Typer or explicitly).
    """
    _setup_signal_handlers()
    try:
        app()
    except SystemExit:
        raise
    except KeyboardInterrupt:
        sys.stderr.write("\nCancelled.\n")
        sys.exit(130)
    except Exception as exc:
        from errorgroups.exceptions import ErrorGroupsError
        from errorgroups.output import error

        if isinstance(exc, ErrorGroupsError):
            error(str(exc))
            sys.exit(exc.exit_code)
        log_path = _write_crash_log(exc)
        error(f"Unexpected error. Debug log: {log_path}")
        sys.exit(EXIT_GENERIC_FAILURE)
