"""Configuration management with XDG paths, atomic writes, and precedence resolution.

This module handles all persistent configuration for errorgroups:

* **Directory layout** -- XDG Base Directory compliant on Linux/BSD,
  ``~/.errorgroups/`` on macOS and Windows. See :func:`get_config_dir`,
  :func:`get_data_dir`, :func:`get_profiles_dir`.
* **Global config** -- one :class:`~errorgroups.models.GlobalConfig` JSON
  file (default profile, output format, cache settings).
* **Profiles** -- one JSON file per Google Cloud project, each deserialised
  into a :class:`~errorgroups.models.Profile`.
* **Precedence resolution** -- :func:`resolve_config` merges CLI flags,
  environment variables and the global config.
* **Credential resolution** -- :func:`resolve_credential` reads secrets
  from env vars, files, or an interactive prompt.

Writes go through :func:`_atomic_write` (temp file, then rename).
"""

from __future__ import annotations

import contextlib
import getpass
import json
import os
import platform
import sys
import tempfile
from pathlib import Path
from typing import Optional, TypeVar

from pydantic import BaseModel, ValidationError

from errorgroups.exceptions import ConfigError
from errorgroups.models import GlobalConfig, Profile

_APP_NAME = "errorgroups"
_CONFIG_FILENAME = "config.json"

ENV_PROFILE = "ERRORGROUPS_PROFILE"
ENV_PROJECT = "ERRORGROUPS_PROJECT"

_XDG_DEFAULTS = {
    "XDG_CONFIG_HOME": (".config",),
    "XDG_DATA_HOME": (".local", "share"),
}

M = TypeVar("M", bound=BaseModel)


# --- Directories ---


def _is_xdg_platform() -> bool:
    """Return True on platforms that follow the XDG Base Directory spec (Linux/BSD)."""
    system = platform.system()
    return system == "Linux" or system.endswith("BSD")


def _app_dir(xdg_var: str, *fallback: str) -> Path:
    """Return (and create) ``$<xdg_var>/errorgroups``, or ``~/.errorgroups/<fallback>``."""
    if _is_xdg_platform():
        root = os.environ.get(xdg_var) or Path.home().joinpath(*_XDG_DEFAULTS[xdg_var])
        path = Path(root) / _APP_NAME
    else:
        path = Path.home().joinpath(f".{_APP_NAME}", *fallback)
    path.mkdir(parents=True, exist_ok=True)
    return path


def get_config_dir() -> Path:
    """Return the configuration directory, creating it if necessary.

    On Linux/BSD: ``$XDG_CONFIG_HOME/errorgroups/`` (default
    ``~/.config/errorgroups/``). Elsewhere: ``~/.errorgroups/``.
    """
    return _app_dir("XDG_CONFIG_HOME")


def get_data_dir() -> Path:
    """Return the data directory used for crash logs, creating it if necessary.

    On Linux/BSD: ``$XDG_DATA_HOME/errorgroups/`` (default
    ``~/.local/share/errorgroups/``). Elsewhere: ``~/.errorgroups/logs/``.
    """
    return _app_dir("XDG_DATA_HOME", "logs")


def get_profiles_dir() -> Path:
    """Return ``<config_dir>/profiles/``, creating it if necessary."""
    path = get_config_dir() / "profiles"
    path.mkdir(parents=True, exist_ok=True)
    return path


# --- File I/O ---


def _atomic_write(path: Path, data: str) -> None:
    """Write *data* to *path* via a temp file in the same directory and ``os.replace``."""
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as handle:
            handle.write(data)
            handle.flush()
            os.fsync(handle.fileno())
        os.replace(tmp_name, path)
    except BaseException:
        with contextlib.suppress(OSError):
            os.unlink(tmp_name)
        raise


def _write_model(path: Path, model: BaseModel) -> None:
    _atomic_write(path, json.dumps(model.model_dump(mode="json"), indent=2) + "\n")


def _read_model(path: Path, model: type[M], label: str) -> M:
    try:
        return model.model_validate(json.loads(path.read_text(encoding="utf-8")))
    except (json.JSONDecodeError, ValidationError) as exc:
        raise ConfigError(f"Invalid {label} at {path}: {exc}") from exc


# --- Global config ---


def _global_config_path() -> Path:
    return get_config_dir() / _CONFIG_FILENAME


def load_global_config() -> GlobalConfig:
    """Load the global configuration.

    Returns:
        The stored :class:`~errorgroups.models.GlobalConfig`, or a default
        instance when no file exists yet.

    Raises:
        ConfigError: If the file contains invalid JSON or fails validation.
    """
    path = _global_config_path()
    if not path.is_file():
        return GlobalConfig()
    return _read_model(path, GlobalConfig, "global config")


def save_global_config(config: GlobalConfig) -> None:
    _write_model(_global_config_path(), config)


# --- Profiles ---


def _profile_path(name: str) -> Path:
    return get_profiles_dir() / f"{name}.json"


def _existing_profile_path(name: str) -> Path:
    path = _profile_path(name)
    if not path.is_file():
        raise ConfigError(f"Profile '{name}' not found at {path}")
    return path


def list_profiles() -> list[str]:
    """Return all stored profile names, sorted alphabetically."""
    return sorted(p.stem for p in get_profiles_dir().glob("*.json") if p.is_file())


def load_profile(name: str) -> Profile:
    """Load and validate the profile stored as ``<name>.json``.

    Raises:
        ConfigError: If the profile is missing, contains invalid JSON, or
            fails validation.
    """
    return _read_model(_existing_profile_path(name), Profile, f"profile '{name}'")


def save_profile(profile: Profile) -> None:
    """Persist *profile* atomically; the file name comes from ``profile.name``."""
    _write_model(_profile_path(profile.name), profile)


def delete_profile(name: str) -> None:
    """Delete a stored profile; raises :class:`ConfigError` if there is none."""
    _existing_profile_path(name).unlink()


def profile_exists(name: str) -> bool:
    return _profile_path(name).is_file()


# --- Precedence resolution ---


def _active_profile_name(cli_profile: Optional[str], global_cfg: GlobalConfig) -> Optional[str]:
    for candidate in (cli_profile, os.environ.get(ENV_PROFILE), global_cfg.default_profile):
        if candidate:
            return candidate
    profiles = list_profiles()
    return profiles[0] if len(profiles) == 1 else None


def resolve_config(
    cli_profile: Optional[str] = None,
    cli_project: Optional[str] = None,
) -> tuple[GlobalConfig, Optional[Profile]]:
    """Resolve the global config and the active profile.

    Profile name precedence (high to low):
        1. ``cli_profile``
        2. ``$ERRORGROUPS_PROFILE``
        3. ``default_profile`` in the global config
        4. the only stored profile, if there is exactly one

    The project id of the resolved profile is then overridden by
    ``cli_project`` or ``$ERRORGROUPS_PROJECT``. When no profile resolves
    but a project id is given, an anonymous profile for that project is
    returned.

    Returns:
        A tuple of ``(global_config, active_profile_or_None)``.
    """
    global_cfg = load_global_config()
    profile_name = _active_profile_name(cli_profile, global_cfg)
    project_id = cli_project or os.environ.get(ENV_PROJECT)

    if profile_name is None:
        profile = Profile(name="default", project_id=project_id) if project_id else None
        return global_cfg, profile

    profile = load_profile(profile_name)
    if project_id:
        profile = profile.model_copy(update={"project_id": project_id})
    return global_cfg, profile


# --- Credential source resolution ---


def resolve_credential(source: str) -> str:
    """Resolve a credential from its source descriptor.

    Supported formats:
        - ``"env:VAR_NAME"`` -- reads ``os.environ["VAR_NAME"]``
        - ``"file:/path/to/file"`` -- reads the file, stripped of whitespace
        - ``"prompt"`` -- prompts interactively (requires a TTY)

    Raises:
        ConfigError: If the source can't be resolved.
    """
    kind, _, target = source.partition(":")

    if kind == "env" and target:
        value = os.environ.get(target)
        if value is None:
            raise ConfigError(f"Environment variable '{target}' is not set (source: {source})")
        return value

    if kind == "file" and target:
        path = Path(target).expanduser()
        if not path.is_file():
            raise ConfigError(f"Credential file not found: {path} (source: {source})")
        try:
            return path.read_text(encoding="utf-8").strip()
        except OSError as exc:
            raise ConfigError(f"Cannot read credential file {path}: {exc}") from exc

    if source == "prompt":
        if not sys.stdin.isatty():
            raise ConfigError("Cannot prompt for credentials: stdin is not a TTY (source: prompt)")
        return getpass.getpass("Enter Error Reporting credential: ")

    raise ConfigError(f"Unknown credential source format: {source}")
