"""Options shared by commands that build a sandbox bundle."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, Any

import click
from pydantic import ValidationError

from gvrun.config.loader import ConfigLoader
from gvrun.config.models import LauncherConfig, Profile
from gvrun.errors import ConfigError

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable

# Reported when the launcher itself fails; the guest never ran.
LAUNCHER_FAILURE_EXIT_CODE = 125

GUEST_CONTEXT_SETTINGS = {
    "ignore_unknown_options": True,
    "allow_interspersed_args": False,
}


def split_csv(values: Iterable[str]) -> list[str]:
    """Flatten repeated, comma-separated option values."""
    items: list[str] = []
    for value in values:
        items.extend(part for part in value.split(",") if part)
    return items


def launch_options(func: Callable[..., Any]) -> Callable[..., Any]:
    """Attach the bundle-building options and the guest argv argument."""
    decorators = [
        click.option(
            "--runtime",
            envvar="GVRUN_RUNTIME",
            default=None,
            type=click.Path(dir_okay=False),
            help="Path to the runsc binary (env: GVRUN_RUNTIME).",
        ),
        click.option(
            "--config",
            "config_file",
            default=None,
            type=click.Path(exists=True, dir_okay=False),
            help="YAML launcher configuration file.",
        ),
        click.option(
            "--profile",
            type=click.Choice([p.value for p in Profile]),
            default=None,
            help="Launch profile (default: user).",
        ),
        click.option(
            "--extra-env",
            multiple=True,
            help="Comma-separated KEY=VALUE pairs added to the guest environment.",
        ),
        click.option(
            "--extra-dirs",
            multiple=True,
            help="Comma-separated files or directories exposed read-only.",
        ),
        click.argument("guest_argv", nargs=-1, required=True, type=click.UNPROCESSED),
    ]
    for decorator in reversed(decorators):
        func = decorator(func)
    return func


def resolve_config(
    *,
    config_file: str | None,
    runtime: str | None,
    profile: str | None,
    extra_env: Iterable[str],
    extra_dirs: Iterable[str],
    telemetry: bool = False,
    otlp_endpoint: str | None = None,
) -> LauncherConfig:
    """Merge the optional config file with command-line overrides.

    Scalar flags replace file values; list flags extend them.

    Raises:
        ConfigError: If the file or the merged result is invalid.
    """
    base = ConfigLoader(Path(config_file)).load() if config_file else LauncherConfig()
    data = base.model_dump()

    if runtime:
        data["runtime"] = runtime
    if profile:
        data["profile"] = profile
    data["extra_env"] = [*base.extra_env, *split_csv(extra_env)]
    data["extra_dirs"] = [*base.extra_dirs, *split_csv(extra_dirs)]

    if telemetry or otlp_endpoint:
        data["telemetry"]["enabled"] = True
    if otlp_endpoint:
        data["telemetry"]["otlp_endpoint"] = otlp_endpoint

    try:
        return LauncherConfig.model_validate(data)
    except ValidationError as exc:
        raise ConfigError(str(exc)) from exc
