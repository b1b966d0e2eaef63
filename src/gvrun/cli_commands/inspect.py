"""``gvrun inspect`` — show the bundle a run would use, without running it."""

from __future__ import annotations

import sys

import click

from gvrun.cli_commands._options import (
    GUEST_CONTEXT_SETTINGS,
    LAUNCHER_FAILURE_EXIT_CODE,
    launch_options,
    resolve_config,
)
from gvrun.cli_commands._output import print_mounts_table, print_spec, report_failure
from gvrun.errors import LauncherError
from gvrun.runtime.launcher import Launcher


@click.command("inspect", context_settings=GUEST_CONTEXT_SETTINGS)
@launch_options
@click.option(
    "--format",
    "fmt",
    type=click.Choice(["json", "table"]),
    default="json",
    help="Output format.",
)
def inspect_cmd(
    guest_argv: tuple[str, ...],
    runtime: str | None,
    config_file: str | None,
    profile: str | None,
    extra_env: tuple[str, ...],
    extra_dirs: tuple[str, ...],
    fmt: str,
) -> None:
    """Print the config.json that ``gvrun run`` would write for GUEST_ARGV.

    Paths are resolved exactly as for a real run, but no bundle directory is
    created, resource limits are untouched, and the runtime is not started.
    """
    try:
        config = resolve_config(
            config_file=config_file,
            runtime=runtime,
            profile=profile,
            extra_env=extra_env,
            extra_dirs=extra_dirs,
        )
        spec = Launcher(config).prepare(list(guest_argv))
    except LauncherError as exc:
        report_failure("inspect", exc)
        sys.exit(LAUNCHER_FAILURE_EXIT_CODE)

    if fmt == "table":
        print_mounts_table(spec)
    else:
        print_spec(spec)
