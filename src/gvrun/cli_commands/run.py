"""``gvrun run`` — run a program inside the sandbox."""

from __future__ import annotations

import sys

import click

from gvrun.cli_commands._options import (
    GUEST_CONTEXT_SETTINGS,
    LAUNCHER_FAILURE_EXIT_CODE,
    launch_options,
    resolve_config,
)
from gvrun.cli_commands._output import report_failure
from gvrun.errors import ConfigError, LauncherError
from gvrun.runtime.launcher import Launcher
from gvrun.runtime.signals import exit_on_signals
from gvrun.utils.telemetry import configure_telemetry


@click.command(context_settings=GUEST_CONTEXT_SETTINGS)
@launch_options
@click.option("--telemetry", is_flag=True, help="Enable OpenTelemetry tracing.")
@click.option("--otlp-endpoint", default=None, help="Export spans via OTLP/gRPC to this endpoint.")
def run(
    guest_argv: tuple[str, ...],
    runtime: str | None,
    config_file: str | None,
    profile: str | None,
    extra_env: tuple[str, ...],
    extra_dirs: tuple[str, ...],
    telemetry: bool,
    otlp_endpoint: str | None,
) -> None:
    """Run GUEST_ARGV inside the sandbox.

    Must be started through sudo. Everything after the binary is passed to
    the guest untouched. Exits with the guest's exit status.
    """
    try:
        config = resolve_config(
            config_file=config_file,
            runtime=runtime,
            profile=profile,
            extra_env=extra_env,
            extra_dirs=extra_dirs,
            telemetry=telemetry,
            otlp_endpoint=otlp_endpoint,
        )
    except ConfigError as exc:
        report_failure("configuration", exc)
        sys.exit(LAUNCHER_FAILURE_EXIT_CODE)

    if not config.runtime:
        raise click.UsageError("no runtime given; pass --runtime, set GVRUN_RUNTIME, or use --config")

    if config.telemetry.enabled:
        try:
            configure_telemetry(otlp_endpoint=config.telemetry.otlp_endpoint)
        except ImportError as exc:
            report_failure("telemetry setup", exc)
            sys.exit(LAUNCHER_FAILURE_EXIT_CODE)

    launcher = Launcher(config)
    try:
        with exit_on_signals():
            code = launcher.launch(list(guest_argv))
    except LauncherError as exc:
        step = launcher.failed_in.value if launcher.failed_in else "launch"
        report_failure(step, exc)
        sys.exit(LAUNCHER_FAILURE_EXIT_CODE)

    sys.exit(code)
