"""Shared CLI output formatters.

While a guest runs, stdout belongs to it: everything gvrun itself reports
goes through ``err_console``. ``console`` is used only by commands that never
start a guest.
"""

from __future__ import annotations

import logging

from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from gvrun.bundle.assembler import render_spec
from gvrun.bundle.models import SandboxSpec  # noqa: TC001
from gvrun.config.models import Profile, ProfileSettings  # noqa: TC001

console = Console()
err_console = Console(stderr=True)


def setup_logging(*, verbose: bool = False, quiet: bool = False) -> None:
    """Route log records to stderr through rich."""
    if verbose:
        level = logging.DEBUG
    elif quiet:
        level = logging.WARNING
    else:
        level = logging.INFO

    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=err_console, show_path=False)],
        force=True,
    )


def report_failure(step: str, exc: BaseException) -> None:
    """Print the single-line launcher diagnostic."""
    err_console.print(
        f"[red]gvrun: {step} failed:[/red] {escape(str(exc))}",
        soft_wrap=True,
        highlight=False,
    )


def print_spec(spec: SandboxSpec) -> None:
    """Print the config.json document for *spec*."""
    console.print_json(render_spec(spec))


def print_mounts_table(spec: SandboxSpec) -> None:
    """Pretty-print the mount allowlist of *spec* as a table."""
    table = Table(title="Mount Allowlist")
    table.add_column("Destination", style="cyan")
    table.add_column("Source")
    table.add_column("Options")

    for mount in spec.mounts:
        table.add_row(mount.destination, mount.source, ",".join(mount.options))

    console.print(table)
    console.print(f"  User: {spec.process.user.username} ({spec.process.user.uid}:{spec.process.user.gid})")
    console.print(f"  Args: {' '.join(spec.process.args)}")


def print_profiles_table(profiles: dict[Profile, ProfileSettings]) -> None:
    """Pretty-print launch profiles as a table."""
    table = Table(title="Launch Profiles")
    table.add_column("Name", style="cyan")
    table.add_column("Guest user")
    table.add_column("Runtime flags")
    table.add_column("Description")

    for profile, settings in profiles.items():
        table.add_row(
            profile.value,
            "sudo caller" if settings.impersonate_user else "root",
            " ".join(settings.debug_flags) or "-",
            _truncate(settings.description),
        )

    console.print(table)


def _truncate(text: str, max_len: int = 80) -> str:
    if len(text) <= max_len:
        return text
    return text[: max_len - 3] + "..."
