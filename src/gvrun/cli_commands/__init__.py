"""CLI subcommand registration."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import click


def register_commands(cli: click.Group) -> None:
    """Register all subcommands on the CLI group."""
    from gvrun.cli_commands.inspect import inspect_cmd
    from gvrun.cli_commands.profiles import profiles
    from gvrun.cli_commands.run import run

    cli.add_command(run)
    cli.add_command(inspect_cmd)
    cli.add_command(profiles)
