"""``gvrun profiles`` — list the available launch profiles."""

from __future__ import annotations

import json

import click

from gvrun.cli_commands._output import console, print_profiles_table
from gvrun.config.models import PROFILES


@click.command()
@click.option(
    "--format",
    "fmt",
    type=click.Choice(["table", "json"]),
    default="table",
    help="Output format.",
)
def profiles(fmt: str) -> None:
    """List launch profiles selectable with --profile."""
    if fmt == "json":
        data = {profile.value: settings.model_dump() for profile, settings in PROFILES.items()}
        console.print_json(json.dumps(data))
        return

    print_profiles_table(PROFILES)
