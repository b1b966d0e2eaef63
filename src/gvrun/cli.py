"""gvrun CLI entrypoint."""

from __future__ import annotations

import click

from gvrun import __version__
from gvrun.cli_commands._output import setup_logging


@click.group()
@click.version_option(version=__version__, prog_name="gvrun")
@click.option("--verbose", "-v", is_flag=True, help="Log debug details to stderr.")
@click.option("--quiet", "-q", is_flag=True, help="Only log warnings and errors.")
def main(verbose: bool, quiet: bool) -> None:
    """gvrun — run a local program inside a gVisor sandbox."""
    setup_logging(verbose=verbose, quiet=quiet)


# Register subcommands
from gvrun.cli_commands import register_commands  # noqa: E402

register_commands(main)

if __name__ == "__main__":
    main()
