"""Pawtrack CLI: timeline, streak and pattern reports over an event file."""

import click

from pawtrack import __version__


@click.group()
@click.version_option(version=__version__, package_name="pawtrack")
@click.option(
    "--config",
    "config_file",
    type=click.Path(exists=True, dir_okay=False),
    default=None,
    help="YAML or JSON config file.",
)
@click.option("-v", "--verbose", is_flag=True, help="Log engine decisions at DEBUG level.")
@click.pass_context
def main(ctx: click.Context, config_file: str | None, verbose: bool) -> None:
    """Pawtrack: activity timeline and potty-pattern insights."""
    ctx.ensure_object(dict)
    ctx.obj["config_file"] = config_file
    ctx.obj["verbose"] = verbose


# Register subcommands
from .stats_cmd import patterns, streak
from .timeline_cmd import timeline

main.add_command(timeline)
main.add_command(streak)
main.add_command(patterns)
