"""CLI entry point for path-owners.

Invoked as::

    path-owners [OPTIONS] COMMAND [ARGS]...

or, during development::

    python -m pathowners.cli.main

Commands
--------
owners      Show which ownership packages apply to paths
version     Show version information
"""
from __future__ import annotations

import logging
import sys
from pathlib import Path

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from pathowners.conduit import ConduitClient
from pathowners.config import load_config
from pathowners.errors import OwnersError
from pathowners.render import ListingPolicy, OutputFormat, linker_for, render
from pathowners.resolver import OwnershipIndex
from pathowners.workflow import query_ownership, target_repository
from pathowners.workingcopy import detect_working_copy, select_paths

console = Console()
err_console = Console(stderr=True)


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=err_console, show_path=False)],
        force=True,
    )


# ---------------------------------------------------------------------------
# CLI group
# ---------------------------------------------------------------------------


@click.group()
@click.version_option(package_name="path-owners")
def cli() -> None:
    """Display ownership information for a list of files."""


# ---------------------------------------------------------------------------
# version command
# ---------------------------------------------------------------------------


@cli.command(name="version")
def version_command() -> None:
    """Show detailed version information."""
    from pathowners import __version__

    table = Table(show_header=False, box=None)
    table.add_row("[bold]path-owners[/bold]", f"v{__version__}")
    table.add_row("Python", f"{sys.version_info.major}.{sys.version_info.minor}.{sys.version_info.micro}")
    table.add_row("Platform", sys.platform)
    console.print(table)


# ---------------------------------------------------------------------------
# owners command
# ---------------------------------------------------------------------------


@cli.command(name="owners")
@click.argument("paths", nargs=-1, type=click.Path(exists=False))
@click.option(
    "--output",
    "output_format",
    default="text",
    help="Output format: text (default), json, structured or yaml.",
)
@click.option(
    "--all",
    "show_all",
    is_flag=True,
    default=False,
    help="List every owner with its dominion, including weak owners.",
)
@click.option("--no-slack", is_flag=True, default=False, help="Omit Slack channels from text output")
@click.option(
    "--root",
    type=click.Path(file_okay=False),
    default=None,
    help=(
        "Working copy to inspect; relative PATHS are resolved against it "
        "(defaults to the current directory)."
    ),
)
@click.option("--verbose", "-v", is_flag=True, default=False, help="Log debug output to stderr")
def owners_command(
    paths: tuple[str, ...],
    output_format: str,
    show_all: bool,
    no_slack: bool,
    root: str | None,
    verbose: bool,
) -> None:
    """Display ownership information for a list of files.

    Without PATHS, the files changed in your local working copy (including
    untracked files) are used.

    Examples:

    \b
        path-owners owners
        path-owners owners src/lib/ --all
        path-owners owners src/lib/x.go --output json
    """
    _configure_logging(verbose)

    try:
        fmt = OutputFormat.parse(output_format)
        policy = ListingPolicy.FULL if show_all else ListingPolicy.STRONG_PRIORITY

        start = Path(root) if root else Path.cwd()
        working_copy = detect_working_copy(start)
        candidates = select_paths(list(paths), working_copy, cwd=start)
        config = load_config(working_copy.root if working_copy else start)

        if candidates:
            with ConduitClient(config.api_uri, config.token) as client:
                repository = target_repository(config, client)
                index = query_ownership(
                    client, repository, candidates, config.link_settings()
                )
        else:
            index = OwnershipIndex({})
    except OwnersError as exc:
        err_console.print(
            f"[red]Error:[/red] {escape(str(exc))}", highlight=False, soft_wrap=True
        )
        sys.exit(1)

    if fmt is OutputFormat.TEXT:
        report = render(
            index,
            fmt,
            policy=policy,
            linker=linker_for(console.is_terminal),
            show_channels=not no_slack,
        )
        if report.plain:
            console.print(report, soft_wrap=True)
    else:
        click.echo(render(index, fmt))


if __name__ == "__main__":
    cli()
