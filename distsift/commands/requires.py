"""Requires command implementation for distsift.

Reads a ``pyproject.toml`` and prints the requirements it declares
statically: base dependencies first, then each optional-dependency group
with its ``extra == "<group>"`` marker.

Typical usage::

    $ distsift requires
    $ distsift requires path/to/pyproject.toml --format json
"""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Any, Dict, List

import click

from distsift.models import RequiresDist
from distsift.core import parse_pyproject_toml
from distsift.utils.filesystem import safe_read_file
from distsift.exceptions import DistSiftError, MetadataError
from distsift.context import pass_context, DistSiftContext
from distsift.utils import (
    get_logger,
    print_error,
    print_json,
    print_table,
    print_warning,
    get_raw_console,
)

logger = get_logger("commands.requires")


@click.command()
@click.argument(
    "file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default="pyproject.toml",
)
@click.option(
    "--format",
    "-f",
    type=click.Choice(["table", "json"], case_sensitive=False),
    default="table",
    help="Output format.",
)
@pass_context
def requires(ctx: DistSiftContext, file: Path, format: str) -> None:
    """Show the requirements statically declared in a pyproject.toml.

    Exits with status 1 when the requirements cannot be determined
    statically (dynamic dependencies, legacy tool tables, malformed TOML).
    """
    logger.info("Reading static metadata from %s", file)

    try:
        result = parse_pyproject_toml(safe_read_file(file))
    except MetadataError as e:
        print_error(f"Cannot read requirements statically from {file}: {e}")
        sys.exit(1)
    except DistSiftError as e:
        print_error(str(e))
        sys.exit(1)

    if format.lower() == "json":
        print_json(result.to_json())
        return

    _display_table(result)


def _display_table(result: RequiresDist) -> None:
    console = get_raw_console()
    version_note = " (dynamic version)" if result.dynamic else ""
    console.print(f"[bold]{result.name}[/bold]{version_note}")

    if not result.requires_dist:
        print_warning("No requirements declared")
        return

    rows: List[Dict[str, Any]] = [
        {
            "Name": requirement.name,
            "Specifier": str(requirement.specifier) or "*",
            "Extras": ",".join(sorted(requirement.extras)),
            "Marker": str(requirement.marker) if requirement.marker else "",
        }
        for requirement in result.requires_dist
    ]
    print_table(rows, column_styles={"Name": {"style": "bold", "no_wrap": True}})

    if result.provides_extras:
        console.print(f"Provides extras: {', '.join(result.provides_extras)}")
