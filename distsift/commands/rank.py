"""Rank command implementation for distsift.

Builds a :class:`~distsift.core.flat_index.FlatIndex` from local
find-links directories and/or file names given on the command line, then
reports, for every package and version, the winning wheel, the winning
source distribution and why anything was excluded.

File names may carry a ``#sha256=<digest>`` fragment, as find-links pages
do; that digest is checked against the configured hash policy.

Typical usage::

    $ distsift rank --find-links ./wheelhouse
    $ distsift rank --no-binary :all: --find-links ./wheelhouse
    $ distsift rank idna-3.6-py3-none-any.whl "idna-3.6.tar.gz#sha256=..." --require-hashes

Exits with status 1 if some package has no installable version at all.
"""

from __future__ import annotations

import sys
from typing import Any, Dict, Iterable, List, Optional, Tuple

import click

from distsift.config import DistSiftConfig
from distsift.utils.filesystem import list_find_links
from distsift.exceptions import DistSiftError
from distsift.context import pass_context, DistSiftContext
from distsift.core import FlatIndex, Tags
from distsift.models import (
    File,
    FlatIndexEntries,
    FlatIndexEntry,
    HashComparison,
    PrioritizedDist,
)
from distsift.utils import (
    get_logger,
    print_error,
    print_json,
    print_success,
    print_table,
    print_warning,
)

logger = get_logger("commands.rank")

#: Origin recorded for files passed as command-line arguments.
COMMAND_LINE_INDEX = "<command line>"


@click.command()
@click.argument("filenames", nargs=-1)
@click.option(
    "--find-links",
    "find_links",
    multiple=True,
    help="Local directory of distributions (repeatable).",
)
@click.option(
    "--no-binary",
    "no_binary",
    multiple=True,
    help="Do not use wheels for this package (':all:' for every package).",
)
@click.option(
    "--no-build",
    "no_build",
    multiple=True,
    help="Do not build sdists for this package (':all:' for every package).",
)
@click.option(
    "--require-hashes",
    is_flag=True,
    help="Validate hashes for every package, not only configured ones.",
)
@click.option(
    "--any-platform",
    is_flag=True,
    help="Accept every wheel tag without ranking against this interpreter.",
)
@click.option(
    "--format",
    "-f",
    type=click.Choice(["table", "json"], case_sensitive=False),
    default="table",
    help="Output format.",
)
@pass_context
def rank(
    ctx: DistSiftContext,
    filenames: Tuple[str, ...],
    find_links: Tuple[str, ...],
    no_binary: Tuple[str, ...],
    no_build: Tuple[str, ...],
    require_hashes: bool,
    any_platform: bool,
    format: str,
) -> None:
    """Rank wheels and source distributions per package version."""
    config = (ctx.config or DistSiftConfig()).with_cli_options(
        no_binary=no_binary,
        no_build=no_build,
        require_hashes=require_hashes,
    )

    try:
        build_options = config.build_options()
        hasher = config.hash_strategy()
    except DistSiftError as e:
        print_error(str(e))
        sys.exit(1)

    tags: Optional[Tags] = None
    if not any_platform and config.match_platform_tags:
        tags = Tags.from_sys()

    entries = FlatIndexEntries.merge(
        [list_find_links(directory) for directory in find_links]
        + [_entries_from_arguments(filenames)]
    )
    logger.info(
        "Ranking %d file(s) %s",
        len(entries),
        "for any platform" if tags is None else f"against {len(tags)} tag(s)",
    )
    index = FlatIndex.from_entries(entries, tags, hasher, build_options)

    if index.offline:
        print_warning("Some find-links sources were unreachable; results may be incomplete")

    if not len(index):
        print_warning("No distributions found")
        return

    rows = _rows(index)
    if format.lower() == "json":
        print_json(rows)
    else:
        print_table(
            rows,
            headers=["package", "version", "wheel", "sdist", "notes"],
            column_styles={
                "package": {"style": "bold", "no_wrap": True},
                "wheel": {"style": "wheel"},
                "sdist": {"style": "sdist"},
            },
            row_styler=_row_style,
        )

    unusable = [name for name in index if not _has_installable(index, name)]
    if unusable:
        print_warning(f"No installable distribution for: {', '.join(unusable)}")
        sys.exit(1)
    if format.lower() == "table":
        print_success(f"{len(index)} package(s) ranked")


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _entries_from_arguments(filenames: Iterable[str]) -> FlatIndexEntries:
    entries: List[FlatIndexEntry] = []
    for value in filenames:
        entry = FlatIndexEntry.from_file(File.from_url(value), index=COMMAND_LINE_INDEX)
        if entry is None:
            print_warning(f"Not a distribution filename: {value}")
            continue
        entries.append(entry)
    return FlatIndexEntries(entries=tuple(entries))


def _has_installable(index: FlatIndex, name: str) -> bool:
    distributions = index.get(name)
    return distributions is not None and any(
        not record.is_empty() for _, record in distributions.items()
    )


def _rows(index: FlatIndex) -> List[Dict[str, Any]]:
    rows: List[Dict[str, Any]] = []
    for name in index:
        distributions = index.get(name)
        if distributions is None:
            continue
        for version, record in distributions.items():
            rows.append(
                {
                    "package": name,
                    "version": str(version),
                    "wheel": _filename(record.best_wheel()),
                    "sdist": _filename(record.best_source()),
                    "notes": "; ".join(_notes(record)),
                }
            )
    return rows


def _row_style(row: Dict[str, Any]) -> Optional[str]:
    if row["wheel"] == "-" and row["sdist"] == "-":
        return "excluded"
    return None


def _filename(dist: Any) -> str:
    return dist.file.filename if dist is not None else "-"


def _notes(record: PrioritizedDist) -> List[str]:
    notes: List[str] = []

    wheel_reason = record.wheel_incompatibility()
    if wheel_reason is not None:
        notes.append(f"wheel: {wheel_reason}")
    source_reason = record.source_incompatibility()
    if source_reason is not None:
        notes.append(f"sdist: {source_reason}")

    for label, kept in (("wheel", record.wheel), ("sdist", record.source)):
        if kept is None or not kept[1].is_compatible():
            continue
        outcome = kept[1].hash
        if outcome is not HashComparison.MATCHED:
            notes.append(f"{label}: hash {outcome}")

    return notes
