"""
Command-line interface for distsift.

This module provides the main CLI entry point and handles global options,
configuration loading, and command registration.
"""

from __future__ import annotations

import os
import sys
import logging
from pathlib import Path
from typing import Optional

import click

from distsift.config import load_config
from distsift.__version__ import VERSION_STRING, __version__
from distsift.context import DistSiftContext
from distsift.exceptions import ConfigError, DistSiftError
from distsift.utils.console import print_error, print_warning, reconfigure_console
from distsift.utils.logger import get_logger, level_for_verbosity, setup_logging

logger = get_logger("cli")


@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.option(
    "--config",
    "-c",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Path to configuration file.",
    envvar="DISTSIFT_CONFIG",
)
@click.option(
    "--verbose",
    "-v",
    count=True,
    help="Increase verbosity (can be repeated: -v, -vv).",
)
@click.option(
    "--color/--no-color",
    default=True,
    help="Enable or disable colored output.",
    envvar="DISTSIFT_COLOR",
)
@click.version_option(
    version=__version__,
    prog_name="distsift",
    message="%(prog)s %(version)s",
)
@click.pass_context
def cli(
    ctx: click.Context,
    config: Optional[Path],
    verbose: int,
    color: bool,
) -> None:
    """distsift — pick the best distribution per version and read static requirements.

    \b
    Available commands:
      distsift rank        Rank wheels and sdists from find-links sources
      distsift requires    Show the requirements declared in pyproject.toml

    \b
    Examples:
      distsift rank --find-links ./wheelhouse
      distsift requires pyproject.toml --format json
      distsift -vv rank idna-3.6-py3-none-any.whl idna-3.6.tar.gz

    Use ``distsift COMMAND --help`` for command-specific options.
    """
    level = level_for_verbosity(verbose)
    setup_logging(level=level, verbose=verbose > 1)
    logger.debug("Logging initialized at %s level", logging.getLevelName(level))

    # Respect NO_COLOR for downstream libraries
    if color:
        os.environ.pop("NO_COLOR", None)
    else:
        os.environ["NO_COLOR"] = "1"
    reconfigure_console()

    try:
        loaded_config = load_config(config)
    except ConfigError as exc:
        print_error(str(exc))
        raise SystemExit(1) from exc

    distsift_ctx = DistSiftContext()
    distsift_ctx.config_path = config or loaded_config.source_path
    distsift_ctx.color = color
    distsift_ctx.verbose = verbose
    distsift_ctx.config = loaded_config
    ctx.obj = distsift_ctx

    logger.debug("%s", VERSION_STRING)
    logger.debug("Config path: %s", distsift_ctx.config_path)
    logger.debug("Verbosity: %s | Color: %s", verbose, color)


# Register CLI subcommands
from distsift.commands.rank import rank  # noqa: E402
from distsift.commands.requires import requires  # noqa: E402

cli.add_command(rank)
cli.add_command(requires)


def main() -> int:
    """Main entry point for the distsift CLI.

    Returns:
        Exit code:
            0   Success
            1   Application error
            2   Usage error (Click)
            130 Interrupted by user (Ctrl+C)
    """
    try:
        cli(standalone_mode=False)
        return 0

    except click.exceptions.Exit as exc:
        return exc.exit_code

    except click.ClickException as exc:
        exc.show()
        return exc.exit_code

    except click.Abort:
        print_warning("\nOperation cancelled by user")
        return 130

    except SystemExit as exc:
        return exc.code if isinstance(exc.code, int) else 1

    except DistSiftError as exc:
        print_error(str(exc))
        logger.debug(
            "DistSiftError details: %s",
            exc.details or "<none>",
            exc_info=True,
        )
        return 1

    except KeyboardInterrupt:
        print_warning("\nOperation cancelled by user")
        return 130


if __name__ == "__main__":
    sys.exit(main())
