"""
Command-line interface for pydepth.

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

from pydepth.config import load_config
from pydepth.__version__ import __version__
from pydepth.context import PyDepthContext
from pydepth.exceptions import ConfigError, PyDepthError
from pydepth.utils.logger import get_logger, setup_logging, verbosity_to_level
from pydepth.utils.console import print_error, print_warning, reconfigure_console
from pydepth.commands.tree import tree
from pydepth.commands.explain import explain

logger = get_logger("cli")


@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.option(
    "--config",
    "-c",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Path to configuration file.",
    envvar="PYDEPTH_CONFIG",
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
    envvar="PYDEPTH_COLOR",
)
@click.version_option(
    version=__version__,
    prog_name="pydepth",
    message="%(prog)s %(version)s",
)
@click.pass_context
def cli(
    ctx: click.Context,
    config: Optional[Path],
    verbose: int,
    color: bool,
) -> None:
    """pydepth: visualise the import dependency tree of a Python package.

    \b
    Available commands:
      pydepth tree NAME            Show the dependency tree of NAME
      pydepth explain NAME TARGET  Show why NAME depends on TARGET

    \b
    Examples:
      pydepth tree requests
      pydepth tree requests --max 2 --internal
      pydepth explain requests idna

    Use ``pydepth COMMAND --help`` for command-specific options.
    """
    # Respect NO_COLOR for the console and log formatter
    if color:
        os.environ.pop("NO_COLOR", None)
    else:
        os.environ["NO_COLOR"] = "1"
    reconfigure_console()

    _configure_logging(verbose)

    try:
        loaded_config = load_config(config)
    except ConfigError as exc:
        print_error(str(exc))
        raise SystemExit(1) from exc

    pydepth_ctx = PyDepthContext()
    pydepth_ctx.config_path = config or loaded_config.source_path
    pydepth_ctx.color = color
    pydepth_ctx.verbose = verbose
    pydepth_ctx.config = loaded_config
    ctx.obj = pydepth_ctx

    logger.debug("pydepth v%s", __version__)
    logger.debug("Config path: %s", pydepth_ctx.config_path)
    logger.debug("Verbosity: %s | Color: %s", verbose, color)


def _configure_logging(verbose: int) -> None:
    """Configure logging level based on verbosity flags."""
    level = verbosity_to_level(verbose)
    setup_logging(level=level, verbose=verbose >= 2)
    logger.debug("Logging initialized at %s level", logging.getLevelName(level))


# Register CLI subcommands
cli.add_command(tree)
cli.add_command(explain)


def main() -> int:
    """Main entry point for the pydepth CLI.

    Returns:
        Exit code:
            0   Success
            1   Unhandled or application error
            2   Usage error (Click)
            130 Interrupted by user (Ctrl+C)
    """
    try:
        cli(standalone_mode=False)
        return 0

    except click.ClickException as exc:
        exc.show()
        return exc.exit_code

    except PyDepthError as exc:
        print_error(str(exc))
        logger.debug(
            "PyDepthError details: %s",
            exc.details or "<none>",
            exc_info=True,
        )
        return 1

    except KeyboardInterrupt:
        print_warning("\nOperation cancelled by user")
        return 130

    except Exception as exc:
        print_error(f"Unexpected error: {exc}")
        logger.exception("Unhandled exception in CLI")
        return 1


if __name__ == "__main__":
    sys.exit(main())
