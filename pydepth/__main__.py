"""
Executable module for pydepth.

Running:
    python -m pydepth

is equivalent to:
    pydepth
"""

from __future__ import annotations

import sys


def _print_startup_error(exc: ImportError) -> None:
    """Report a CLI import failure on stderr."""
    sys.stderr.write("pydepth CLI could not be started.\n")
    sys.stderr.write(f"Python version : {sys.version}\n")
    try:
        from pydepth.__version__ import __version__

        sys.stderr.write(f"pydepth version: {__version__}\n")
    except ImportError:
        sys.stderr.write("pydepth version: <unknown>\n")
    sys.stderr.write("\n")
    sys.stderr.write(f"ImportError: {exc}\n")


def main() -> int:
    """
    Main entrypoint when executing `python -m pydepth`.

    Returns:
        Exit code returned by the CLI.
    """
    try:
        # Import lazily so dependencies are only loaded during CLI use
        from pydepth.cli import main as cli_main
    except ImportError as exc:
        _print_startup_error(exc)
        return 1

    return cli_main()


if __name__ == "__main__":
    sys.exit(main())
