"""Tree command implementation for pydepth.

Resolves a package's dependency tree and renders it, either as a Rich
tree on the terminal or as JSON for other tools.

Typical usage::

    # Direct dependencies of a package and everything they pull in
    $ pydepth tree requests

    # Stop after two levels and hide everything not matching "url"
    $ pydepth tree requests --max 2 --match url

    # Machine-readable output
    $ pydepth tree requests --json > tree.json
"""

from __future__ import annotations

import sys
import json
from typing import Optional

import click

from pydepth.constants import JSON_INDENT
from pydepth.exceptions import PyDepthError
from pydepth.context import pass_context, PyDepthContext
from pydepth.commands import build_tree, resolution_options
from pydepth.core import build_view, dependency_stats, view_to_json
from pydepth.utils import (
    get_logger,
    get_raw_console,
    print_error,
    print_tree,
    print_warning,
)

logger = get_logger("commands.tree")


@click.command("tree")
@click.argument("name")
@resolution_options
@click.option(
    "--map-level",
    type=click.IntRange(min=0),
    default=None,
    help="Flatten everything below this depth into one list per package.",
)
@click.option(
    "--show",
    "show_pkg",
    default=None,
    metavar="PACKAGE",
    help="Only show the dependencies of PACKAGE.",
)
@click.option(
    "--match",
    default=None,
    metavar="REGEX",
    help="Only show packages whose name matches REGEX, and their ancestors.",
)
@click.option(
    "--json",
    "as_json",
    is_flag=True,
    help="Print the tree as JSON.",
)
@pass_context
def tree(
    ctx: PyDepthContext,
    name: str,
    internal: Optional[bool],
    test: Optional[bool],
    max_depth: Optional[int],
    map_level: Optional[int],
    show_pkg: Optional[str],
    match: Optional[str],
    as_json: bool,
) -> None:
    """Show the dependency tree of package NAME.

    NAME is looked up from the current directory first, then on the
    interpreter's module search path.

    Exits:
        0 on success, 1 if NAME cannot be resolved or the package given
        with ``--show`` is not in the tree.
    """
    dep_tree = build_tree(
        ctx,
        internal=internal,
        test=test,
        max_depth=max_depth,
        map_level=map_level,
        show_pkg=show_pkg,
        match=match,
    )

    try:
        root = dep_tree.resolve(name)
    except PyDepthError as e:
        print_error(f"{name}: {e}")
        sys.exit(1)

    view = build_view(dep_tree)
    if view is None:
        print_warning(f"{dep_tree.show_pkg} is not a dependency of {root.name}")
        sys.exit(1)

    if as_json:
        click.echo(json.dumps(view_to_json(view), indent=JSON_INDENT))
        return

    print_tree(view)

    stats = dependency_stats(view)
    get_raw_console().print(f"\n{view.name} has {stats.summary()}.", markup=False)
