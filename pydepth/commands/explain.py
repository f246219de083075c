"""Explain command implementation for pydepth.

Answers "why is TARGET a dependency of NAME?" by printing every import
chain that leads from NAME to TARGET in the resolved tree.

Typical usage::

    $ pydepth explain mypkg idna
    mypkg -> requests -> idna
    mypkg -> httpx -> idna
"""

from __future__ import annotations

import sys
from typing import Optional

import click

from pydepth.core import explain as explain_chains
from pydepth.constants import EXPLAIN_SEPARATOR
from pydepth.exceptions import PyDepthError
from pydepth.context import pass_context, PyDepthContext
from pydepth.commands import build_tree, resolution_options
from pydepth.utils import get_logger, get_raw_console, print_error, print_warning

logger = get_logger("commands.explain")


@click.command("explain")
@click.argument("name")
@click.argument("target")
@resolution_options
@pass_context
def explain(
    ctx: PyDepthContext,
    name: str,
    target: str,
    internal: Optional[bool],
    test: Optional[bool],
    max_depth: Optional[int],
) -> None:
    """Show how package NAME comes to depend on TARGET.

    Exits:
        0 when at least one chain exists, 1 otherwise.
    """
    dep_tree = build_tree(ctx, internal=internal, test=test, max_depth=max_depth)

    try:
        root = dep_tree.resolve(name)
    except PyDepthError as e:
        print_error(f"{name}: {e}")
        sys.exit(1)

    chains = explain_chains(root, target)
    logger.info("Found %d chain(s) from %s to %s", len(chains), root.name, target)

    if not chains:
        print_warning(f"{target} is not a dependency of {root.name}")
        sys.exit(1)

    console = get_raw_console()
    for chain in chains:
        console.print(EXPLAIN_SEPARATOR.join(chain), markup=False, highlight=False)
