"""Shared helpers for pydepth CLI commands.

Every command resolves a tree the same way: start from the loaded
configuration, then let command-line flags override it.
"""

from __future__ import annotations

import re
from typing import Any, Callable, Optional

import click

from pydepth.core import Tree
from pydepth.config import PyDepthConfig
from pydepth.context import PyDepthContext
from pydepth.utils.logger import get_logger

logger = get_logger("commands")

F = Callable[..., Any]


def resolution_options(func: F) -> F:
    """Add the ``--internal``, ``--test`` and ``--max`` options to a command."""
    func = click.option(
        "--max",
        "max_depth",
        type=click.IntRange(min=0),
        default=None,
        help="Maximum depth to expand (0 for no limit).",
    )(func)
    func = click.option(
        "--test/--no-test",
        default=None,
        help="Include imports declared by test files.",
    )(func)
    func = click.option(
        "--internal/--no-internal",
        default=None,
        help="Expand standard library packages below the root.",
    )(func)
    return func


def build_tree(
    ctx: PyDepthContext,
    *,
    internal: Optional[bool] = None,
    test: Optional[bool] = None,
    max_depth: Optional[int] = None,
    map_level: Optional[int] = None,
    show_pkg: Optional[str] = None,
    match: Optional[str] = None,
) -> Tree:
    """Create an initialised :class:`Tree` from config and CLI overrides.

    Options left as ``None`` keep the configured value.

    Raises:
        click.BadParameter: ``match`` is not a valid regular expression.
    """
    tree = Tree()
    (ctx.config or PyDepthConfig()).apply(tree)

    if internal is not None:
        tree.resolve_internal = internal
    if test is not None:
        tree.resolve_test = test
    if max_depth is not None:
        tree.max_depth = max_depth
    if map_level is not None:
        tree.map_level = map_level
    if show_pkg is not None:
        tree.show_pkg = show_pkg
    if match is not None:
        tree.matcher_reg = match

    try:
        tree.init()
    except re.error as exc:
        raise click.BadParameter(
            f"invalid regular expression {tree.matcher_reg!r}: {exc}",
            param_hint="'--match'",
        ) from exc

    logger.debug("Tree configuration: %r", tree)
    return tree
