"""
Console output utilities for pydepth using Rich.

This module provides user-facing output helpers for CLI commands.
For diagnostic or debug output, use :mod:`pydepth.utils.logger`.

Guidelines:
- print_* functions: user-facing status messages
- print_tree: dependency tree rendering
- Logging should never go through this module
"""

from __future__ import annotations

import os
import sys
import threading
from typing import TYPE_CHECKING, List, Optional, Tuple

from rich.text import Text
from rich.tree import Tree as RichTree
from rich.theme import Theme
from rich.console import Console

if TYPE_CHECKING:
    from pydepth.core.view import ViewNode

# ---------------------------------------------------------------------------
# Theme configuration
# ---------------------------------------------------------------------------

PYDEPTH_THEME = Theme(
    {
        "success": "bold green",
        "error": "bold red",
        "warning": "bold yellow",
        "info": "bold cyan",
        "dim": "dim",
        "highlight": "bold magenta",
        "pkg.external": "bold cyan",
        "pkg.internal": "dim",
        "pkg.unresolved": "red",
        "pkg.test": "yellow",
    }
)

# ---------------------------------------------------------------------------
# Console lifecycle management
# ---------------------------------------------------------------------------

_console: Optional[Console] = None
_console_lock = threading.Lock()


def _should_use_color() -> bool:
    """Return True if colored output should be enabled."""
    if os.environ.get("NO_COLOR"):
        return False
    if os.environ.get("CI"):
        return False
    try:
        return sys.stdout.isatty()
    except (AttributeError, OSError):
        return False


def _get_console() -> Console:
    """Return a singleton Rich Console instance."""
    global _console

    if _console is None:
        with _console_lock:
            if _console is None:
                use_color = _should_use_color()
                _console = Console(
                    theme=PYDEPTH_THEME,
                    no_color=not use_color,
                    highlight=use_color,
                )
    return _console


def reconfigure_console() -> None:
    """Reset the global console instance.

    Useful if environment variables (e.g. NO_COLOR) change at runtime.
    """
    global _console
    with _console_lock:
        _console = None


def get_raw_console() -> Console:
    """Return the underlying Rich Console instance."""
    return _get_console()


# ---------------------------------------------------------------------------
# Status message helpers
# ---------------------------------------------------------------------------


def print_success(message: str, *, prefix: str = "[OK]") -> None:
    """Print a success message."""
    _get_console().print(f"{prefix} {message}", style="success", markup=False)


def print_error(message: str, *, prefix: str = "[ERROR]") -> None:
    """Print an error message."""
    _get_console().print(f"{prefix} {message}", style="error", markup=False)


def print_warning(message: str, *, prefix: str = "[WARNING]") -> None:
    """Print a warning message."""
    _get_console().print(f"{prefix} {message}", style="warning", markup=False)


# ---------------------------------------------------------------------------
# Tree rendering
# ---------------------------------------------------------------------------


def format_pkg_label(view: "ViewNode") -> Text:
    """Return the styled label for one package in a tree.

    Unresolved packages are marked with ``✗``, test-only dependencies
    with ``(test)``, and duplicates whose dependencies are listed at an
    earlier occurrence with ``…``.
    """
    pkg = view.pkg

    if not pkg.resolved:
        style = "pkg.unresolved"
    elif pkg.internal:
        style = "pkg.internal"
    else:
        style = "pkg.external"

    parts: List[Tuple[str, str]] = []
    if not pkg.resolved:
        parts.append(("✗ ", style))
    parts.append((pkg.name, style))
    if pkg.test:
        parts.append((" (test)", "pkg.test"))
    if pkg.resolved and pkg.duplicate and not view.children:
        parts.append((" …", "dim"))

    return Text.assemble(*parts)


def build_rich_tree(view: "ViewNode") -> RichTree:
    """Convert a view into a :class:`rich.tree.Tree`."""
    rich_tree = RichTree(format_pkg_label(view))
    stack: List[Tuple["ViewNode", RichTree]] = [(view, rich_tree)]
    while stack:
        node, branch = stack.pop()
        for child in node.children:
            stack.append((child, branch.add(format_pkg_label(child))))
    return rich_tree


def print_tree(view: "ViewNode") -> None:
    """Render a dependency view as a Rich tree."""
    _get_console().print(build_rich_tree(view))
