"""Presentation views over a resolved dependency tree.

Nothing in this module changes what was resolved. Each function reads a
:class:`~pydepth.core.tree.Tree` after :meth:`~pydepth.core.tree.Tree.resolve`
and produces something to display:

- :func:`build_view` applies the tree's display options, in this order:
  ``show_pkg`` re-roots the view, ``matcher_reg`` prunes it, and
  ``map_level`` flattens it.
- :func:`dependency_stats` counts what a view contains.
- :func:`explain` lists every chain leading from the root to a package.
- :func:`view_to_json` serialises a view.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional

from pydepth.core.pkg import Pkg
from pydepth.core.tree import Tree
from pydepth.utils.logger import get_logger

logger = get_logger("core.view")

__all__ = [
    "DependencyStats",
    "ViewNode",
    "build_view",
    "dependency_stats",
    "explain",
    "find_pkg",
    "view_to_json",
]


@dataclass
class ViewNode:
    """A package as it appears in a view.

    Attributes:
        pkg: The resolved node being displayed.
        children: Displayed children; may differ from ``pkg.deps`` after
            filtering or flattening.
    """

    pkg: Pkg
    children: List["ViewNode"] = field(default_factory=list)

    @property
    def name(self) -> str:
        return self.pkg.name


@dataclass
class DependencyStats:
    """Counts of the unique packages below the root of a view.

    A package reached several times is counted once; it is internal,
    unresolved, or test-only if its first occurrence is.
    """

    total: int = 0
    internal: int = 0
    external: int = 0
    unresolved: int = 0
    test: int = 0

    def summary(self) -> str:
        """Return a one-line human-readable summary."""
        parts = [f"{self.internal} internal", f"{self.external} external"]
        if self.test:
            parts.append(f"{self.test} test-only")
        if self.unresolved:
            parts.append(f"{self.unresolved} unresolved")
        return f"{self.total} dependencies ({', '.join(parts)})"


# ---------------------------------------------------------------------------
# View construction
# ---------------------------------------------------------------------------


def _first_occurrence(root: Pkg, wanted: Callable[[str], bool]) -> Optional[Pkg]:
    # Later occurrences of an expanded package carry no dependencies, so
    # the expanded one wins over an earlier leaf.
    first: Optional[Pkg] = None
    for node in root.walk():
        if not wanted(node.name):
            continue
        if node.expanded:
            return node
        if first is None:
            first = node
    return first


def find_pkg(root: Pkg, name: str) -> Optional[Pkg]:
    """Return the node to show for *name*.

    Prefers the first expanded occurrence in traversal order and falls
    back to the first occurrence of any kind.
    """
    return _first_occurrence(root, lambda node_name: node_name == name)


def _pruned_children(tree: Tree, pkg: Pkg) -> List[ViewNode]:
    children: List[ViewNode] = []
    for dep in pkg.deps:
        grandchildren = _pruned_children(tree, dep)
        if grandchildren or not tree.should_filtered(dep.name):
            children.append(ViewNode(dep, grandchildren))
    return children


def _flatten(view: ViewNode, level: int, depth: int = 0) -> None:
    if depth < level:
        for child in view.children:
            _flatten(child, level, depth + 1)
        return

    first_seen: Dict[str, Pkg] = {}
    stack = list(reversed(view.children))
    while stack:
        node = stack.pop()
        first_seen.setdefault(node.name, node.pkg)
        stack.extend(reversed(node.children))

    view.children = [ViewNode(first_seen[name]) for name in sorted(first_seen)]


def build_view(tree: Tree) -> Optional[ViewNode]:
    """Apply the tree's display options to its resolved root.

    Args:
        tree: A tree that has been resolved.

    Returns:
        The root of the view, or ``None`` when ``show_pkg`` names a
        package that is not in the tree.

    Raises:
        ValueError: The tree has not been resolved.
    """
    if tree.root is None:
        raise ValueError("Tree has not been resolved")

    start: Optional[Pkg] = tree.root
    if tree.show_pkg:
        start = _first_occurrence(tree.root, lambda name: not tree.show_filter(name))
    if start is None:
        logger.info("Package %s does not appear in the tree", tree.show_pkg)
        return None

    # The view root is always kept, matching or not
    view = ViewNode(start, _pruned_children(tree, start))

    if tree.map_level > 0:
        _flatten(view, tree.map_level)

    return view


# ---------------------------------------------------------------------------
# Queries
# ---------------------------------------------------------------------------


def dependency_stats(view: ViewNode) -> DependencyStats:
    """Count the unique packages below the root of *view*."""
    stats = DependencyStats()
    seen = {view.name}

    stack = list(reversed(view.children))
    while stack:
        node = stack.pop()
        stack.extend(reversed(node.children))
        if node.name in seen:
            continue
        seen.add(node.name)

        pkg = node.pkg
        stats.total += 1
        if not pkg.resolved:
            stats.unresolved += 1
        elif pkg.internal:
            stats.internal += 1
        else:
            stats.external += 1
        if pkg.test:
            stats.test += 1

    return stats


def explain(root: Pkg, target: str) -> List[List[str]]:
    """Return every chain of names from *root* to a node named *target*.

    Chains are listed in traversal order. Every occurrence counts,
    including leaves recorded for packages already expanded elsewhere.

    Example::

        >>> explain(tree.root, "idna")
        [['mypkg', 'requests', 'idna'], ['mypkg', 'httpx', 'idna']]
    """
    return [
        [step.name for step in node.path()]
        for node in root.walk()
        if node.name == target and node is not root
    ]


def view_to_json(view: ViewNode) -> Dict[str, Any]:
    """Return a JSON-serializable representation of *view*."""
    pkg = view.pkg
    return {
        "name": pkg.name,
        "resolved": pkg.resolved,
        "internal": pkg.internal,
        "test": pkg.test,
        "deps": [view_to_json(child) for child in view.children],
    }
