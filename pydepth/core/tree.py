"""Dependency tree resolution for pydepth.

:class:`Tree` holds the traversal configuration and answers every policy
question asked while resolving: whether to expand internal packages,
whether the depth limit is reached, and whether a name has already been
expanded. The mutable state of one resolution (the expansion set and the
metadata cache) lives on a :class:`ResolveSession`, created fresh by each
:meth:`Tree.resolve` call.

Typical usage::

    from pydepth.core.tree import Tree

    tree = Tree(max_depth=3)
    root = tree.resolve("json")
    print(f"{root.name} has {len(root.deps)} dependencies.")

Any package whose name has been expanded once is recorded as a leaf on
every later occurrence in the same resolution, anywhere in the tree. That
rule also keeps import cycles from recursing forever.
"""

from __future__ import annotations

import os
import re
from dataclasses import dataclass, field
from typing import Callable, Dict, Optional, Pattern, Set

from pydepth.core.pkg import Pkg
from pydepth.utils.logger import get_logger
from pydepth.models.metadata import PackageMetadata
from pydepth.exceptions import RootPackageNotResolvedError
from pydepth.core.importer import Importer, PathImporter
from pydepth.constants import (
    DEFAULT_MAP_LEVEL,
    DEFAULT_MAX_DEPTH,
    DEFAULT_RESOLVE_INTERNAL,
    DEFAULT_RESOLVE_TEST,
)

logger = get_logger("core.tree")

__all__ = ["ResolveSession", "Tree"]


@dataclass
class ResolveSession:
    """State scoped to a single :meth:`Tree.resolve` call.

    Attributes:
        tree: Tree supplying the traversal policy.
        import_cache: Names whose expansion has already been decided.
        pkg_cache: Metadata already returned by the importer, by name.
    """

    tree: "Tree"
    import_cache: Set[str] = field(default_factory=set)
    pkg_cache: Dict[str, PackageMetadata] = field(default_factory=dict)

    def has_seen_import(self, name: str) -> bool:
        """Return whether *name* was seen before, registering it if not.

        Returns ``False`` exactly once per name and session.
        """
        if name in self.import_cache:
            return True
        self.import_cache.add(name)
        return False

    def has_seen_pkg(self, name: str) -> Optional[PackageMetadata]:
        """Return cached metadata for *name*, or ``None``."""
        return self.pkg_cache.get(name)

    def cache_pkg(self, name: str, metadata: PackageMetadata) -> None:
        """Remember the metadata returned for *name*."""
        self.pkg_cache[name] = metadata


class Tree:
    """Configuration and policy for resolving a dependency tree.

    Args:
        resolve_internal: Expand standard library packages below the root.
        resolve_test: Include imports declared by test files.
        max_depth: Deepest level that is still expanded; ``0`` for no limit.
        map_level: View depth at which subtrees are flattened; ``0`` to
            disable.
        show_pkg: Only show the dependencies of this package.
        matcher_reg: Regular expression; names that do not match are
            hidden from views unless a descendant matches.
        importer: Package lookup; defaults to :class:`PathImporter`.

    The display options (``map_level``, ``show_pkg``, ``matcher_reg``)
    never change what is resolved; they are applied by
    :mod:`pydepth.core.view` to an already resolved tree.
    """

    def __init__(
        self,
        *,
        resolve_internal: bool = DEFAULT_RESOLVE_INTERNAL,
        resolve_test: bool = DEFAULT_RESOLVE_TEST,
        max_depth: int = DEFAULT_MAX_DEPTH,
        map_level: int = DEFAULT_MAP_LEVEL,
        show_pkg: str = "",
        matcher_reg: str = "",
        importer: Optional[Importer] = None,
    ) -> None:
        self.root: Optional[Pkg] = None

        self.resolve_internal = resolve_internal
        self.resolve_test = resolve_test
        self.max_depth = max_depth
        self.map_level = map_level
        self.show_pkg = show_pkg
        self.matcher_reg = matcher_reg
        self.importer = importer

        self._matched: Optional[Pattern[str]] = None
        self._show_filtered: Optional[Callable[[str], bool]] = None
        self._session: Optional[ResolveSession] = None
        self._initialized = False

    def __repr__(self) -> str:
        return (
            f"Tree(resolve_internal={self.resolve_internal}, "
            f"resolve_test={self.resolve_test}, max_depth={self.max_depth}, "
            f"map_level={self.map_level}, show_pkg={self.show_pkg!r}, "
            f"matcher_reg={self.matcher_reg!r})"
        )

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def init(self) -> None:
        """Compile the name pattern and derive the show filter.

        Called by :meth:`resolve` on first use. Call it again after
        changing ``matcher_reg`` or ``show_pkg``.

        Raises:
            re.error: ``matcher_reg`` is not a valid regular expression.
        """
        self._matched = re.compile(self.matcher_reg) if self.matcher_reg else None

        if self.show_pkg:
            show_pkg = self.show_pkg
            self._show_filtered = lambda pkg_name: pkg_name != show_pkg
        else:
            self._show_filtered = None

        self._session = None
        self._initialized = True

    def resolve(self, name: str) -> Pkg:
        """Resolve *name* and every package it depends on.

        The root is looked up from the current working directory. Each
        call starts from an empty expansion set and metadata cache, clears
        the lookup cache of a :class:`PathImporter`, and replaces
        :attr:`root`.

        Args:
            name: Dotted name of the root package.

        Returns:
            The resolved root node (also stored as :attr:`root`).

        Raises:
            RootPackageNotResolvedError: The root package cannot be found.
        """
        if not self._initialized:
            self.init()

        pwd = os.getcwd()

        self.root = Pkg(name=name, src_dir=pwd, test=False)
        self._session = ResolveSession(self)

        if self.importer is None:
            self.importer = PathImporter()
        elif isinstance(self.importer, PathImporter):
            self.importer.clear_cache()

        logger.info("Resolving %s from %s", name, pwd)
        self.root.resolve(self.importer, self._session)

        if not self.root.resolved:
            logger.warning("Root package %s could not be resolved", name)
            raise RootPackageNotResolvedError(name)

        logger.info(
            "Resolved %s: %d direct dependencies, %d package(s) expanded",
            self.root.name,
            len(self.root.deps),
            len(self._session.import_cache),
        )
        return self.root

    @property
    def session(self) -> ResolveSession:
        """State of the latest resolution, created on demand."""
        if self._session is None:
            self._session = ResolveSession(self)
        return self._session

    # ------------------------------------------------------------------
    # Expansion policy
    # ------------------------------------------------------------------

    def should_resolve_internal(self, node: Pkg) -> bool:
        """Return whether the internal package *node* may be expanded.

        Without ``resolve_internal`` only the root qualifies, so the
        root's own imports are listed but the standard library's are not.
        """
        if self.resolve_internal:
            return True
        return node is self.root

    def is_at_max_depth(self, node: Pkg) -> bool:
        """Return True when *node* is at or beyond ``max_depth``.

        Always False when ``max_depth`` is zero.
        """
        if self.max_depth == 0:
            return False
        return node.depth >= self.max_depth

    def has_seen_import(self, name: str) -> bool:
        """Return whether *name* was already expanded, registering it if not."""
        return self.session.has_seen_import(name)

    def has_seen_pkg(self, name: str) -> Optional[PackageMetadata]:
        """Return metadata cached during the latest resolution, or ``None``."""
        return self.session.has_seen_pkg(name)

    def cache_pkg(self, name: str, metadata: PackageMetadata) -> None:
        """Cache *metadata* for *name* in the current session."""
        self.session.cache_pkg(name, metadata)

    # ------------------------------------------------------------------
    # Display filters
    # ------------------------------------------------------------------

    def should_filtered(self, name: str) -> bool:
        """Return True when a pattern is set and *name* does not match it."""
        if self._matched is None:
            return False
        return self._matched.search(name) is None

    def show_filter(self, name: str) -> bool:
        """Return True when ``show_pkg`` is set and *name* is not it."""
        if self._show_filtered is None:
            return False
        return self._show_filtered(name)
