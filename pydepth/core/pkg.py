"""Dependency graph node for pydepth.

A :class:`Pkg` is one package in a resolved tree: its identity, a link to
the package that imported it, and the dependencies discovered for it.
Nodes do not hold a reference to the :class:`~pydepth.core.tree.Tree`;
every policy question goes through the
:class:`~pydepth.core.tree.ResolveSession` passed to :meth:`Pkg.resolve`.

Resolution and expansion are separate. A node is *resolved* when the
importer could locate it, and *expanded* when its own imports were turned
into child nodes. Duplicates, nodes at the depth limit, and standard
library packages below the root are resolved but left unexpanded.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Dict, Iterator, List, Optional, Set

from pydepth.utils.logger import get_logger
from pydepth.constants import UNRESOLVABLE_NAMES
from pydepth.exceptions import PackageNotFoundError
from pydepth.models.metadata import ImportMode, PackageMetadata

if TYPE_CHECKING:
    from pydepth.core.importer import Importer
    from pydepth.core.tree import ResolveSession

logger = get_logger("core.pkg")

__all__ = ["Pkg"]


@dataclass(eq=False)
class Pkg:
    """One package in a dependency tree.

    Attributes:
        name: Import path as given by the caller, replaced by the
            canonical name reported by the importer once resolved.
        src_dir: Directory the lookup starts from.
        test: Whether this node was reached through a test-only import.
        internal: Whether the package ships with the interpreter.
        parent: Package that imported this one; ``None`` for the root.
        resolved: Whether the importer located the package.
        expanded: Whether this node's own imports were turned into
            ``deps``.
        duplicate: Whether the name was already claimed by an earlier
            occurrence, so its dependencies are listed there.
        deps: Child nodes in the order the importer reported them.
        raw: Metadata returned by the importer, if resolved.
    """

    name: str
    src_dir: str = ""
    test: bool = False
    internal: bool = False
    parent: Optional["Pkg"] = field(default=None, repr=False)
    resolved: bool = False
    expanded: bool = False
    duplicate: bool = False
    deps: List["Pkg"] = field(default_factory=list, repr=False)
    raw: Optional[PackageMetadata] = field(default=None, repr=False)

    # ------------------------------------------------------------------
    # Resolution
    # ------------------------------------------------------------------

    def resolve(self, importer: "Importer", session: "ResolveSession") -> None:
        """Resolve this node and, when policy allows, its dependencies.

        Importer failures mark the node unresolved and are not raised;
        only the tree turns a failed root into an error.

        Args:
            importer: Package lookup capability.
            session: State and policy of the resolution in progress.
        """
        tree = session.tree

        name = self.clean_name()
        if not name:
            self.resolved = False
            return

        # The dedup gate runs first so that a name is registered even when
        # its first occurrence sits at the depth limit.
        self.duplicate = session.has_seen_import(name)
        expand = not self.duplicate and not tree.is_at_max_depth(self)

        mode = ImportMode.DEFAULT if expand else ImportMode.FIND_ONLY
        if tree.resolve_test:
            mode |= ImportMode.TESTS

        metadata = session.has_seen_pkg(name)
        if metadata is None or not metadata.covers(mode):
            try:
                metadata = importer.import_package(name, self.src_dir, mode)
            except PackageNotFoundError as exc:
                logger.debug("Cannot resolve %s: %s", name, exc)
                self.resolved = False
                return
            session.cache_pkg(name, metadata)

        self.resolved = True
        self.raw = metadata
        self.name = metadata.import_path
        self.internal = metadata.is_stdlib

        # A name such as ``a.mod`` shares the gate of its canonical ``a``.
        if self.name != name and session.has_seen_import(self.name):
            self.duplicate = True
            expand = False

        if not expand:
            return

        if self.internal and not tree.should_resolve_internal(self):
            return

        self.expanded = True

        # Shared between normal and test imports so that a name used by
        # both is recorded once, as a normal dependency.
        unique: Set[str] = set()
        child_dir = metadata.root or self.src_dir
        self._set_deps(importer, session, metadata.imports, child_dir, unique, False)
        if tree.resolve_test:
            self._set_deps(
                importer, session, metadata.test_imports, child_dir, unique, True
            )

    def _set_deps(
        self,
        importer: "Importer",
        session: "ResolveSession",
        imports: List[str],
        src_dir: str,
        unique: Set[str],
        is_test: bool,
    ) -> None:
        for imp in imports:
            # Packages importing their own modules, mostly from tests.
            if imp == self.name:
                continue
            if imp in unique:
                continue
            unique.add(imp)

            self._add_dep(importer, session, imp, src_dir, is_test)

    def _add_dep(
        self,
        importer: "Importer",
        session: "ResolveSession",
        name: str,
        src_dir: str,
        is_test: bool,
    ) -> None:
        dep = Pkg(name=name, src_dir=src_dir, test=is_test, parent=self)
        dep.resolve(importer, session)
        self.deps.append(dep)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def clean_name(self) -> str:
        """Return the name to look up, or ``""`` if it cannot be resolved."""
        name = self.name.strip()
        if name in UNRESOLVABLE_NAMES:
            return ""
        return name

    @property
    def depth(self) -> int:
        """Number of hops to the root; the root has depth 0."""
        depth = 0
        node = self.parent
        while node is not None:
            depth += 1
            node = node.parent
        return depth

    def walk(self) -> Iterator["Pkg"]:
        """Yield this node and every descendant, depth first, in order."""
        stack: List[Pkg] = [self]
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(node.deps))

    def path(self) -> List["Pkg"]:
        """Return the chain of nodes from the root down to this node."""
        chain: List[Pkg] = []
        node: Optional[Pkg] = self
        while node is not None:
            chain.append(node)
            node = node.parent
        chain.reverse()
        return chain

    def to_json(self) -> Dict[str, Any]:
        """Return a JSON-serializable representation of this subtree."""
        return {
            "name": self.name,
            "resolved": self.resolved,
            "internal": self.internal,
            "test": self.test,
            "deps": [dep.to_json() for dep in self.deps],
        }

    def __str__(self) -> str:
        return self.name
