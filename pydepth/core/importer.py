"""Package lookup for pydepth.

The resolver never touches the filesystem itself. It asks an
:class:`Importer` for the metadata of one package at a time, so tests and
embedding tools can plug in their own lookup. :class:`PathImporter` is the
default, backed by the interpreter's path-based module finder.

How :class:`PathImporter` maps Python onto packages:

- A *package* is a directory package (regular or namespace) or a
  top-level plain module. A name such as ``a.b.c`` is canonicalised to the
  deepest package on its dotted path, so ``os.path`` becomes ``os`` and
  ``collections.abc`` becomes ``collections``.
- Locating uses :class:`importlib.machinery.PathFinder` one component at a
  time. Nothing is imported, so no package code runs.
- A package belongs to the standard library when its top-level name is in
  :data:`sys.stdlib_module_names`.

Typical usage::

    from pydepth.core.importer import PathImporter
    from pydepth.models import ImportMode

    importer = PathImporter()
    meta = importer.import_package("json", ".", ImportMode.DEFAULT)
    print(meta.import_path, meta.is_stdlib, meta.imports)
"""

from __future__ import annotations

import os
import sys
import importlib.metadata
from pathlib import Path
from importlib.machinery import ModuleSpec, PathFinder
from dataclasses import dataclass
from typing import Dict, List, Mapping, Optional, Protocol, Sequence, Tuple

from packaging.utils import canonicalize_name

from pydepth.utils.logger import get_logger
from pydepth.exceptions import PackageNotFoundError
from pydepth.models.metadata import ImportMode, PackageMetadata
from pydepth.core.scanner import (
    ImportRef,
    SourceFile,
    collect_package_sources,
    scan_sources,
)

logger = get_logger("core.importer")

__all__ = ["Importer", "PathImporter"]


class Importer(Protocol):
    """Capability that reports metadata for a named package."""

    def import_package(
        self,
        name: str,
        src_dir: str,
        mode: ImportMode = ImportMode.DEFAULT,
    ) -> PackageMetadata:
        """Locate *name* starting from *src_dir*.

        Raises:
            PackageNotFoundError: The package cannot be located.
        """
        ...


@dataclass(frozen=True)
class _Location:
    """Where a canonical package was found."""

    import_path: str
    spec: ModuleSpec
    is_package: bool
    root: str

    @property
    def dir(self) -> Optional[str]:
        if self.is_package:
            return list(self.spec.submodule_search_locations or [])[0]
        if self.spec.origin:
            return str(Path(self.spec.origin).parent)
        return None


def _is_package_spec(spec: ModuleSpec) -> bool:
    return bool(spec.submodule_search_locations)


class PathImporter:
    """Default :class:`Importer` built on :class:`PathFinder`.

    Args:
        path: Search path used after the source directory. Defaults to the
            live :data:`sys.path` at lookup time.

    Lookups are cached per instance, keyed by search path, until
    :meth:`clear_cache` is called. :class:`~pydepth.core.tree.Tree` clears
    it at the start of every resolution.
    """

    def __init__(self, path: Optional[Sequence[str]] = None) -> None:
        self._path: Optional[List[str]] = list(path) if path is not None else None
        self._locations: Dict[Tuple[str, Tuple[str, ...]], Optional[_Location]] = {}
        self._distributions: Optional[Mapping[str, List[str]]] = None

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def import_package(
        self,
        name: str,
        src_dir: str,
        mode: ImportMode = ImportMode.DEFAULT,
    ) -> PackageMetadata:
        """Locate *name* and, unless find-only, scan its imports.

        Args:
            name: Dotted module or package name.
            src_dir: Directory searched before the configured path.
            mode: Lookup mode; see :class:`ImportMode`.

        Returns:
            Metadata whose ``import_path`` is the canonical package name.

        Raises:
            PackageNotFoundError: *name* is empty, relative, or cannot be
                found on the search path.
        """
        name = name.strip()
        if not name or name.startswith("."):
            raise PackageNotFoundError(
                f"Invalid package name: {name!r}",
                package_name=name,
                src_dir=src_dir,
            )

        search_path = self._search_path(src_dir)
        top = name.split(".", 1)[0]

        if top in sys.builtin_module_names:
            logger.debug("%s is a builtin module", top)
            return PackageMetadata(import_path=top, is_stdlib=True, mode=mode)

        location = self._locate(name, search_path)
        if location is None:
            raise PackageNotFoundError(
                f"Cannot find package {name!r}",
                package_name=name,
                src_dir=src_dir,
            )

        metadata = PackageMetadata(
            import_path=location.import_path,
            dir=location.dir,
            root=location.root,
            is_stdlib=top in sys.stdlib_module_names,
            mode=mode,
        )
        if not metadata.is_stdlib:
            metadata.distribution = self._distribution_for(top)

        if mode & ImportMode.FIND_ONLY:
            return metadata

        sources, test_sources = self._sources(location, bool(mode & ImportMode.TESTS))
        metadata.files = [str(source.path) for source in (*sources, *test_sources)]

        child_path = self._search_path(location.root)
        metadata.imports = self._canonicalise(scan_sources(sources), child_path)
        seen = set(metadata.imports)
        metadata.test_imports = [
            imp
            for imp in self._canonicalise(scan_sources(test_sources), child_path)
            if imp not in seen
        ]

        logger.debug(
            "Imported %s: %d import(s), %d test import(s)",
            metadata.import_path,
            len(metadata.imports),
            len(metadata.test_imports),
        )
        return metadata

    def clear_cache(self) -> None:
        """Forget every location and distribution looked up so far."""
        self._locations.clear()
        self._distributions = None
        PathFinder.invalidate_caches()

    # ------------------------------------------------------------------
    # Location
    # ------------------------------------------------------------------

    def _search_path(self, src_dir: Optional[str]) -> List[str]:
        """Return ``[src_dir, *path]`` with blanks expanded and duplicates dropped."""
        base = self._path if self._path is not None else sys.path
        result: List[str] = []
        for entry in [src_dir or "", *base]:
            if not isinstance(entry, str):
                continue
            entry = entry or os.getcwd()
            if entry not in result:
                result.append(entry)
        return result

    def _locate(self, name: str, search_path: List[str]) -> Optional[_Location]:
        key = (name, tuple(search_path))
        if key not in self._locations:
            self._locations[key] = self._find(name, search_path)
        return self._locations[key]

    @staticmethod
    def _find(name: str, search_path: List[str]) -> Optional[_Location]:
        parts = name.split(".")

        spec = PathFinder.find_spec(parts[0], search_path)
        if spec is None:
            return None

        is_package = _is_package_spec(spec)
        if is_package:
            pkg_dir = Path(list(spec.submodule_search_locations or [])[0])
            root = str(pkg_dir.parent)
        elif spec.origin:
            root = str(Path(spec.origin).parent)
        else:
            return None

        current_name = parts[0]
        current = spec
        for part in parts[1:]:
            if not _is_package_spec(current):
                break
            child_name = f"{current_name}.{part}"
            child = PathFinder.find_spec(
                child_name, list(current.submodule_search_locations or [])
            )
            if child is None or not _is_package_spec(child):
                break
            current_name, current = child_name, child

        return _Location(
            import_path=current_name,
            spec=current,
            is_package=_is_package_spec(current),
            root=root,
        )

    # ------------------------------------------------------------------
    # Scanning
    # ------------------------------------------------------------------

    @staticmethod
    def _sources(
        location: _Location,
        include_tests: bool,
    ) -> Tuple[List[SourceFile], List[SourceFile]]:
        if location.is_package:
            pkg_dir = location.dir
            if pkg_dir is None:
                return [], []
            return collect_package_sources(
                Path(pkg_dir),
                location.import_path,
                include_tests=include_tests,
            )

        origin = location.spec.origin
        if origin and origin.endswith(".py"):
            # Relative imports are invalid in a top-level module
            return [SourceFile(Path(origin), "")], []
        return [], []

    def _canonicalise(self, refs: List[ImportRef], search_path: List[str]) -> List[str]:
        """Map raw imports to unique canonical package names, keeping order."""
        names: List[str] = []
        for ref in refs:
            name = self._canonical_name(ref, search_path)
            if name not in names:
                names.append(name)
        return names

    def _canonical_name(self, ref: ImportRef, search_path: List[str]) -> str:
        top = ref.name.split(".", 1)[0]
        if top in sys.builtin_module_names:
            return top

        location = self._locate(ref.name, search_path)
        if location is not None:
            return location.import_path

        # Unknown packages surface as unresolved dependencies under the
        # module name written in the import statement.
        return ref.module

    # ------------------------------------------------------------------
    # Distribution lookup
    # ------------------------------------------------------------------

    def _distribution_for(self, top_level: str) -> Optional[str]:
        if self._distributions is None:
            try:
                self._distributions = importlib.metadata.packages_distributions()
            except Exception as exc:  # corrupt dist-info metadata
                logger.debug("Cannot read installed distributions: %s", exc)
                self._distributions = {}

        dists = self._distributions.get(top_level)
        if not dists:
            return None
        return canonicalize_name(dists[0])
