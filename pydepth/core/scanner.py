"""Import statement scanning for pydepth.

Reads Python source files with :mod:`ast` and reports the modules they
import, without executing anything. Relative imports are anchored on the
package the file belongs to, so ``from .util import x`` inside
``pkg/sub/mod.py`` is reported as ``pkg.sub.util.x``.

Each import is reported as an :class:`ImportRef`: the most specific
dotted name the statement could refer to, plus the module named in the
statement itself. Callers canonicalise ``name`` and fall back to
``module`` when ``name`` cannot be located (``from a import func``).
"""

from __future__ import annotations

import ast
import fnmatch
from pathlib import Path
from typing import Iterable, Iterator, List, NamedTuple, Optional, Tuple

from pydepth.utils.logger import get_logger
from pydepth.constants import (
    IGNORED_DIR_NAMES,
    SOURCE_SUFFIX,
    TEST_DIR_NAMES,
    TEST_FILE_PATTERNS,
)

logger = get_logger("core.scanner")

__all__ = [
    "ImportRef",
    "SourceFile",
    "collect_package_sources",
    "resolve_relative",
    "scan_file",
    "scan_sources",
]


class ImportRef(NamedTuple):
    """One imported name as written in source."""

    name: str
    module: str


class SourceFile(NamedTuple):
    """A source file and the dotted package it belongs to."""

    path: Path
    package: str


# ---------------------------------------------------------------------------
# Source discovery
# ---------------------------------------------------------------------------


def _is_test_file(path: Path) -> bool:
    return any(fnmatch.fnmatch(path.name, pattern) for pattern in TEST_FILE_PATTERNS)


def _iter_test_dir(directory: Path, package: str) -> Iterator[SourceFile]:
    """Yield every source file under *directory*, depth first, sorted."""
    for entry in sorted(directory.iterdir()):
        if entry.is_dir():
            if entry.name in IGNORED_DIR_NAMES or entry.name.startswith("."):
                continue
            yield from _iter_test_dir(entry, f"{package}.{entry.name}")
        elif entry.suffix == SOURCE_SUFFIX:
            yield SourceFile(entry, package)


def collect_package_sources(
    package_dir: Path,
    package: str,
    *,
    include_tests: bool = False,
) -> Tuple[List[SourceFile], List[SourceFile]]:
    """Split the sources of one package directory into normal and test files.

    Only files directly inside *package_dir* belong to the package;
    sub-packages are separate packages. The exception is a ``tests`` or
    ``test`` sub-directory, whose files are all test files.

    Args:
        package_dir: Directory of the package.
        package: Dotted name of the package.
        include_tests: Also collect test files. When ``False`` the second
            list is empty and test-named files are still excluded from the
            first.

    Returns:
        ``(sources, test_sources)``, each sorted by path.
    """
    sources: List[SourceFile] = []
    tests: List[SourceFile] = []

    try:
        entries = sorted(package_dir.iterdir())
    except OSError as exc:
        logger.debug("Cannot list %s: %s", package_dir, exc)
        return sources, tests

    test_dirs: List[Path] = []
    for entry in entries:
        if entry.is_dir():
            if entry.name in TEST_DIR_NAMES:
                test_dirs.append(entry)
            continue
        if entry.suffix != SOURCE_SUFFIX:
            continue
        if _is_test_file(entry):
            if include_tests:
                tests.append(SourceFile(entry, package))
        else:
            sources.append(SourceFile(entry, package))

    if include_tests:
        for test_dir in test_dirs:
            tests.extend(_iter_test_dir(test_dir, f"{package}.{test_dir.name}"))

    return sources, tests


# ---------------------------------------------------------------------------
# Import extraction
# ---------------------------------------------------------------------------


def resolve_relative(package: str, level: int, module: Optional[str]) -> Optional[str]:
    """Turn a relative ``from`` import into an absolute module name.

    Args:
        package: Package the importing file belongs to (``""`` for a
            top-level module, where relative imports are invalid).
        level: Number of leading dots.
        module: Module written after the dots, if any.

    Returns:
        The absolute module name, or ``None`` when the import climbs above
        the top-level package.

    Example::

        >>> resolve_relative("a.b", 1, "c")
        'a.b.c'
        >>> resolve_relative("a.b", 2, None)
        'a'
        >>> resolve_relative("a", 3, "x") is None
        True
    """
    if level == 0:
        return module

    parts = package.split(".") if package else []
    if level - 1 >= len(parts):
        return None

    base = parts[: len(parts) - (level - 1)]
    if module:
        base.append(module)
    return ".".join(base)


class _ImportCollector(ast.NodeVisitor):
    """Collect imports in source order, including nested ones."""

    def __init__(self, package: str) -> None:
        self.package = package
        self.refs: List[ImportRef] = []

    def visit_Import(self, node: ast.Import) -> None:
        for alias in node.names:
            self.refs.append(ImportRef(alias.name, alias.name))

    def visit_ImportFrom(self, node: ast.ImportFrom) -> None:
        module = resolve_relative(self.package, node.level, node.module)
        if not module:
            return
        for alias in node.names:
            if alias.name == "*":
                self.refs.append(ImportRef(module, module))
            else:
                self.refs.append(ImportRef(f"{module}.{alias.name}", module))


def scan_file(path: Path, package: str) -> List[ImportRef]:
    """Return the imports of a single file, in source order.

    Unreadable files and files with syntax errors yield no imports.
    """
    try:
        source = path.read_text(encoding="utf-8")
        tree = ast.parse(source, filename=str(path))
    except (OSError, UnicodeDecodeError, SyntaxError, ValueError) as exc:
        logger.debug("Skipping %s: %s", path, exc)
        return []

    collector = _ImportCollector(package)
    collector.visit(tree)
    return collector.refs


def scan_sources(sources: Iterable[SourceFile]) -> List[ImportRef]:
    """Concatenate the imports of several files, in file order."""
    refs: List[ImportRef] = []
    for source in sources:
        refs.extend(scan_file(source.path, source.package))
    return refs
