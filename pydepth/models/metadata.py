"""
Package metadata model for pydepth.

:class:`PackageMetadata` is what an importer reports about a single
package: where it lives, whether it ships with the interpreter, and the
names it imports. The resolver treats it as read-only.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


class ImportMode(enum.Flag):
    """Controls how much work an importer does for one lookup.

    Attributes:
        DEFAULT: Locate the package and scan its non-test sources.
        FIND_ONLY: Only locate the package; leave the import lists empty.
        TESTS: Also scan test files and fill ``test_imports``.
    """

    DEFAULT = 0
    FIND_ONLY = enum.auto()
    TESTS = enum.auto()


@dataclass
class PackageMetadata:
    """Metadata for one located package.

    Attributes:
        import_path: Canonical dotted name of the package.
        dir: Package directory, or ``None`` for builtin modules.
        root: Search-path entry the package was found under.
        files: Source files the import lists were read from.
        is_stdlib: Whether the package ships with the interpreter.
        imports: Unique names imported by non-test sources, in the order
            they were first seen.
        test_imports: Unique names imported only by test sources.
        distribution: Canonical name of the installed distribution that
            provides the package, when known.
        mode: The :class:`ImportMode` this metadata was produced with.
    """

    import_path: str
    dir: Optional[str] = None
    root: Optional[str] = None
    files: List[str] = field(default_factory=list)
    is_stdlib: bool = False
    imports: List[str] = field(default_factory=list)
    test_imports: List[str] = field(default_factory=list)
    distribution: Optional[str] = None
    mode: ImportMode = ImportMode.DEFAULT

    @property
    def is_complete(self) -> bool:
        """True when the import lists were actually scanned."""
        return not (self.mode & ImportMode.FIND_ONLY)

    def covers(self, mode: ImportMode) -> bool:
        """Return True if this metadata satisfies a lookup in *mode*.

        Find-only metadata satisfies only find-only lookups, and metadata
        scanned without test files cannot answer a lookup that wants them.
        """
        if mode & ImportMode.FIND_ONLY:
            return True
        if not self.is_complete:
            return False
        if mode & ImportMode.TESTS and not self.mode & ImportMode.TESTS:
            return False
        return True

    def to_json(self) -> Dict[str, Any]:
        """Return a JSON-serializable representation."""
        return {
            "import_path": self.import_path,
            "dir": self.dir,
            "is_stdlib": self.is_stdlib,
            "distribution": self.distribution,
            "imports": list(self.imports),
            "test_imports": list(self.test_imports),
        }
