from __future__ import annotations

from typing import Dict, Iterable, List, Optional, Tuple

import pytest

from pydepth.core import Tree
from pydepth.exceptions import PackageNotFoundError
from pydepth.models import ImportMode, PackageMetadata


class FakeImporter:
    """In-memory importer backed by a name -> imports mapping.

    Args:
        graph: Normal imports of every known package.
        stdlib: Names reported as internal.
        tests: Test-only imports per package.
        aliases: Requested name -> canonical name reported back.
    """

    def __init__(
        self,
        graph: Dict[str, List[str]],
        *,
        stdlib: Iterable[str] = (),
        tests: Optional[Dict[str, List[str]]] = None,
        aliases: Optional[Dict[str, str]] = None,
    ) -> None:
        self.graph = graph
        self.stdlib = set(stdlib)
        self.tests = tests or {}
        self.aliases = aliases or {}
        self.calls: List[Tuple[str, str, ImportMode]] = []

    def import_package(
        self,
        name: str,
        src_dir: str,
        mode: ImportMode = ImportMode.DEFAULT,
    ) -> PackageMetadata:
        self.calls.append((name, src_dir, mode))

        canonical = self.aliases.get(name, name)
        if canonical not in self.graph:
            raise PackageNotFoundError(
                f"Cannot find package {name!r}",
                package_name=name,
                src_dir=src_dir,
            )

        metadata = PackageMetadata(
            import_path=canonical,
            dir=f"/src/{canonical}",
            root="/src",
            is_stdlib=canonical in self.stdlib,
            mode=mode,
        )
        if not mode & ImportMode.FIND_ONLY:
            metadata.imports = list(self.graph[canonical])
            if mode & ImportMode.TESTS:
                metadata.test_imports = list(self.tests.get(canonical, []))
        return metadata

    def names_requested(self) -> List[str]:
        return [call[0] for call in self.calls]


@pytest.fixture
def fake_importer():
    """Factory fixture building a :class:`FakeImporter`."""
    return FakeImporter


@pytest.fixture
def resolve_tree():
    """Resolve *root* against an in-memory graph and return ``(tree, importer)``."""

    def _resolve(graph, root, *, stdlib=(), tests=None, aliases=None, **options):
        importer = FakeImporter(graph, stdlib=stdlib, tests=tests, aliases=aliases)
        tree = Tree(importer=importer, **options)
        tree.resolve(root)
        return tree, importer

    return _resolve
