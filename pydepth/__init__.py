"""
pydepth: visualise the import dependency tree of a Python package.

pydepth walks the ``import`` statements of a package's sources without
executing them, follows each imported package in turn, and presents the
result as a tree.

Library usage::

    from pydepth import Tree

    tree = Tree(max_depth=2)
    root = tree.resolve("requests")
    for pkg in root.walk():
        print("  " * pkg.depth + pkg.name)
"""

from __future__ import annotations

from pydepth.__version__ import __version__
from pydepth.core import Pkg, Tree, Importer, PathImporter
from pydepth.models import ImportMode, PackageMetadata
from pydepth.exceptions import (
    ConfigError,
    PyDepthError,
    PackageNotFoundError,
    RootPackageNotResolvedError,
)

# ---------------------------------------------------------------------------
# Package Metadata
# ---------------------------------------------------------------------------

__author__ = "pydepth Contributors"
__license__ = "MIT"
__description__ = "Dependency tree visualisation for Python packages."

__all__ = [
    "__version__",
    "Tree",
    "Pkg",
    "Importer",
    "PathImporter",
    "ImportMode",
    "PackageMetadata",
    "PyDepthError",
    "PackageNotFoundError",
    "RootPackageNotResolvedError",
    "ConfigError",
]
