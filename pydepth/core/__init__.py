"""
Core functionality exports for pydepth.

Importing from here keeps user-facing imports clean and stable:

    from pydepth.core import Tree

The resolver itself lives in :mod:`pydepth.core.tree` and
:mod:`pydepth.core.pkg`; :mod:`pydepth.core.view` holds the
presentation helpers applied after resolution.
"""

from __future__ import annotations

from pydepth.core.pkg import Pkg
from pydepth.core.tree import ResolveSession, Tree
from pydepth.core.importer import Importer, PathImporter
from pydepth.core.view import (
    DependencyStats,
    ViewNode,
    build_view,
    dependency_stats,
    explain,
    find_pkg,
    view_to_json,
)

__all__ = [
    "Pkg",
    "Tree",
    "ResolveSession",
    "Importer",
    "PathImporter",
    "DependencyStats",
    "ViewNode",
    "build_view",
    "dependency_stats",
    "explain",
    "find_pkg",
    "view_to_json",
]
