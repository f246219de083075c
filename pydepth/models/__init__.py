"""
Data model exports for pydepth.

Example:
    >>> from pydepth.models import ImportMode, PackageMetadata
"""

from __future__ import annotations

from pydepth.models.metadata import ImportMode, PackageMetadata

__all__ = [
    "ImportMode",
    "PackageMetadata",
]
