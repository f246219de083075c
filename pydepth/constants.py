"""
Centralized constants for pydepth.

This module defines immutable configuration values used across pydepth,
including traversal defaults, source file patterns, configuration file
names, and logging formats. All values are intended to be treated as
read-only.
"""

from typing import Final, Sequence

# ---------------------------------------------------------------------------
# Traversal defaults
# ---------------------------------------------------------------------------

#: Expand internal (standard library) packages beyond the root.
DEFAULT_RESOLVE_INTERNAL: Final[bool] = False

#: Include imports declared by test files.
DEFAULT_RESOLVE_TEST: Final[bool] = False

#: Maximum resolution depth; ``0`` disables the limit.
DEFAULT_MAX_DEPTH: Final[int] = 0

#: Display flattening level; ``0`` disables flattening.
DEFAULT_MAP_LEVEL: Final[int] = 0

#: Module names that can never be located as a package.
UNRESOLVABLE_NAMES: Final[Sequence[str]] = ("__main__",)

# ---------------------------------------------------------------------------
# Source file patterns
# ---------------------------------------------------------------------------

#: Suffix of Python source files scanned for imports.
SOURCE_SUFFIX: Final[str] = ".py"

#: Glob patterns identifying test files inside a package directory.
TEST_FILE_PATTERNS: Final[Sequence[str]] = (
    "test_*.py",
    "*_test.py",
    "conftest.py",
)

#: Sub-directories whose sources are all treated as test files.
TEST_DIR_NAMES: Final[Sequence[str]] = ("tests", "test")

#: Directory names never descended into while collecting test files.
IGNORED_DIR_NAMES: Final[Sequence[str]] = ("__pycache__",)

# ---------------------------------------------------------------------------
# Configuration files
# ---------------------------------------------------------------------------

#: Dedicated configuration file (settings under ``[pydepth]``).
CONFIG_FILE_NAME: Final[str] = "pydepth.toml"

#: Project file (settings under ``[tool.pydepth]``).
PYPROJECT_FILE_NAME: Final[str] = "pyproject.toml"

# ---------------------------------------------------------------------------
# Output
# ---------------------------------------------------------------------------

#: Separator used when printing a dependency chain.
EXPLAIN_SEPARATOR: Final[str] = " -> "

#: Indentation used by the JSON renderer.
JSON_INDENT: Final[int] = 2

# ---------------------------------------------------------------------------
# Logging configuration
# ---------------------------------------------------------------------------

#: Timestamp format for verbose logging.
LOG_DATE_FORMAT: Final[str] = "%Y-%m-%d %H:%M:%S"

#: Default log format (non-verbose).
LOG_DEFAULT_FORMAT: Final[str] = "%(levelname)s: %(message)s"

#: Verbose log format including timestamp and logger name.
LOG_VERBOSE_FORMAT: Final[str] = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
