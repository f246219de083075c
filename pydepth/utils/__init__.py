"""
Utility helpers for pydepth.

This package provides reusable utilities used across pydepth:

- Console output helpers (Rich-based)
- Logging configuration and retrieval

Only symbols listed in ``__all__`` are considered part of the public API.
"""

from __future__ import annotations

# ---------------------------------------------------------------------------
# Logging utilities
# ---------------------------------------------------------------------------

from pydepth.utils.logger import (
    disable_logging,
    get_logger,
    is_logging_configured,
    setup_logging,
    verbosity_to_level,
)

# ---------------------------------------------------------------------------
# Console utilities
# ---------------------------------------------------------------------------

from pydepth.utils.console import (
    get_raw_console,
    print_error,
    print_success,
    print_tree,
    print_warning,
    reconfigure_console,
)

# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

__all__ = [
    # Console
    "print_error",
    "print_success",
    "print_tree",
    "print_warning",
    "get_raw_console",
    "reconfigure_console",
    # Logging
    "get_logger",
    "setup_logging",
    "disable_logging",
    "is_logging_configured",
    "verbosity_to_level",
]
