"""
Custom exception hierarchy for pydepth.

This module defines structured exception types used across pydepth.
All exceptions inherit from :class:`PyDepthError` and support optional
structured metadata via the ``details`` attribute to improve diagnostics
and logging.
"""

from __future__ import annotations

from typing import Any, Mapping, MutableMapping, Optional


class PyDepthError(Exception):
    """Base exception for all pydepth errors.

    All pydepth-specific exceptions should inherit from this class.
    It supports structured metadata via ``details`` for richer error
    reporting and debugging.

    Args:
        message: Human-readable error message.
        details: Optional structured metadata describing the error.
    """

    __slots__ = ("message", "details")

    def __init__(
        self,
        message: str,
        details: Optional[Mapping[str, Any]] = None,
    ) -> None:
        self.message: str = message
        # Internally normalize to a mutable dict
        self.details: MutableMapping[str, Any] = dict(details) if details else {}
        super().__init__(message)

    def __str__(self) -> str:
        if not self.details:
            return self.message
        formatted = ", ".join(f"{k}={v}" for k, v in self.details.items())
        return f"{self.message} ({formatted})"

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}("
            f"message={self.message!r}, details={dict(self.details)!r})"
        )


def _add_if(details: MutableMapping[str, Any], key: str, value: Any) -> None:
    """Add a key to ``details`` only if ``value`` is not ``None``."""
    if value is not None:
        details[key] = value


class PackageNotFoundError(PyDepthError):
    """Raised by an importer when a package cannot be located.

    Args:
        message: Error description.
        package_name: Name of the package that was looked up.
        src_dir: Source directory the lookup started from.
    """

    __slots__ = ("package_name", "src_dir")

    def __init__(
        self,
        message: str,
        *,
        package_name: Optional[str] = None,
        src_dir: Optional[str] = None,
    ) -> None:
        details: MutableMapping[str, Any] = {}
        _add_if(details, "package", package_name)
        _add_if(details, "src_dir", src_dir)

        super().__init__(message, details)

        self.package_name = package_name
        self.src_dir = src_dir


class RootPackageNotResolvedError(PyDepthError):
    """Raised when the root package of a tree cannot be resolved.

    This is the only error a resolution reports; failures below the root
    are recorded on the affected node instead.

    Args:
        package_name: Name of the root package.
    """

    __slots__ = ("package_name",)

    def __init__(self, package_name: Optional[str] = None) -> None:
        details: MutableMapping[str, Any] = {}
        _add_if(details, "package", package_name)

        super().__init__("unable to resolve root package", details)

        self.package_name = package_name


class ConfigError(PyDepthError):
    """Raised when a configuration file is missing, unreadable, or invalid.

    Args:
        message: Error description.
        config_path: Path to the configuration file.
        option: Name of the offending option, if any.
    """

    __slots__ = ("config_path", "option")

    def __init__(
        self,
        message: str,
        *,
        config_path: Optional[str] = None,
        option: Optional[str] = None,
    ) -> None:
        details: MutableMapping[str, Any] = {}
        _add_if(details, "path", config_path)
        _add_if(details, "option", option)

        super().__init__(message, details)

        self.config_path = config_path
        self.option = option
