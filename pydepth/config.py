"""Configuration file loader for pydepth.

Handles discovery, loading, parsing, and validation of configuration files.
Supports two formats:

- ``pydepth.toml``: settings under ``[pydepth]`` table
- ``pyproject.toml``: settings under ``[tool.pydepth]`` table

Discovery order:

1. Explicit path from ``--config`` or ``PYDEPTH_CONFIG``
2. ``pydepth.toml`` in current directory
3. ``pyproject.toml`` with ``[tool.pydepth]`` section

Configuration precedence: defaults < config file < CLI args.

Typical usage::

    config = load_config()  # Auto-discover
    config = load_config(Path("custom.toml"))  # Explicit path
    config.apply(tree)

Example (``pydepth.toml``)::

    [pydepth]
    resolve_internal = false
    max_depth = 3
    match = "^requests"
"""

from __future__ import annotations

import tomli as tomllib
from pathlib import Path
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Dict, Optional

from pydepth.exceptions import ConfigError
from pydepth.utils.logger import get_logger
from pydepth.constants import (
    CONFIG_FILE_NAME,
    DEFAULT_MAP_LEVEL,
    DEFAULT_MAX_DEPTH,
    DEFAULT_RESOLVE_INTERNAL,
    DEFAULT_RESOLVE_TEST,
    PYPROJECT_FILE_NAME,
)

if TYPE_CHECKING:
    from pydepth.core.tree import Tree

logger = get_logger("config")

_BOOL_OPTIONS = ("resolve_internal", "resolve_test")
_INT_OPTIONS = ("max_depth", "map_level")
_STR_OPTIONS = ("show_pkg", "match")


@dataclass
class PyDepthConfig:
    """Parsed and validated pydepth configuration.

    All fields have defaults, so empty config files are valid.

    Attributes:
        resolve_internal: Expand standard library packages below the root.
        resolve_test: Include imports declared by test files.
        max_depth: Deepest expanded level; ``0`` for no limit.
        map_level: Display flattening level; ``0`` to disable.
        show_pkg: Only show the dependencies of this package.
        match: Regular expression filtering displayed package names.
        source_path: Path to loaded config file, or ``None`` if using defaults.
    """

    resolve_internal: bool = DEFAULT_RESOLVE_INTERNAL
    resolve_test: bool = DEFAULT_RESOLVE_TEST
    max_depth: int = DEFAULT_MAX_DEPTH
    map_level: int = DEFAULT_MAP_LEVEL
    show_pkg: str = ""
    match: str = ""

    # Metadata (not a user-facing option)
    source_path: Optional[Path] = field(default=None, repr=False)

    def to_log_dict(self) -> Dict[str, Any]:
        """Return configuration as dictionary for debug logging.

        Excludes ``source_path`` metadata.
        """
        return {
            "resolve_internal": self.resolve_internal,
            "resolve_test": self.resolve_test,
            "max_depth": self.max_depth,
            "map_level": self.map_level,
            "show_pkg": self.show_pkg,
            "match": self.match,
        }

    def apply(self, tree: "Tree") -> None:
        """Copy these settings onto *tree*.

        The tree must be (re)initialised afterwards for the display
        filters to take effect; :meth:`Tree.resolve` does so on first use.
        """
        tree.resolve_internal = self.resolve_internal
        tree.resolve_test = self.resolve_test
        tree.max_depth = self.max_depth
        tree.map_level = self.map_level
        tree.show_pkg = self.show_pkg
        tree.matcher_reg = self.match


def discover_config_file(explicit_path: Optional[Path] = None) -> Optional[Path]:
    """Find the configuration file to load.

    Search order:

    1. ``explicit_path`` (from ``--config`` or ``PYDEPTH_CONFIG``)
    2. ``pydepth.toml`` in current directory
    3. ``pyproject.toml`` with ``[tool.pydepth]`` section in current directory

    Args:
        explicit_path: Explicit config path. If provided, must exist.

    Returns:
        Resolved path to config file, or ``None`` if not found.

    Raises:
        ConfigError: Explicit path provided but does not exist.
    """
    if explicit_path is not None:
        resolved = explicit_path.resolve()
        if not resolved.is_file():
            raise ConfigError(
                f"Configuration file not found: {explicit_path}",
                config_path=str(explicit_path),
            )
        logger.debug("Using explicit config: %s", resolved)
        return resolved

    cwd = Path.cwd()

    pydepth_toml = cwd / CONFIG_FILE_NAME
    if pydepth_toml.is_file():
        logger.debug("Found %s: %s", CONFIG_FILE_NAME, pydepth_toml)
        return pydepth_toml

    pyproject_toml = cwd / PYPROJECT_FILE_NAME
    if pyproject_toml.is_file() and _pyproject_has_pydepth_section(pyproject_toml):
        logger.debug("Found [tool.pydepth] in pyproject.toml: %s", pyproject_toml)
        return pyproject_toml

    logger.debug("No configuration file found")
    return None


def _pyproject_has_pydepth_section(path: Path) -> bool:
    """Check if pyproject.toml contains a ``[tool.pydepth]`` section.

    A pyproject.toml that cannot be parsed is treated as having no section;
    it belongs to the project, not to pydepth.
    """
    try:
        raw = _read_toml(path)
    except ConfigError as exc:
        logger.debug("Ignoring %s: %s", path, exc)
        return False
    return "pydepth" in raw.get("tool", {})


def load_config(config_path: Optional[Path] = None) -> PyDepthConfig:
    """Load and validate pydepth configuration.

    Args:
        config_path: Explicit path to config file. If ``None``, uses
            auto-discovery (see :func:`discover_config_file`).

    Returns:
        Validated :class:`PyDepthConfig` with values from file or defaults.

    Raises:
        ConfigError: File cannot be parsed, has unknown keys, or invalid values.
    """
    resolved = discover_config_file(config_path)

    if resolved is None:
        logger.debug("No config file found, using defaults")
        return PyDepthConfig()

    logger.info("Loading configuration from %s", resolved)
    raw = _read_toml(resolved)

    if resolved.name == PYPROJECT_FILE_NAME:
        section = raw.get("tool", {}).get("pydepth", {})
    else:
        section = raw.get("pydepth", {})

    if not section:
        logger.debug("Config file found but no pydepth section, using defaults")
        return PyDepthConfig(source_path=resolved)

    config = _parse_section(section, config_path=str(resolved))
    config.source_path = resolved

    logger.debug("Loaded configuration: %s", config.to_log_dict())
    return config


def _read_toml(path: Path) -> Dict[str, Any]:
    """Read and parse a TOML file.

    Raises:
        ConfigError: File cannot be read or is not valid TOML.
    """
    try:
        with open(path, "rb") as fh:
            return tomllib.load(fh)
    except tomllib.TOMLDecodeError as exc:
        raise ConfigError(
            f"Invalid TOML in {path.name}: {exc}",
            config_path=str(path),
        ) from exc
    except OSError as exc:
        raise ConfigError(
            f"Cannot read configuration file {path}: {exc}",
            config_path=str(path),
        ) from exc


def _parse_section(
    section: Dict[str, Any],
    *,
    config_path: str,
) -> PyDepthConfig:
    """Parse and validate a ``[pydepth]`` or ``[tool.pydepth]`` table.

    Rejects unknown keys, type mismatches, and negative levels.

    Raises:
        ConfigError: Unknown key or invalid value.
    """
    config = PyDepthConfig()

    known = set(_BOOL_OPTIONS) | set(_INT_OPTIONS) | set(_STR_OPTIONS)
    unknown = set(section.keys()) - known
    if unknown:
        raise ConfigError(
            f"Unknown configuration keys: {', '.join(sorted(unknown))}",
            config_path=config_path,
        )

    for option in _BOOL_OPTIONS:
        if option in section:
            val = section[option]
            if not isinstance(val, bool):
                raise ConfigError(
                    f"{option} must be a boolean, got {type(val).__name__}",
                    config_path=config_path,
                    option=option,
                )
            setattr(config, option, val)

    for option in _INT_OPTIONS:
        if option in section:
            val = section[option]
            # bool is a subclass of int
            if isinstance(val, bool) or not isinstance(val, int):
                raise ConfigError(
                    f"{option} must be an integer, got {type(val).__name__}",
                    config_path=config_path,
                    option=option,
                )
            if val < 0:
                raise ConfigError(
                    f"{option} must not be negative, got {val}",
                    config_path=config_path,
                    option=option,
                )
            setattr(config, option, val)

    for option in _STR_OPTIONS:
        if option in section:
            val = section[option]
            if not isinstance(val, str):
                raise ConfigError(
                    f"{option} must be a string, got {type(val).__name__}",
                    config_path=config_path,
                    option=option,
                )
            setattr(config, option, val)

    return config
