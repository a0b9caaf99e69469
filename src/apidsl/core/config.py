"""
Design evaluation settings.

Settings live in an ``apidsl.toml`` file under a ``[design]`` table, or in
``pyproject.toml`` under ``[tool.apidsl.design]``:

    [design]
    capture_source = true
    dedupe_required = false
    extra_formats = ["phone"]
    log_level = "INFO"
"""

import logging
import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from .errors import ConfigError

CONFIG_FILENAME = "apidsl.toml"
PYPROJECT_FILENAME = "pyproject.toml"


@dataclass
class DesignConfig:
    """Settings that tune how a design is evaluated."""

    capture_source: bool = True  # record file:line of the DSL call on errors
    dedupe_required: bool = False  # skip required names already recorded
    extra_formats: list[str] = field(default_factory=list)  # accepted besides built-ins
    log_level: str = "WARNING"

    @property
    def log_level_value(self) -> int:
        """Numeric logging level for ``log_level``."""
        return logging.getLevelNamesMapping()[self.log_level.upper()]


def load_config(path: Path) -> DesignConfig:
    """
    Load settings from an ``apidsl.toml`` or ``pyproject.toml`` file.

    Raises:
        ConfigError: If the file is not valid TOML or a setting has the wrong type
    """
    try:
        data = tomllib.loads(path.read_text(encoding="utf-8"))
    except OSError as e:
        raise ConfigError(f"Cannot read {path}: {e}") from e
    except tomllib.TOMLDecodeError as e:
        raise ConfigError(f"Invalid TOML in {path}: {e}") from e

    if path.name == PYPROJECT_FILENAME:
        section = data.get("tool", {}).get("apidsl", {}).get("design", {})
    else:
        section = data.get("design", {})

    return _parse_design_section(section, path)


def find_config(start: Path) -> Path | None:
    """
    Walk up from ``start`` looking for a configuration file.

    An ``apidsl.toml`` wins over a ``pyproject.toml`` in the same directory;
    a ``pyproject.toml`` only counts if it has a ``[tool.apidsl]`` table.
    """
    start = start.resolve()
    directory = start if start.is_dir() else start.parent
    for candidate in (directory, *directory.parents):
        config_file = candidate / CONFIG_FILENAME
        if config_file.is_file():
            return config_file
        pyproject = candidate / PYPROJECT_FILENAME
        if pyproject.is_file() and _has_tool_table(pyproject):
            return pyproject
    return None


def _has_tool_table(pyproject: Path) -> bool:
    try:
        data = tomllib.loads(pyproject.read_text(encoding="utf-8"))
    except tomllib.TOMLDecodeError:
        return False
    return "apidsl" in data.get("tool", {})


def _parse_design_section(section: dict[str, Any], path: Path) -> DesignConfig:
    defaults = DesignConfig()

    capture_source = section.get("capture_source", defaults.capture_source)
    dedupe_required = section.get("dedupe_required", defaults.dedupe_required)
    extra_formats = section.get("extra_formats", defaults.extra_formats)
    log_level = section.get("log_level", defaults.log_level)

    for name, value in (
        ("capture_source", capture_source),
        ("dedupe_required", dedupe_required),
    ):
        if not isinstance(value, bool):
            raise ConfigError(f"{path}: '{name}' must be a boolean, got {value!r}")

    if not isinstance(extra_formats, list) or not all(isinstance(f, str) for f in extra_formats):
        raise ConfigError(f"{path}: 'extra_formats' must be a list of strings")

    if not isinstance(log_level, str) or log_level.upper() not in logging.getLevelNamesMapping():
        raise ConfigError(f"{path}: unknown log level {log_level!r}")

    return DesignConfig(
        capture_source=capture_source,
        dedupe_required=dedupe_required,
        extra_formats=list(extra_formats),
        log_level=log_level.upper(),
    )
