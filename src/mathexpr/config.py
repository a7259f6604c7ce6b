"""
Configuration for mathexpr.

Configuration is loaded from the [mathexpr] table of mathexpr.toml, or the
[tool.mathexpr] table of pyproject.toml.
"""

from __future__ import annotations

import logging
import tomllib
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, field_validator

logger = logging.getLogger(__name__)

CONFIG_FILENAMES = ("mathexpr.toml", "pyproject.toml")

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class MathexprConfig(BaseModel):
    """Evaluation settings."""

    allow_decimals: bool = False
    log_level: str = "WARNING"

    model_config = ConfigDict(frozen=True, extra="forbid")

    @field_validator("log_level")
    @classmethod
    def _check_log_level(cls, value: str) -> str:
        level = value.upper()
        if level not in _LOG_LEVELS:
            raise ValueError(f"log_level must be one of {', '.join(_LOG_LEVELS)}")
        return level


def load_config(toml_path: Path) -> MathexprConfig:
    """
    Load configuration from a TOML file.

    Args:
        toml_path: Path to mathexpr.toml or pyproject.toml

    Returns:
        MathexprConfig with values from file or defaults

    Raises:
        tomllib.TOMLDecodeError: If the file is not valid TOML
        pydantic.ValidationError: If the table holds unknown keys or bad values
    """
    if not toml_path.exists():
        logger.debug("No config file at %s, using defaults", toml_path)
        return MathexprConfig()

    with open(toml_path, "rb") as f:
        data = tomllib.load(f)

    section = _find_section(data, pyproject=toml_path.name == "pyproject.toml")
    if not section:
        return MathexprConfig()

    logger.debug("Loaded config from %s: %s", toml_path, section)
    return MathexprConfig.model_validate(section)


def find_config(start: Path | None = None) -> MathexprConfig:
    """Load the first config file found in ``start`` (default: cwd)."""
    directory = start or Path.cwd()
    for name in CONFIG_FILENAMES:
        candidate = directory / name
        if candidate.exists():
            return load_config(candidate)
    return MathexprConfig()


def _find_section(data: dict[str, Any], *, pyproject: bool) -> dict[str, Any]:
    if pyproject:
        return data.get("tool", {}).get("mathexpr", {})
    return data.get("mathexpr", {})
