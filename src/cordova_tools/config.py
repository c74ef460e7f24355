# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Project-level configuration for typing synchronisation."""

from __future__ import annotations

import tomllib
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .constants import (
    BUNDLED_CATALOG_PATH,
    BUNDLED_TYPINGS_DIR,
    CONFIG_FILENAME,
    DEFAULT_REFERENCE_FILE,
    DEFAULT_TYPINGS_DIR,
)
from .errors import ConfigError

_TOOL_TABLE = "cordova-tools"


class ToolsConfig(BaseModel):
    """Settings controlling where typings come from and where they land."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    typings_dir: str = Field(default=DEFAULT_TYPINGS_DIR)
    reference_file: str = Field(default=DEFAULT_REFERENCE_FILE)
    catalog_path: Path = Field(default=BUNDLED_CATALOG_PATH)
    typings_source: Path = Field(default=BUNDLED_TYPINGS_DIR)
    skip_npm_installed: bool = True
    write_reference_file: bool = True

    def declarations_root(self, project_root: Path) -> Path:
        """Return the absolute declarations directory for ``project_root``."""

        return project_root / self.typings_dir

    def reference_path(self, project_root: Path) -> Path:
        """Return the absolute path of the reference index file."""

        return project_root / self.reference_file

    def resolved(self, project_root: Path) -> ToolsConfig:
        """Return a copy whose relative source paths are anchored at ``project_root``."""

        updates: dict[str, Path] = {}
        if not self.catalog_path.is_absolute():
            updates["catalog_path"] = (project_root / self.catalog_path).resolve()
        if not self.typings_source.is_absolute():
            updates["typings_source"] = (project_root / self.typings_source).resolve()
        return self.model_copy(update=updates) if updates else self


def _tool_section(payload: Mapping[str, Any]) -> Mapping[str, Any]:
    tool = payload.get("tool", {})
    if not isinstance(tool, Mapping):
        raise ConfigError("[tool] must be a table")
    section = tool.get(_TOOL_TABLE, {})
    if not isinstance(section, Mapping):
        raise ConfigError(f"[tool.{_TOOL_TABLE}] must be a table")
    return section


def load_config(project_root: Path) -> ToolsConfig:
    """Load ``cordova-tools.toml`` from ``project_root`` when present.

    Args:
        project_root: Root directory of the Cordova project.

    Returns:
        ToolsConfig: Validated configuration with defaults for absent keys.

    Raises:
        ConfigError: If the file is not valid TOML or contains unknown or
            mistyped settings.
    """

    path = project_root / CONFIG_FILENAME
    if not path.is_file():
        return ToolsConfig()
    try:
        payload = tomllib.loads(path.read_text(encoding="utf-8"))
    except (OSError, tomllib.TOMLDecodeError) as exc:
        raise ConfigError(f"{path}: unable to read configuration") from exc
    try:
        config = ToolsConfig.model_validate(dict(_tool_section(payload)))
    except ValidationError as exc:
        raise ConfigError(f"{path}: {exc}") from exc
    return config.resolved(project_root)


__all__ = ["ToolsConfig", "load_config"]
