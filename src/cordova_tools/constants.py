# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Filesystem layout constants shared across the package."""

from __future__ import annotations

from pathlib import Path
from typing import Final

PACKAGE_ROOT: Final[Path] = Path(__file__).resolve().parent
DATA_DIR: Final[Path] = PACKAGE_ROOT / "data"
BUNDLED_CATALOG_PATH: Final[Path] = DATA_DIR / "pluginTypings.json"
BUNDLED_TYPINGS_DIR: Final[Path] = DATA_DIR / "typings"

CONFIG_XML_FILENAME: Final[str] = "config.xml"
CONFIG_FILENAME: Final[str] = "cordova-tools.toml"
PACKAGE_JSON_FILENAME: Final[str] = "package.json"
TSCONFIG_FILENAME: Final[str] = "tsconfig.json"
IONIC_PROJECT_FILENAMES: Final[tuple[str, ...]] = ("ionic.project", "ionic.config.json")

PLUGINS_DIR_NAME: Final[str] = "plugins"
PLUGINS_FETCH_FILENAME: Final[str] = "fetch.json"
NODE_MODULES_DIR_NAME: Final[str] = "node_modules"

DEFAULT_TYPINGS_DIR: Final[str] = ".vscode/typings"
DEFAULT_REFERENCE_FILE: Final[str] = "typings/cordova-typings.d.ts"
OWNERSHIP_FILENAME: Final[str] = ".cordova-tools-owned.json"

CORDOVA_TYPINGS_NAMESPACE: Final[str] = "cordova"
IONIC_TYPINGS_NAMESPACE: Final[str] = "cordova-ionic"
PLUGIN_TYPINGS_SUBDIR: Final[str] = "plugins"
DECLARATION_SUFFIX: Final[str] = ".d.ts"

# Plugin-scoped subtrees under the declarations root. Files outside these
# directories are never candidates for removal.
PLUGIN_SUBTREES: Final[tuple[str, ...]] = (
    f"{CORDOVA_TYPINGS_NAMESPACE}/{PLUGIN_TYPINGS_SUBDIR}",
    f"{IONIC_TYPINGS_NAMESPACE}/{PLUGIN_TYPINGS_SUBDIR}",
)

CORDOVA_CATALOG_KEY: Final[str] = "cordova"
IONIC_TYPINGS: Final[tuple[str, ...]] = (
    "jquery/jquery.d.ts",
    "cordova-ionic/plugins/keyboard.d.ts",
)
IONIC1_TYPINGS: Final[tuple[str, ...]] = (
    "angularjs/angular.d.ts",
    "ionic/ionic.d.ts",
)

CORDOVA_CLI: Final[str] = "cordova"
IONIC_CLI: Final[str] = "ionic"
WINDOWS_SHIM_SUFFIX: Final[str] = ".cmd"
