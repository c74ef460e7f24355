# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Shared pytest fixtures."""

from __future__ import annotations

import json
from collections.abc import Callable, Iterable, Mapping
from pathlib import Path
from typing import Any

import pytest

from cordova_tools.config import ToolsConfig

CATALOG: dict[str, dict[str, Any]] = {
    "cordova": {"typingFile": "cordova/cordova.d.ts"},
    "cordova-plugin-file": {"typingFile": "cordova/plugins/FileSystem.d.ts"},
    "cordova-plugin-device": {"typingFile": "cordova/plugins/Device.d.ts"},
    "cordova-plugin-statusbar": {"typingFile": "cordova/plugins/StatusBar.d.ts", "forceInstallTypings": True},
}

ProjectFactory = Callable[..., Path]


@pytest.fixture
def typings_source(tmp_path: Path) -> Path:
    """Return a directory of bundled declaration files matching :data:`CATALOG`."""

    source = tmp_path / "bundled"
    extra = ("jquery/jquery.d.ts", "cordova-ionic/plugins/keyboard.d.ts", "angularjs/angular.d.ts", "ionic/ionic.d.ts")
    for relative in [entry["typingFile"] for entry in CATALOG.values()] + list(extra):
        path = source / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(f"// {relative}\n", encoding="utf-8")
    return source


@pytest.fixture
def catalog_path(tmp_path: Path) -> Path:
    """Write :data:`CATALOG` to disk and return its path."""

    path = tmp_path / "pluginTypings.json"
    path.write_text(json.dumps(CATALOG), encoding="utf-8")
    return path


@pytest.fixture
def tools_config(catalog_path: Path, typings_source: Path) -> ToolsConfig:
    """Return a configuration pointing at the temporary catalog."""

    return ToolsConfig(catalog_path=catalog_path, typings_source=typings_source)


def _write_fetch_json(project_root: Path, plugins: Iterable[str]) -> None:
    fetch = project_root / "plugins" / "fetch.json"
    fetch.parent.mkdir(parents=True, exist_ok=True)
    fetch.write_text(json.dumps({plugin: {"source": {"type": "registry"}} for plugin in plugins}), encoding="utf-8")


@pytest.fixture
def make_project(tmp_path: Path) -> ProjectFactory:
    """Return a factory building minimal Cordova projects under ``tmp_path``."""

    def factory(
        name: str = "app",
        *,
        plugins: Iterable[str] = (),
        package_json: Mapping[str, Any] | None = None,
        tsconfig: bool = False,
    ) -> Path:
        root = tmp_path / name
        root.mkdir(parents=True, exist_ok=True)
        (root / "config.xml").write_text("<widget id='io.example.app'/>\n", encoding="utf-8")
        _write_fetch_json(root, plugins)
        if package_json is not None:
            (root / "package.json").write_text(json.dumps(package_json), encoding="utf-8")
        if tsconfig:
            (root / "tsconfig.json").write_text("{}", encoding="utf-8")
        return root

    return factory


def _tracked_files(declarations_root: Path) -> list[str]:
    return sorted(
        path.relative_to(declarations_root).as_posix()
        for subtree in ("cordova/plugins", "cordova-ionic/plugins")
        if (declarations_root / subtree).is_dir()
        for path in (declarations_root / subtree).iterdir()
    )


@pytest.fixture
def set_plugins() -> Callable[[Path, Iterable[str]], None]:
    """Return a helper rewriting the installed plugin list of a project."""

    return _write_fetch_json


@pytest.fixture
def tracked_files() -> Callable[[Path], list[str]]:
    """Return a helper listing plugin-subtree files under a declarations root."""

    return _tracked_files
