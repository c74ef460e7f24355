# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""End-to-end tests for reconciliation passes on temporary projects."""

from __future__ import annotations

import json
import logging
from pathlib import Path

import pytest

from cordova_tools.config import ToolsConfig
from cordova_tools.errors import TypingInstallError
from cordova_tools.project import ProjectFlavor
from cordova_tools.sync import SyncReport, TypingSynchronizer, activate, synchronize


def _declarations(project_root: Path, config: ToolsConfig) -> Path:
    return config.declarations_root(project_root)


def _snapshot(path: Path) -> dict[str, bytes]:
    return {str(p.relative_to(path)): p.read_bytes() for p in path.rglob("*") if p.is_file()}


def test_installed_plugin_typing_is_materialised(make_project, tools_config: ToolsConfig, tracked_files) -> None:
    root = make_project(plugins=["cordova-plugin-file"])

    report = synchronize(root, tools_config)

    assert report.installed == ("cordova/plugins/FileSystem.d.ts",)
    assert tracked_files(_declarations(root, tools_config)) == ["cordova/plugins/FileSystem.d.ts"]
    index = tools_config.reference_path(root).read_text(encoding="utf-8")
    assert "cordova/plugins/FileSystem.d.ts" in index


def test_convergence_and_fixed_point(make_project, tools_config: ToolsConfig, tracked_files) -> None:
    plugins = ["cordova-plugin-file", "cordova-plugin-device", "cordova-plugin-whitelist"]
    root = make_project(plugins=plugins)

    first = synchronize(root, tools_config)
    second = synchronize(root, tools_config)

    assert first.unknown_plugins == ("cordova-plugin-whitelist",)
    assert tracked_files(_declarations(root, tools_config)) == [
        "cordova/plugins/Device.d.ts",
        "cordova/plugins/FileSystem.d.ts",
    ]
    assert not second.changed


def test_uninstalling_a_plugin_removes_exactly_its_typing(
    make_project, set_plugins, tools_config: ToolsConfig, tracked_files
) -> None:
    root = make_project(plugins=["cordova-plugin-file", "cordova-plugin-device"])
    synchronize(root, tools_config)
    declarations = _declarations(root, tools_config)
    untracked = declarations / "custom" / "mine.d.ts"
    untracked.parent.mkdir(parents=True)
    untracked.write_text("// user file\n", encoding="utf-8")

    set_plugins(root, ["cordova-plugin-file"])
    report = synchronize(root, tools_config)

    assert report.removed == ("cordova/plugins/Device.d.ts",)
    assert tracked_files(declarations) == ["cordova/plugins/FileSystem.d.ts"]
    assert untracked.exists()


def test_removing_all_plugins_empties_tracked_subtree(
    make_project, set_plugins, tools_config: ToolsConfig, tracked_files
) -> None:
    root = make_project(plugins=["cordova-plugin-file"])
    synchronize(root, tools_config)

    set_plugins(root, [])
    report = synchronize(root, tools_config)

    assert report.removed == ("cordova/plugins/FileSystem.d.ts",)
    assert tracked_files(_declarations(root, tools_config)) == []


def test_plugin_shipped_types_are_installed_and_removed(
    make_project, set_plugins, tools_config: ToolsConfig, tracked_files
) -> None:
    root = make_project(plugins=["test-plugin"])
    plugin_dir = root / "plugins" / "test-plugin"
    (plugin_dir / "types").mkdir(parents=True)
    (plugin_dir / "types" / "index.d.ts").write_text("declare var testPlugin: any;\n", encoding="utf-8")
    manifest = {"name": "test-plugin", "types": "types/index.d.ts"}
    (plugin_dir / "package.json").write_text(json.dumps(manifest), encoding="utf-8")

    synchronize(root, tools_config)
    declarations = _declarations(root, tools_config)
    assert tracked_files(declarations) == ["cordova/plugins/test-plugin.d.ts"]
    index = tools_config.reference_path(root).read_text(encoding="utf-8")
    assert "cordova/plugins/test-plugin.d.ts" in index

    set_plugins(root, [])
    synchronize(root, tools_config)
    assert tracked_files(declarations) == []
    assert "test-plugin" not in tools_config.reference_path(root).read_text(encoding="utf-8")


@pytest.mark.parametrize(
    ("package_json", "tsconfig", "flavor"),
    [
        ({"dependencies": {"ionic-angular": "3.9.2"}}, False, ProjectFlavor.IONIC2_PLUS),
        (None, True, ProjectFlavor.TYPESCRIPT),
    ],
)
def test_self_managed_projects_are_never_touched(
    make_project, tools_config: ToolsConfig, package_json, tsconfig: bool, flavor: ProjectFlavor
) -> None:
    root = make_project(plugins=["cordova-plugin-file"], package_json=package_json, tsconfig=tsconfig)
    stale = _declarations(root, tools_config) / "cordova" / "plugins" / "Device.d.ts"
    stale.parent.mkdir(parents=True)
    stale.write_text("// stale\n", encoding="utf-8")
    before = _snapshot(root)

    report = synchronize(root, tools_config)
    activated = activate(root, tools_config)

    assert report.skipped and activated.skipped
    assert report.flavor is flavor
    assert _snapshot(root) == before


def test_missing_catalog_is_a_noop(make_project, typings_source: Path, tmp_path: Path) -> None:
    root = make_project(plugins=["cordova-plugin-file"])
    config = ToolsConfig(catalog_path=tmp_path / "absent.json", typings_source=typings_source)

    report = synchronize(root, config)

    assert report.catalog_missing
    assert not config.declarations_root(root).exists()


def test_npm_installed_plugins_are_skipped_unless_forced(
    make_project, tools_config: ToolsConfig, tracked_files
) -> None:
    root = make_project(plugins=["cordova-plugin-file", "cordova-plugin-statusbar"])
    for module in ("cordova-plugin-file", "cordova-plugin-statusbar"):
        (root / "node_modules" / module).mkdir(parents=True)

    synchronize(root, tools_config)

    assert tracked_files(_declarations(root, tools_config)) == ["cordova/plugins/StatusBar.d.ts"]


def test_npm_filter_can_be_disabled(make_project, tools_config: ToolsConfig, tracked_files) -> None:
    root = make_project(plugins=["cordova-plugin-file"])
    (root / "node_modules" / "cordova-plugin-file").mkdir(parents=True)
    config = tools_config.model_copy(update={"skip_npm_installed": False})

    synchronize(root, config)

    assert tracked_files(_declarations(root, config)) == ["cordova/plugins/FileSystem.d.ts"]


def test_activate_installs_global_typings(make_project, tools_config: ToolsConfig) -> None:
    root = make_project(plugins=["cordova-plugin-device"])

    report = activate(root, tools_config)

    declarations = _declarations(root, tools_config)
    assert (declarations / "cordova" / "cordova.d.ts").is_file()
    assert not (declarations / "jquery").exists()
    assert report.installed == ("cordova/cordova.d.ts", "cordova/plugins/Device.d.ts")


def test_ionic1_globals_survive_later_passes(make_project, tools_config: ToolsConfig) -> None:
    root = make_project(package_json={"dependencies": {"ionic": "1.3.0"}})

    activate(root, tools_config)
    report = synchronize(root, tools_config)

    declarations = _declarations(root, tools_config)
    for relative in ("jquery/jquery.d.ts", "angularjs/angular.d.ts", "ionic/ionic.d.ts"):
        assert (declarations / relative).is_file()
    assert (declarations / "cordova-ionic" / "plugins" / "keyboard.d.ts").is_file()
    assert report.removed == ()


def test_reference_file_can_be_disabled(make_project, tools_config: ToolsConfig) -> None:
    root = make_project(plugins=["cordova-plugin-file"])
    config = tools_config.model_copy(update={"write_reference_file": False})

    synchronize(root, config)

    assert not config.reference_path(root).exists()


def test_synchronizer_coalesces_triggers_during_a_pass(tmp_path: Path) -> None:
    calls: list[Path] = []
    synchronizer: TypingSynchronizer

    def fake_pass(project_root: Path, config: ToolsConfig | None) -> SyncReport:
        calls.append(project_root)
        if len(calls) == 1:
            assert synchronizer.request_sync() is None
            assert synchronizer.request_sync() is None
        return SyncReport(project_root=project_root)

    synchronizer = TypingSynchronizer(tmp_path, sync_pass=fake_pass)

    report = synchronizer.request_sync()

    assert report is not None
    assert len(calls) == 2
    assert synchronizer.request_sync() is not None
    assert len(calls) == 3


def test_synchronizer_reports_failures_without_raising(tmp_path: Path, caplog: pytest.LogCaptureFixture) -> None:
    def failing_pass(project_root: Path, config: ToolsConfig | None) -> SyncReport:
        raise TypingInstallError("unable to install typing", path=project_root / "x.d.ts")

    synchronizer = TypingSynchronizer(tmp_path, sync_pass=failing_pass)

    with caplog.at_level(logging.ERROR):
        report = synchronizer.request_sync()

    assert report is not None
    assert report.error is not None and "unable to install typing" in report.error
    assert "typing synchronisation failed" in caplog.text
    assert synchronizer.request_sync() is not None


def test_synchronizer_activation_runs_real_passes(make_project, tools_config: ToolsConfig, tracked_files) -> None:
    root = make_project(plugins=["cordova-plugin-device"])
    synchronizer = TypingSynchronizer(root, tools_config)

    activated = synchronizer.activate()
    follow_up = synchronizer.request_sync()

    assert activated is not None and "cordova/cordova.d.ts" in activated.installed
    assert follow_up is not None and not follow_up.changed
    assert tracked_files(_declarations(root, tools_config)) == ["cordova/plugins/Device.d.ts"]


def test_root_level_catalog_typing_is_removed_with_its_plugin(
    make_project, set_plugins, typings_source: Path, tmp_path: Path
) -> None:
    (typings_source / "FileSystem.d.ts").write_text("// file plugin\n", encoding="utf-8")
    catalog_path = tmp_path / "flat.json"
    catalog_path.write_text(json.dumps({"cordova-plugin-file": {"typingFile": "FileSystem.d.ts"}}), encoding="utf-8")
    config = ToolsConfig(catalog_path=catalog_path, typings_source=typings_source)
    root = make_project(plugins=["cordova-plugin-file"])
    declarations = _declarations(root, config)

    first = synchronize(root, config)
    assert first.installed == ("FileSystem.d.ts",)
    assert (declarations / "FileSystem.d.ts").is_file()

    set_plugins(root, [])
    second = synchronize(root, config)

    assert second.removed == ("FileSystem.d.ts",)
    assert not (declarations / "FileSystem.d.ts").exists()


def test_hand_written_plugin_subtree_files_are_kept(
    make_project, set_plugins, tools_config: ToolsConfig, tracked_files
) -> None:
    root = make_project(plugins=["cordova-plugin-device"])
    synchronize(root, tools_config)
    declarations = _declarations(root, tools_config)
    helpers = declarations / "cordova" / "plugins" / "MyHelpers.d.ts"
    helpers.write_text("declare function helper(): void;\n", encoding="utf-8")

    set_plugins(root, [])
    report = synchronize(root, tools_config)

    assert report.removed == ("cordova/plugins/Device.d.ts",)
    assert tracked_files(declarations) == ["cordova/plugins/MyHelpers.d.ts"]
