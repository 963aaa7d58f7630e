"""Tests for the package orchestrator."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Callable, Dict, List, Mapping

import pytest
from loguru import logger

from conftest import read_json, write_json
from desktop_forge.api.package import (
    build_packager_options,
    clean_staged_build,
    package,
    strip_staged_forge_config,
    validate_entry_point,
)
from desktop_forge.errors import ForgeError, HookResolutionError
from desktop_forge.forge_config import load_forge_config
from desktop_forge.hooks import HookRegistry
from desktop_forge.manifest import read_manifest


class RecordingPackager:
    def __init__(self, events: List[str] | None = None) -> None:
        self.calls: List[Mapping[str, Any]] = []
        self.events = events if events is not None else []

    def __call__(self, options: Mapping[str, Any]) -> List[Path]:
        self.calls.append(options)
        self.events.append("package")
        return [Path(options["out"]) / "App-linux-x64"]


def test_entry_point_in_project_root_is_rejected(forge_project: Callable[..., Path]) -> None:
    project = forge_project(main="index.js")
    packager = RecordingPackager()

    with pytest.raises(ForgeError, match="subfolder"):
        package(dir=project, arch="x64", platform="linux", packager=packager)
    assert packager.calls == []


def test_entry_point_without_extension_resolves(forge_project: Callable[..., Path]) -> None:
    project = forge_project(main="src/index.js")
    manifest = read_manifest(project)
    manifest.main = "src/index"
    assert validate_entry_point(project, manifest) == (project / "src" / "index.js").resolve()


def test_missing_entry_point_is_rejected(forge_project: Callable[..., Path]) -> None:
    project = forge_project()
    manifest = read_manifest(project)
    manifest.main = "lib/missing.js"
    with pytest.raises(ForgeError, match="lib/missing.js"):
        validate_entry_point(project, manifest)


def test_unresolvable_project_is_rejected(tmp_path: Path) -> None:
    write_json(tmp_path / "app" / "package.json", {"name": "app", "devDependencies": {"electron-prebuilt-compile": "1.4.3"}})
    with pytest.raises(ForgeError, match="Failed to locate"):
        package(dir=tmp_path / "app", packager=RecordingPackager())


def test_project_without_prebuilt_compile_is_rejected(tmp_path: Path) -> None:
    write_json(tmp_path / "app" / "package.json", {"name": "app", "config": {"forge": {}}})
    with pytest.raises(ForgeError, match="electron-prebuilt-compile"):
        package(dir=tmp_path / "app", packager=RecordingPackager())


def test_package_resolves_project_from_subdirectory(forge_project: Callable[..., Path]) -> None:
    project = forge_project()
    packager = RecordingPackager()

    package(dir=project / "src", arch="x64", platform="linux", packager=packager)

    assert packager.calls[0]["dir"] == str(project.resolve())


def test_unpack_asar_option_is_rejected(forge_project: Callable[..., Path]) -> None:
    project = forge_project(forge={"electronPackagerConfig": {"asar": {"unpack": "*.node"}}})
    packager = RecordingPackager()

    with pytest.raises(ForgeError, match="asar.unpackDir"):
        package(dir=project, arch="x64", platform="linux", packager=packager)
    assert packager.calls == []


def test_options_merge_defaults_config_and_runtime(forge_project: Callable[..., Path], tmp_path: Path) -> None:
    project = forge_project(
        forge={"electronPackagerConfig": {"overwrite": False, "icon": "icon.png", "arch": "ia32", "out": "elsewhere"}}
    )
    manifest = read_manifest(project)
    options = build_packager_options(
        project,
        manifest,
        load_forge_config(project, manifest),
        arch="all",
        platform="linux",
        out_dir=tmp_path / "out",
    )

    assert options["asar"] is False
    assert options["overwrite"] is False
    assert options["icon"] == "icon.png"
    assert options["arch"] == "all"
    assert options["platform"] == "linux"
    assert options["out"] == str(tmp_path / "out")
    assert options["electronVersion"] == "1.4.3"
    assert options["quiet"] is True
    assert len(options["afterCopy"]) == 3
    assert len(options["afterPrune"]) == 1
    assert options["afterExtract"] == []


def test_user_hooks_run_after_builtin_hooks(forge_project: Callable[..., Path]) -> None:
    project = forge_project(
        forge={
            "electronPackagerConfig": {
                "afterCopy": ["copy-one", "hooks/after_copy.py"],
                "afterPrune": ["prune-one"],
                "afterExtract": ["extract-one"],
            }
        }
    )
    (project / "hooks").mkdir()
    (project / "hooks" / "after_copy.py").write_text(
        "def hook(build_path, electron_version, platform, arch):\n    return 'file'\n", encoding="utf-8"
    )
    registry = HookRegistry()
    copy_one = registry.register("copy-one", lambda *args: None)
    prune_one = registry.register("prune-one", lambda *args: None)
    extract_one = registry.register("extract-one", lambda *args: None)
    manifest = read_manifest(project)

    options = build_packager_options(
        project,
        manifest,
        load_forge_config(project, manifest),
        arch="x64",
        platform="linux",
        out_dir=project / "out",
        registry=registry,
    )

    assert options["afterCopy"][3] is copy_one
    assert options["afterCopy"][4]("b", "1.4.3", "linux", "x64") == "file"
    assert options["afterPrune"][1:] == [prune_one]
    assert options["afterExtract"] == [extract_one]


def test_unknown_hook_name_is_reported(forge_project: Callable[..., Path]) -> None:
    project = forge_project(forge={"electronPackagerConfig": {"afterCopy": ["does-not-exist"]}})

    with pytest.raises(HookResolutionError) as excinfo:
        package(dir=project, arch="x64", platform="linux", packager=RecordingPackager())
    assert excinfo.value.name == "does-not-exist"


def test_lifecycle_hooks_wrap_the_packaging_call(forge_project: Callable[..., Path]) -> None:
    project = forge_project(
        forge={"hooks": {"generateAssets": "assets", "prePackage": "pre", "postPackage": "post"}}
    )
    events: List[str] = []
    registry = HookRegistry()
    registry.register("assets", lambda config: events.append("generateAssets"))
    registry.register("pre", lambda config: events.append("prePackage"))
    registry.register("post", lambda config: events.append("postPackage"))
    packager = RecordingPackager(events)

    outputs = package(dir=project, arch="x64", platform="linux", packager=packager, registry=registry)

    assert events == ["generateAssets", "prePackage", "package", "postPackage"]
    assert outputs == [project / "out" / "App-linux-x64"]
    assert packager.calls[0]["out"] == str(project / "out")


def test_project_hooks_file_registers_hooks(forge_project: Callable[..., Path]) -> None:
    project = forge_project(forge={"hooks": {"prePackage": "touch"}})
    (project / "forge_hooks.py").write_text(
        "from pathlib import Path\n"
        "\n"
        "def register_hooks(registry):\n"
        "    @registry.register('touch')\n"
        "    def touch(config):\n"
        f"        Path({str(project / 'touched')!r}).write_text('yes')\n",
        encoding="utf-8",
    )

    package(dir=project, arch="x64", platform="linux", packager=RecordingPackager())

    assert (project / "touched").read_text() == "yes"


def test_clean_staged_build_removes_fixtures_and_binaries(tmp_path: Path) -> None:
    fixture = tmp_path / "node_modules" / "electron-compile" / "test"
    fixture.mkdir(parents=True)
    (fixture / "fixture.js").write_text("", encoding="utf-8")
    nested_bin = tmp_path / "node_modules" / "foo" / "node_modules" / ".bin"
    nested_bin.mkdir(parents=True)
    (nested_bin / "tool").write_text("", encoding="utf-8")
    (tmp_path / "node_modules" / "foo" / "index.js").write_text("", encoding="utf-8")

    clean_staged_build(tmp_path, "1.4.3", "linux", "x64")

    assert not fixture.exists()
    assert not (nested_bin / "tool").exists()
    assert (tmp_path / "node_modules" / "foo" / "index.js").exists()


def test_strip_staged_forge_config(tmp_path: Path) -> None:
    write_json(tmp_path / "package.json", {"name": "app", "config": {"forge": {"a": 1}, "port": 3000}})

    strip_staged_forge_config(tmp_path, "1.4.3", "linux", "x64")

    staged: Dict[str, Any] = read_json(tmp_path / "package.json")
    assert staged == {"name": "app", "config": {"port": 3000}}


def test_all_arch_shows_placeholder_label_but_keeps_literal_arch(forge_project: Callable[..., Path]) -> None:
    project = forge_project()
    messages: List[str] = []
    sink_id = logger.add(lambda message: messages.append(message.record["message"]), level="DEBUG")
    packager = RecordingPackager()
    try:
        package(dir=project, arch="all", platform="linux", packager=packager)
    finally:
        logger.remove(sink_id)

    assert "Preparing to Package Application for arch: ia32" in messages
    assert not any(message.endswith("arch: all") for message in messages)
    assert packager.calls[0]["arch"] == "all"


def test_clean_staged_build_searches_hidden_directories(tmp_path: Path) -> None:
    pnpm_bin = tmp_path / "node_modules" / ".pnpm" / "foo@1.0.0" / "node_modules" / ".bin"
    pnpm_bin.mkdir(parents=True)
    (pnpm_bin / "tool").write_text("", encoding="utf-8")
    (pnpm_bin / ".hidden-tool").write_text("", encoding="utf-8")

    clean_staged_build(tmp_path, "1.4.3", "linux", "x64")

    assert list(pnpm_bin.iterdir()) == []
