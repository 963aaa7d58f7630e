"""Tests for forge configuration loading."""

from __future__ import annotations

from pathlib import Path
from typing import Callable

import pytest

from conftest import write_json
from desktop_forge.forge_config import DEFAULT_MAKE_TARGETS, load_forge_config


def test_defaults_are_applied(forge_project: Callable[..., Path]) -> None:
    config = load_forge_config(forge_project(forge={"make_targets": {"linux": ["zip"]}}))

    assert config.make_targets["linux"] == ["zip"]
    assert config.make_targets["darwin"] == DEFAULT_MAKE_TARGETS["darwin"]
    assert config.packager_config == {}
    assert config.hooks == {}
    assert config["electronInstallerDebian"] == {}


def test_string_config_points_to_json_file(forge_project: Callable[..., Path]) -> None:
    project = forge_project(forge="forge.config")
    write_json(project / "forge.config.json", {"electronPackagerConfig": {"icon": "icon.png"}})

    assert load_forge_config(project).packager_config == {"icon": "icon.png"}


def test_missing_config_file_raises(forge_project: Callable[..., Path]) -> None:
    with pytest.raises(FileNotFoundError):
        load_forge_config(forge_project(forge="nope.json"))


def test_manifest_values_are_substituted(forge_project: Callable[..., Path]) -> None:
    project = forge_project(forge={"electronInstallerDebian": {"options": {"productName": "{{ productName }} v{{version}}"}}})

    config = load_forge_config(project)

    assert config["electronInstallerDebian"]["options"]["productName"] == "App v1.0.0"


def test_environment_overrides_string_settings(
    forge_project: Callable[..., Path], monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.setenv("ELECTRON_FORGE_GITHUB_TOKEN", "from-env")
    project = forge_project(forge={"githubToken": "from-file", "electronPackagerConfig": {}})

    assert load_forge_config(project)["githubToken"] == "from-env"
