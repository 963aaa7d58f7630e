"""Tests for environment settings."""

from __future__ import annotations

from pathlib import Path

import pytest

from desktop_forge.settings import Settings


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    # values loaded from .env are removed on teardown
    for name in ("FORGE_LOG_LEVEL", "FORGE_LOG_DIR", "FORGE_PACKAGE_MANAGER"):
        monkeypatch.setenv(name, "")
        monkeypatch.delenv(name)


def test_defaults(tmp_path: Path) -> None:
    settings = Settings.from_env(tmp_path)
    assert settings.log_level == "INFO"
    assert settings.log_directory is None
    assert settings.package_manager is None


def test_project_env_file_is_loaded(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    (tmp_path / ".env").write_text("FORGE_LOG_LEVEL=debug\nFORGE_PACKAGE_MANAGER=yarn\n", encoding="utf-8")
    monkeypatch.setenv("FORGE_LOG_DIR", "logs")

    settings = Settings.from_env(tmp_path)

    assert settings.log_level == "DEBUG"
    assert settings.package_manager == "yarn"
    assert settings.log_directory == "logs"


def test_unknown_package_manager_is_rejected(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("FORGE_PACKAGE_MANAGER", "pnpm")
    with pytest.raises(ValueError, match="FORGE_PACKAGE_MANAGER"):
        Settings.from_env()
