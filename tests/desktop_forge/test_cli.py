"""Tests for the command line entry point."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Callable, Dict, List

import pytest

from desktop_forge import cli


def test_package_failure_exits_non_zero(forge_project: Callable[..., Path]) -> None:
    project = forge_project(main="index.js")
    assert cli.main(["package", str(project), "--arch", "x64", "--platform", "linux"]) == 1


def test_import_without_project_exits_non_zero(tmp_path: Path) -> None:
    with pytest.raises(SystemExit) as excinfo:
        cli.main(["import", str(tmp_path)])
    assert excinfo.value.code == 1


def test_make_arguments_are_forwarded(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    received: List[Dict[str, Any]] = []
    monkeypatch.setattr(cli, "make", lambda **kwargs: received.append(kwargs) or [])

    code = cli.main(
        ["--log-level", "DEBUG", "make", str(tmp_path), "--skip-package", "--targets", "zip", "deb", "--arch", "all"]
    )

    assert code == 0
    assert received == [
        {
            "dir": tmp_path,
            "interactive": False,
            "skip_package": True,
            "overrides": ["zip", "deb"],
            "arch": "all",
            "platform": None,
            "out_dir": None,
        }
    ]
