"""Pytest configuration and shared project fixtures."""

from __future__ import annotations

import json
import subprocess
import sys
from pathlib import Path
from typing import Any, Callable, Dict, List

import pytest

ROOT = Path(__file__).resolve().parents[1]

if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from desktop_forge import process  # noqa: E402  (import after sys.path setup)


def write_json(path: Path, data: Any) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data, indent=2) + "\n", encoding="utf-8")
    return path


def read_json(path: Path) -> Any:
    return json.loads(path.read_text(encoding="utf-8"))


@pytest.fixture
def commands(monkeypatch: pytest.MonkeyPatch) -> List[List[str]]:
    """Record every external command instead of running it.

    ``git rev-parse`` reports "not a repository" so ``git init`` is issued.
    """

    calls: List[List[str]] = []

    def fake_run(cmd: List[str], cwd: Any = None, check: bool = False, **kwargs: Any) -> subprocess.CompletedProcess:
        calls.append([str(part) for part in cmd])
        returncode = 128 if list(cmd[:2]) == ["git", "rev-parse"] else 0
        return subprocess.CompletedProcess(cmd, returncode)

    monkeypatch.setattr(process.subprocess, "run", fake_run)
    return calls


@pytest.fixture
def forge_project(tmp_path: Path) -> Callable[..., Path]:
    """Create a forge-ready Electron project and return its directory."""

    def build(
        name: str = "app",
        main: str = "src/index.js",
        forge: Dict[str, Any] | None = None,
        **extra: Any,
    ) -> Path:
        project = tmp_path / name
        manifest: Dict[str, Any] = {
            "name": name,
            "productName": name.capitalize(),
            "version": "1.0.0",
            "main": main,
            "devDependencies": {"electron-prebuilt-compile": "1.4.3"},
            "config": {"forge": forge if forge is not None else {}},
        }
        manifest.update(extra)
        write_json(project / "package.json", manifest)
        entry = project / main
        entry.parent.mkdir(parents=True, exist_ok=True)
        entry.write_text("console.log('hello')\n", encoding="utf-8")
        return project

    return build
