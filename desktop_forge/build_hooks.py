"""Compilation and native rebuild steps run against a staged build."""

from __future__ import annotations

import shutil
from pathlib import Path

from loguru import logger

from .logger import step
from .manifest import read_manifest, write_manifest
from .process import node_bin, run

SKIPPED_DIRS = {"node_modules", "bower_components"}
SHIM_NAME = "es6-shim.js"


def compile_hook(project_dir: Path, build_path: Path, electron_version: str, platform: str, arch: str, *, quiet: bool = True) -> None:
    """Precompile the staged app and route ``main`` through the runtime shim."""

    project_dir = Path(project_dir)
    build_path = Path(build_path)
    compiler = node_bin(project_dir, "electron-compile")
    with step("Compiling Application", quiet=quiet):
        for entry in sorted(build_path.iterdir()):
            if entry.name in SKIPPED_DIRS or not entry.is_dir():
                continue
            run([*compiler, "--appdir", str(build_path), str(entry)], cwd=build_path, quiet=True)

        manifest = read_manifest(build_path)
        manifest.extra["originalMain"] = manifest.main or "index.js"
        manifest.main = SHIM_NAME
        shim = project_dir / "node_modules" / "electron-compile" / "lib" / SHIM_NAME
        shutil.copyfile(shim, build_path / SHIM_NAME)
        write_manifest(build_path, manifest)
    logger.debug("Compiled {} for {}-{}", build_path, platform, arch)


def rebuild_hook(project_dir: Path, build_path: Path, electron_version: str, platform: str, arch: str, *, quiet: bool = True) -> None:
    """Rebuild native modules of the staged app against the Electron headers."""

    if not (Path(build_path) / "node_modules").is_dir():
        logger.debug("No node_modules in {}, skipping native rebuild", build_path)
        return
    with step("Preparing native dependencies", quiet=quiet):
        run(
            [
                *node_bin(project_dir, "electron-rebuild"),
                "--version",
                electron_version,
                "--arch",
                arch,
                "--module-dir",
                str(build_path),
            ],
            cwd=build_path,
            quiet=True,
        )


__all__ = ["compile_hook", "rebuild_hook"]
