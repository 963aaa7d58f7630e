"""Package an Electron application into a platform dependent bundle."""

from __future__ import annotations

import glob
import shutil
from pathlib import Path
from typing import Any, Dict, List, Optional

from loguru import logger

from ..build_hooks import compile_hook, rebuild_hook
from ..errors import ForgeError
from ..forge_config import ForgeConfig, load_forge_config
from ..hooks import HookRegistry, load_project_hooks, resolve_hooks, run_hook
from ..manifest import Manifest, read_manifest, write_manifest
from ..packager import Packager, StagingPackager, host_arch, host_platform
from ..resolve_dir import PREBUILT_COMPILE, resolve_dir


class _Progress:
    """Progress reporting across the per-arch packaging passes."""

    def __init__(self, arch: str, quiet: bool) -> None:
        self.quiet = quiet
        self.packaging = False
        self.passes = 0
        self._report("Preparing to Package Application for arch: {}", "ia32" if arch == "all" else arch)

    def _report(self, message: str, *args: Any) -> None:
        logger.log("DEBUG" if self.quiet else "INFO", message, *args)

    def next_pass(self) -> None:
        if not self.packaging:
            return
        self._report("Packaging Application done")
        self.passes += 1
        self._report("Preparing to Package Application for arch: {}", "armv7l" if self.passes == 2 else "x64")

    def packaging_started(self) -> None:
        self.packaging = True
        self._report("Packaging Application")


def resolve_entry_point(project_dir: Path, main: Optional[str]) -> Path:
    base = project_dir / (main or "index.js")
    for candidate in (base, base.with_name(base.name + ".js"), base / "index.js"):
        if candidate.is_file():
            return candidate.resolve()
    raise ForgeError(f"Could not find the entry point to your application: {main}")


def validate_entry_point(project_dir: Path, manifest: Manifest) -> Path:
    entry = resolve_entry_point(project_dir, manifest.main)
    if entry.parent == project_dir.resolve():
        logger.error("Entry point: {}", manifest.main)
        raise ForgeError(
            'The entry point to your application ("packageJSON.main") must be in a subfolder not in the top level directory'
        )
    return entry


def clean_staged_build(build_path: Path, *_: Any) -> None:
    shutil.rmtree(Path(build_path) / "node_modules" / "electron-compile" / "test", ignore_errors=True)
    for pattern in ("**/.bin/**/*", "**/.bin/*"):
        for match in glob.glob(str(Path(build_path) / pattern), recursive=True, include_hidden=True):
            path = Path(match)
            if path.is_file() or path.is_symlink():
                path.unlink()


def strip_staged_forge_config(build_path: Path, *_: Any) -> None:
    manifest = read_manifest(build_path)
    manifest.strip_forge_config()
    write_manifest(build_path, manifest)


def build_packager_options(
    project_dir: Path,
    manifest: Manifest,
    forge_config: ForgeConfig,
    *,
    arch: str,
    platform: str,
    out_dir: Path,
    quiet: bool = True,
    registry: Optional[HookRegistry] = None,
    progress: Optional[_Progress] = None,
) -> Dict[str, Any]:
    """Merge engine defaults, the project's packager config and runtime values."""

    progress = progress or _Progress(arch, quiet)
    user_config = forge_config.packager_config

    def prepare(build_path: Path, *args: Any) -> None:
        progress.next_pass()
        clean_staged_build(build_path, *args)

    def compile_staged(build_path: Path, *args: Any) -> None:
        compile_hook(project_dir, build_path, *args, quiet=quiet)

    def rebuild_staged(build_path: Path, electron_version: str, pplatform: str, parch: str) -> None:
        rebuild_hook(project_dir, build_path, electron_version, pplatform, parch, quiet=quiet)
        progress.packaging_started()

    options: Dict[str, Any] = {"asar": False, "overwrite": True}
    options.update(user_config)
    options.update(
        {
            "afterCopy": [prepare, compile_staged, strip_staged_forge_config]
            + resolve_hooks(user_config.get("afterCopy"), project_dir, registry),
            "afterExtract": resolve_hooks(user_config.get("afterExtract"), project_dir, registry),
            "afterPrune": [rebuild_staged] + resolve_hooks(user_config.get("afterPrune"), project_dir, registry),
            "dir": str(project_dir),
            "arch": arch,
            "platform": platform,
            "out": str(out_dir),
            "electronVersion": manifest.dev_dependencies.get(PREBUILT_COMPILE),
        }
    )
    options["quiet"] = True

    asar = options.get("asar")
    if isinstance(asar, dict) and asar.get("unpack"):
        raise ForgeError("electron-compile does not support asar.unpack yet.  Please use asar.unpackDir")
    return options


def package(
    dir: Path | str | None = None,
    interactive: bool = False,
    arch: str | None = None,
    platform: str | None = None,
    out_dir: Path | str | None = None,
    packager: Optional[Packager] = None,
    registry: Optional[HookRegistry] = None,
) -> List[Path]:
    """Package the application in ``dir``.

    Parameters
    ----------
    dir:
        Path to the app to package, defaults to the working directory.
    interactive:
        Report progress at info level instead of debug.
    arch, platform:
        Target arch and platform, default to the host. ``all`` is accepted.
    out_dir:
        Output directory for packaged apps, defaults to ``<dir>/out``.
    packager:
        Packaging engine, :class:`StagingPackager` by default.
    """

    given = Path(dir) if dir is not None else Path.cwd()
    arch = arch or host_arch()
    platform = platform or host_platform()
    out = Path(out_dir) if out_dir is not None else given / "out"
    quiet = not interactive
    progress = _Progress(arch, quiet)

    project_dir = resolve_dir(given)
    if project_dir is None:
        raise ForgeError(f"Failed to locate compilable Electron application in {given}")

    manifest = read_manifest(project_dir)
    validate_entry_point(project_dir, manifest)

    forge_config = load_forge_config(project_dir, manifest)
    registry = load_project_hooks(project_dir, registry)
    options = build_packager_options(
        project_dir,
        manifest,
        forge_config,
        arch=arch,
        platform=platform,
        out_dir=out,
        quiet=quiet,
        registry=registry,
        progress=progress,
    )

    run_hook(forge_config, "generateAssets", directory=project_dir, registry=registry)
    run_hook(forge_config, "prePackage", directory=project_dir, registry=registry)

    logger.debug("Packaging with options {}", options)
    outputs = (packager or StagingPackager())(options)

    run_hook(forge_config, "postPackage", directory=project_dir, registry=registry)
    logger.success("Packaged {} for {}-{}", manifest.app_name, platform, arch)
    return outputs


__all__ = ["package", "build_packager_options", "validate_entry_point", "resolve_entry_point"]
