"""Staging packaging engine.

The engine lays out one application bundle per platform/arch, invoking the
``afterExtract``, ``afterCopy`` and ``afterPrune`` hook lists at the matching
points. Hooks are called as ``hook(build_path, electron_version, platform,
arch)`` and run in list order.
"""

from __future__ import annotations

import fnmatch
import platform as host
import shutil
import sys
import zipfile
from pathlib import Path
from typing import Any, Callable, Iterable, List, Mapping, Protocol, Sequence

from loguru import logger

from .manifest import Manifest, read_manifest
from .process import node_bin, run

ALL_ARCHS = ("ia32", "x64", "armv7l")
ALL_PLATFORMS = ("darwin", "linux", "win32")
DEFAULT_IGNORE = (".git",)
ROOT_IGNORE = ("out",)

_HOST_ARCHS = {
    "x86_64": "x64",
    "amd64": "x64",
    "i386": "ia32",
    "i686": "ia32",
    "x86": "ia32",
    "armv7l": "armv7l",
    "aarch64": "arm64",
    "arm64": "arm64",
}


class Packager(Protocol):
    def __call__(self, options: Mapping[str, Any]) -> List[Path]: ...


def host_arch() -> str:
    machine = host.machine().lower()
    return _HOST_ARCHS.get(machine, machine)


def host_platform() -> str:
    if sys.platform.startswith("linux"):
        return "linux"
    if sys.platform.startswith("win"):
        return "win32"
    return sys.platform


def expand(value: str, every: Sequence[str]) -> List[str]:
    if value == "all":
        return list(every)
    return [part.strip() for part in value.split(",") if part.strip()]


def app_resources_dir(bundle: Path, app_name: str, platform: str) -> Path:
    if platform in {"darwin", "mas"}:
        return bundle / f"{app_name}.app" / "Contents" / "Resources" / "app"
    return bundle / "resources" / "app"


def bundle_name(options: Mapping[str, Any], manifest: Manifest, source: Path) -> str:
    return options.get("name") or manifest.app_name or Path(source).name


def _run_hooks(hooks: Iterable[Callable[..., Any]], *args: Any) -> None:
    for hook in hooks:
        hook(*args)


class StagingPackager:
    """Default packaging engine."""

    def __call__(self, options: Mapping[str, Any]) -> List[Path]:
        source = Path(options["dir"])
        out = Path(options["out"])
        manifest = read_manifest(source)
        app_name = bundle_name(options, manifest, source)
        electron_version = options.get("electronVersion") or ""
        outputs: List[Path] = []
        for platform in expand(options.get("platform") or host_platform(), ALL_PLATFORMS):
            for arch in expand(options.get("arch") or host_arch(), ALL_ARCHS):
                bundle = self._package_one(options, source, out, app_name, electron_version, platform, arch)
                if bundle is not None:
                    outputs.append(bundle)
        return outputs

    def _package_one(
        self,
        options: Mapping[str, Any],
        source: Path,
        out: Path,
        app_name: str,
        electron_version: str,
        platform: str,
        arch: str,
    ) -> Path | None:
        bundle = out / f"{app_name}-{platform}-{arch}"
        if bundle.exists():
            if not options.get("overwrite"):
                logger.warning("Skipping {}-{}: {} already exists", platform, arch, bundle)
                return None
            shutil.rmtree(bundle)
        bundle.mkdir(parents=True)

        self._extract_runtime(options, bundle, electron_version, platform, arch)
        _run_hooks(options.get("afterExtract") or [], bundle, electron_version, platform, arch)

        app_dir = app_resources_dir(bundle, app_name, platform)
        self._copy_app(source, app_dir, out, options.get("ignore") or [])
        _run_hooks(options.get("afterCopy") or [], app_dir, electron_version, platform, arch)

        if options.get("prune", True):
            run(["npm", "prune", "--production"], cwd=app_dir, quiet=bool(options.get("quiet")))
        _run_hooks(options.get("afterPrune") or [], app_dir, electron_version, platform, arch)

        if options.get("asar"):
            self._pack_asar(source, app_dir)
        logger.debug("Packaged {}", bundle)
        return bundle

    @staticmethod
    def _extract_runtime(options: Mapping[str, Any], bundle: Path, electron_version: str, platform: str, arch: str) -> None:
        zip_dir = options.get("electronZipDir")
        if not zip_dir:
            logger.debug("No electronZipDir configured, runtime is not bundled")
            return
        archive = Path(zip_dir) / f"electron-v{electron_version}-{platform}-{arch}.zip"
        if not archive.is_file():
            raise FileNotFoundError(f"Electron runtime archive not found: {archive}")
        with zipfile.ZipFile(archive) as runtime:
            runtime.extractall(bundle)

    @staticmethod
    def _copy_app(source: Path, app_dir: Path, out: Path, patterns: Sequence[str]) -> None:
        ignored = [*DEFAULT_IGNORE, *patterns]
        out = out.resolve()
        root = source.resolve()

        def ignore(directory: str, names: List[str]) -> List[str]:
            skipped = []
            for name in names:
                path = Path(directory, name)
                at_root = Path(directory).resolve() == root and name in ROOT_IGNORE
                if at_root or path.resolve() == out or any(fnmatch.fnmatch(name, pattern) for pattern in ignored):
                    skipped.append(name)
            return skipped

        app_dir.parent.mkdir(parents=True, exist_ok=True)
        shutil.copytree(source, app_dir, ignore=ignore, symlinks=True)

    @staticmethod
    def _pack_asar(source: Path, app_dir: Path) -> None:
        archive = app_dir.with_name("app.asar")
        run([*node_bin(source, "asar"), "pack", str(app_dir), str(archive)], quiet=True)
        shutil.rmtree(app_dir)


__all__ = [
    "Packager",
    "StagingPackager",
    "ALL_ARCHS",
    "ALL_PLATFORMS",
    "app_resources_dir",
    "bundle_name",
    "expand",
    "host_arch",
    "host_platform",
]
