"""Debian and RPM installer makers."""

from __future__ import annotations

import json
import sys
import tempfile
from pathlib import Path
from typing import Any, Dict, List

from loguru import logger

from ..linux_config import merge_linux_config, populate
from ..manifest import Manifest
from ..process import node_bin, run
from .base import ensure_file

DEBIAN_ARCHS = {"ia32": "i386", "x64": "amd64", "armv7l": "armhf"}
REDHAT_ARCHS = {"ia32": "i386", "x64": "x86_64", "armv7l": "armv7hl"}


def debian_arch(arch: str) -> str:
    return DEBIAN_ARCHS.get(arch, arch)


def redhat_arch(arch: str) -> str:
    return REDHAT_ARCHS.get(arch, arch)


def is_supported_on_current_platform() -> bool:
    return sys.platform.startswith("linux")


def _run_installer(tool: str, project_dir: Path, config: Dict[str, Any]) -> None:
    with tempfile.TemporaryDirectory(prefix="desktop-forge-") as scratch:
        config_path = Path(scratch) / "installer.json"
        config_path.write_text(json.dumps(config, indent=2), encoding="utf-8")
        logger.debug("Running {} with {}", tool, config)
        run(
            [
                *node_bin(project_dir, tool),
                "--src",
                config["src"],
                "--dest",
                config["dest"],
                "--arch",
                config["arch"],
                "--config",
                str(config_path),
            ],
            quiet=True,
        )


def make_deb(
    *,
    dir: Path,
    target_arch: str,
    forge_config: Any,
    manifest: Manifest,
    project_dir: Path | None = None,
    **_: Any,
) -> List[Path]:
    dir = Path(dir)
    arch = debian_arch(target_arch)
    out_path = ensure_file(dir.parent / "make" / f"{manifest.name}_{manifest.version}_{arch}.deb")

    defaults = populate(forge_config, "electronInstallerDebian", target_arch)
    config = merge_linux_config(defaults, arch, dir, out_path)
    _run_installer("electron-installer-debian", project_dir or dir, config)
    return [out_path]


def make_rpm(
    *,
    dir: Path,
    target_arch: str,
    forge_config: Any,
    manifest: Manifest,
    project_dir: Path | None = None,
    **_: Any,
) -> List[Path]:
    dir = Path(dir)
    arch = redhat_arch(target_arch)
    out_path = ensure_file(dir.parent / "make" / f"{manifest.name}-{manifest.version}.{arch}.rpm")

    defaults = populate(forge_config, "electronInstallerRedhat", target_arch)
    config = merge_linux_config(defaults, arch, dir, out_path)
    _run_installer("electron-installer-redhat", project_dir or dir, config)
    return [out_path]


__all__ = ["make_deb", "make_rpm", "debian_arch", "redhat_arch", "is_supported_on_current_platform"]
