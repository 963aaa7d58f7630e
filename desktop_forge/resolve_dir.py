"""Locate the forge project that contains a directory."""

from __future__ import annotations

from pathlib import Path
from typing import Optional

from loguru import logger

from .errors import ForgeError
from .manifest import MANIFEST_NAME, read_manifest

PREBUILT_COMPILE = "electron-prebuilt-compile"


def resolve_dir(directory: Path) -> Optional[Path]:
    """Walk up from ``directory`` to the first manifest with a forge config."""

    current = Path(directory).resolve()
    for candidate in (current, *current.parents):
        if not (candidate / MANIFEST_NAME).is_file():
            continue
        manifest = read_manifest(candidate)
        if PREBUILT_COMPILE not in manifest.dev_dependencies:
            raise ForgeError(f'You must depend on "{PREBUILT_COMPILE}" in your devDependencies ({candidate})')
        if manifest.forge_config is not None:
            logger.debug("Resolved project directory {}", candidate)
            return candidate
    return None


__all__ = ["resolve_dir", "PREBUILT_COMPILE"]
