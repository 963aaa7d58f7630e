"""Generic zip maker, available on every platform."""

from __future__ import annotations

import shutil
from pathlib import Path
from typing import Any, List

from ..manifest import Manifest
from .base import ensure_file


def is_supported_on_current_platform() -> bool:
    return True


def make_zip(*, dir: Path, app_name: str, target_platform: str, manifest: Manifest, **_: Any) -> List[Path]:
    dir = Path(dir)
    zip_dir = dir / f"{app_name}.app" if target_platform in {"darwin", "mas"} else dir
    zip_path = dir.parent / "make" / f"{dir.name}-{manifest.version}.zip"

    ensure_file(zip_path)
    # make_archive appends the .zip suffix itself
    shutil.make_archive(str(zip_path.with_suffix("")), "zip", root_dir=zip_dir.parent, base_dir=zip_dir.name)
    return [zip_path]


__all__ = ["make_zip", "is_supported_on_current_platform"]
