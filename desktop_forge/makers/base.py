"""Shared helpers for makers."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Callable, List


@dataclass(slots=True)
class Maker:
    """A named artifact builder."""

    name: str
    build: Callable[..., List[Path]]
    is_supported: Callable[[], bool]


def ensure_file(path: Path) -> Path:
    """Create the parent directory of ``path`` and drop any stale file."""

    path.parent.mkdir(parents=True, exist_ok=True)
    if path.exists():
        path.unlink()
    return path


__all__ = ["Maker", "ensure_file"]
