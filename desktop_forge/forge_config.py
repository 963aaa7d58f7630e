"""Forge configuration loading."""

from __future__ import annotations

import copy
import json
import os
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Mapping

from loguru import logger

from .manifest import Manifest, read_manifest

ENV_PREFIX = "ELECTRON_FORGE_"

DEFAULT_MAKE_TARGETS: Dict[str, List[str]] = {
    "win32": ["zip"],
    "darwin": ["zip"],
    "mas": ["zip"],
    "linux": ["deb", "rpm"],
}

DEFAULT_SECTIONS = (
    "electronPackagerConfig",
    "electronInstallerDebian",
    "electronInstallerRedhat",
    "desktopLinuxConfig",
    "hooks",
)

_TEMPLATE = re.compile(r"\{\{\s*(\w+)\s*\}\}")


@dataclass(slots=True)
class ForgeConfig:
    """The ``config.forge`` block with defaults applied.

    Sections are stored under their manifest keys so makers can select one by
    name (``config["electronInstallerDebian"]``).
    """

    data: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        self.data.setdefault("make_targets", {})
        for platform, targets in DEFAULT_MAKE_TARGETS.items():
            self.data["make_targets"].setdefault(platform, list(targets))
        for section in DEFAULT_SECTIONS:
            if self.data.get(section) is None:
                self.data[section] = {}

    def __getitem__(self, key: str) -> Any:
        return self.data[key]

    def get(self, key: str, default: Any = None) -> Any:
        return self.data.get(key, default)

    @property
    def make_targets(self) -> Dict[str, List[str]]:
        return self.data["make_targets"]

    @property
    def packager_config(self) -> Dict[str, Any]:
        return self.data["electronPackagerConfig"]

    @property
    def hooks(self) -> Dict[str, Any]:
        return self.data["hooks"]


def _env_name(key: str) -> str:
    snake = re.sub(r"(?<=[a-z0-9])([A-Z])", r"_\1", key)
    return ENV_PREFIX + snake.upper()


def _render(value: Any, context: Mapping[str, Any]) -> Any:
    if isinstance(value, str):
        return _TEMPLATE.sub(lambda match: str(context.get(match.group(1), match.group(0))), value)
    if isinstance(value, dict):
        return {key: _render(item, context) for key, item in value.items()}
    if isinstance(value, list):
        return [_render(item, context) for item in value]
    return value


def _load_referenced(directory: Path, reference: str) -> Dict[str, Any]:
    for candidate in (directory / reference, directory / f"{reference}.json"):
        if candidate.is_file():
            logger.debug("Loading forge config from {}", candidate)
            return json.loads(candidate.read_text(encoding="utf-8"))
    raise FileNotFoundError(f"Forge config file not found: {reference}")


def load_forge_config(directory: Path, manifest: Manifest | None = None) -> ForgeConfig:
    """Load ``config.forge`` from the manifest in ``directory``.

    A string value points to a JSON file relative to the project. String
    values may reference top-level manifest fields as ``{{ name }}`` and
    top-level string settings may be overridden with ``ELECTRON_FORGE_*``
    environment variables.
    """

    directory = Path(directory)
    manifest = manifest or read_manifest(directory)
    raw = manifest.forge_config
    if isinstance(raw, str):
        raw = _load_referenced(directory, raw)
    data = copy.deepcopy(raw) if isinstance(raw, dict) else {}

    data = _render(data, manifest.to_dict())
    for key, value in list(data.items()):
        override = os.getenv(_env_name(key))
        if override is not None and (value is None or isinstance(value, str)):
            logger.debug("Forge config {} overridden from {}", key, _env_name(key))
            data[key] = override
    return ForgeConfig(data)


__all__ = ["ForgeConfig", "DEFAULT_MAKE_TARGETS", "load_forge_config"]
