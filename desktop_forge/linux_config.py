"""Merged configuration for the Linux installer makers."""

from __future__ import annotations

import copy
from pathlib import Path
from typing import Any, Dict, Mapping

SHARED_CONFIG_KEY = "desktopLinuxConfig"


def deep_merge(*sources: Mapping[str, Any]) -> Dict[str, Any]:
    """Merge mappings left to right into a new dict.

    Nested mappings merge key by key, any other value from a later source
    replaces the earlier one. The sources are not modified.
    """

    merged: Dict[str, Any] = {}
    for source in sources:
        for key, value in source.items():
            current = merged.get(key)
            if isinstance(value, Mapping) and isinstance(current, Mapping):
                merged[key] = deep_merge(current, value)
            elif isinstance(value, Mapping):
                merged[key] = deep_merge(value)
            else:
                merged[key] = copy.deepcopy(value)
    return merged


def _section(forge_config: Any, config_key: str, target_arch: str) -> Dict[str, Any]:
    section = forge_config.get(config_key) or {}
    if callable(section):
        section = section(target_arch)
    config = deep_merge(section or {})
    if not config.get("options"):
        config["options"] = {}
    return config


def populate(forge_config: Any, config_key: str, target_arch: str) -> Dict[str, Dict[str, Any]]:
    return {
        "shared": _section(forge_config, SHARED_CONFIG_KEY, target_arch),
        "maker": _section(forge_config, config_key, target_arch),
    }


def merge_linux_config(config: Mapping[str, Any], pkg_arch: str, dir: Path, out_path: Path) -> Dict[str, Any]:
    return deep_merge(
        config["shared"],
        config["maker"],
        {
            "arch": pkg_arch,
            "dest": str(Path(out_path).parent),
            "src": str(dir),
        },
    )


__all__ = ["deep_merge", "populate", "merge_linux_config", "SHARED_CONFIG_KEY"]
