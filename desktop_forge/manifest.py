"""Typed ``package.json`` record."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

MANIFEST_NAME = "package.json"

# JSON key -> attribute name
_FIELDS = {
    "name": "name",
    "productName": "product_name",
    "version": "version",
    "main": "main",
    "dependencies": "dependencies",
    "devDependencies": "dev_dependencies",
    "config": "config",
    "babel": "babel",
}


@dataclass(slots=True)
class Manifest:
    """A project manifest.

    Known fields are typed attributes. Everything else is kept in ``extra`` and
    written back untouched, in its original position.
    """

    name: Optional[str] = None
    product_name: Optional[str] = None
    version: Optional[str] = None
    main: Optional[str] = None
    dependencies: Dict[str, str] = field(default_factory=dict)
    dev_dependencies: Dict[str, str] = field(default_factory=dict)
    config: Dict[str, Any] = field(default_factory=dict)
    babel: Optional[Any] = None
    extra: Dict[str, Any] = field(default_factory=dict)
    key_order: List[str] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Manifest":
        manifest = cls(key_order=list(data))
        for key, value in data.items():
            attribute = _FIELDS.get(key)
            if attribute is None:
                manifest.extra[key] = value
            elif attribute in {"dependencies", "dev_dependencies", "config"}:
                setattr(manifest, attribute, dict(value or {}))
            else:
                setattr(manifest, attribute, value)
        return manifest

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {}
        keys = list(self.key_order)
        keys += [key for key in (*_FIELDS, *self.extra) if key not in keys]
        for key in keys:
            attribute = _FIELDS.get(key)
            if attribute is None:
                if key in self.extra:
                    data[key] = self.extra[key]
                continue
            value = getattr(self, attribute)
            if value is None:
                continue
            # Empty mappings are only written when the source had them
            if isinstance(value, dict) and not value and key not in self.key_order:
                continue
            data[key] = value
        return data

    @property
    def app_name(self) -> Optional[str]:
        return self.product_name or self.name

    @property
    def forge_config(self) -> Optional[Any]:
        return self.config.get("forge")

    def set_forge_config(self, forge: Any) -> None:
        self.config["forge"] = forge

    def strip_forge_config(self) -> bool:
        """Drop ``config.forge``; returns whether anything was removed."""

        return self.config.pop("forge", None) is not None

    def remove_dependency(self, name: str) -> None:
        self.dependencies.pop(name, None)
        self.dev_dependencies.pop(name, None)

    def all_dependency_names(self) -> List[str]:
        return list(self.dependencies) + list(self.dev_dependencies)


def read_manifest(directory: Path) -> Manifest:
    path = Path(directory) / MANIFEST_NAME
    return Manifest.from_dict(json.loads(path.read_text(encoding="utf-8")))


def write_manifest(directory: Path, manifest: Manifest) -> Path:
    path = Path(directory) / MANIFEST_NAME
    path.write_text(json.dumps(manifest.to_dict(), indent=2) + "\n", encoding="utf-8")
    return path


__all__ = ["Manifest", "MANIFEST_NAME", "read_manifest", "write_manifest"]
