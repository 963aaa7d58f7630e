"""Artifact makers keyed by target name."""

from __future__ import annotations

from typing import Dict

from . import linux, zip
from .base import Maker, ensure_file

MAKERS: Dict[str, Maker] = {
    "zip": Maker("zip", zip.make_zip, zip.is_supported_on_current_platform),
    "deb": Maker("deb", linux.make_deb, linux.is_supported_on_current_platform),
    "rpm": Maker("rpm", linux.make_rpm, linux.is_supported_on_current_platform),
}

__all__ = ["MAKERS", "Maker", "ensure_file"]
