"""Environment-driven settings for the forge CLI."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

PACKAGE_MANAGERS = ("npm", "yarn")


@dataclass(slots=True)
class Settings:
    """Settings read from ``FORGE_*`` environment variables."""

    log_level: str = "INFO"
    log_directory: Optional[str] = None
    package_manager: Optional[str] = None

    @classmethod
    def from_env(cls, project_dir: Path | None = None) -> "Settings":
        # Project-local .env first; neither file overrides the real environment
        if project_dir is not None:
            load_dotenv(Path(project_dir) / ".env", override=False)
        load_dotenv(override=False)

        package_manager = os.getenv("FORGE_PACKAGE_MANAGER", "").strip().lower() or None
        if package_manager is not None and package_manager not in PACKAGE_MANAGERS:
            raise ValueError(
                f"FORGE_PACKAGE_MANAGER must be one of {', '.join(PACKAGE_MANAGERS)}, got {package_manager!r}"
            )
        return cls(
            log_level=os.getenv("FORGE_LOG_LEVEL", "INFO").upper(),
            log_directory=os.getenv("FORGE_LOG_DIR") or None,
            package_manager=package_manager,
        )


__all__ = ["Settings", "PACKAGE_MANAGERS"]
