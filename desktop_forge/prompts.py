"""Interactive prompts that fall back to proceeding when non-interactive."""

from __future__ import annotations

import typer


def confirm(message: str, *, interactive: bool, default: bool = True) -> bool:
    # Non-interactive runs always proceed, destructive steps included
    if not interactive:
        return True
    return typer.confirm(message, default=default)


def ask(message: str, *, interactive: bool, default: str | None = None) -> str | None:
    if not interactive:
        return default
    return typer.prompt(message, default=default)


__all__ = ["confirm", "ask"]
