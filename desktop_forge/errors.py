"""Exceptions raised by the forge orchestrators."""

from __future__ import annotations


class ForgeError(RuntimeError):
    """A precondition for importing, packaging or making was not met."""


class HookResolutionError(ForgeError):
    """A hook given by name could not be found."""

    def __init__(self, name: str) -> None:
        super().__init__(f"Could not resolve hook: {name}")
        self.name = name


__all__ = ["ForgeError", "HookResolutionError"]
