"""Hook registration, resolution and lifecycle hook execution."""

from __future__ import annotations

import importlib.util
import sys
from pathlib import Path
from types import ModuleType
from typing import Any, Callable, Dict, Iterable, List, Optional

from loguru import logger

from .errors import HookResolutionError

Hook = Callable[..., Any]

PROJECT_HOOKS_FILE = "forge_hooks.py"
DEFAULT_ATTRIBUTE = "hook"


class HookRegistry:
    """Symbolic hook names mapped to callables."""

    def __init__(self) -> None:
        self._hooks: Dict[str, Hook] = {}

    def register(self, name: str, func: Optional[Hook] = None) -> Any:
        """Register ``func`` under ``name``; usable as a decorator."""

        def decorator(target: Hook) -> Hook:
            if not callable(target):
                raise TypeError(f"Hook {name} must be callable")
            self._hooks[name] = target
            logger.debug("Registered hook {}", name)
            return target

        if func is not None:
            return decorator(func)
        return decorator

    def get(self, name: str) -> Optional[Hook]:
        return self._hooks.get(name)

    def __contains__(self, name: object) -> bool:
        return name in self._hooks

    def __len__(self) -> int:
        return len(self._hooks)


def _load_module(path: Path) -> ModuleType:
    module_name = f"_forge_hook_{abs(hash(str(path)))}"
    spec = importlib.util.spec_from_file_location(module_name, path)
    if spec is None or spec.loader is None:
        raise ImportError(f"Cannot load hook module {path}")
    module = importlib.util.module_from_spec(spec)
    sys.modules[module_name] = module
    spec.loader.exec_module(module)
    return module


def load_project_hooks(directory: Path, registry: Optional[HookRegistry] = None) -> HookRegistry:
    """Let the project populate a registry through ``register_hooks(registry)``."""

    registry = registry if registry is not None else HookRegistry()
    hooks_file = Path(directory) / PROJECT_HOOKS_FILE
    if not hooks_file.is_file():
        return registry
    module = _load_module(hooks_file)
    register = getattr(module, "register_hooks", None)
    if register is None:
        logger.warning("{} does not define register_hooks(registry)", hooks_file)
        return registry
    register(registry)
    logger.debug("Loaded {} hook(s) from {}", len(registry), hooks_file)
    return registry


def require_search(directory: Path, reference: str) -> Hook:
    """Find a hook callable for ``reference`` in the project tree.

    ``reference`` is a file path with an optional ``:attribute`` suffix. The
    candidates are the path as given, relative to the project, with a ``.py``
    suffix, and inside ``node_modules``.
    """

    path_part, _, attribute = reference.partition(":")
    attribute = attribute or DEFAULT_ATTRIBUTE
    directory = Path(directory)
    candidates = [
        Path(path_part),
        directory / path_part,
        directory / f"{path_part}.py",
        directory / "node_modules" / path_part,
    ]
    for candidate in candidates:
        if not candidate.is_file():
            continue
        logger.debug("Resolving hook {} from {}", reference, candidate)
        hook = getattr(_load_module(candidate), attribute, None)
        if callable(hook):
            return hook
    raise HookResolutionError(reference)


def resolve_hooks(
    hooks: Optional[Iterable[Any]],
    directory: Path,
    registry: Optional[HookRegistry] = None,
) -> List[Hook]:
    if not hooks:
        return []
    resolved: List[Hook] = []
    for hook in hooks:
        if callable(hook):
            resolved.append(hook)
        elif isinstance(hook, str):
            registered = registry.get(hook) if registry is not None else None
            resolved.append(registered if registered is not None else require_search(directory, hook))
        else:
            raise HookResolutionError(repr(hook))
    return resolved


def run_hook(
    forge_config: Any,
    name: str,
    *args: Any,
    directory: Path | None = None,
    registry: Optional[HookRegistry] = None,
) -> None:
    """Invoke the lifecycle hook ``name`` as ``hook(forge_config, *args)``."""

    hook = forge_config.get("hooks", {}).get(name)
    logger.debug("Hook triggered: {}", name)
    if hook is None:
        logger.debug("Could not find hook: {}", name)
        return
    if not callable(hook):
        if directory is None and registry is None:
            raise HookResolutionError(str(hook))
        [hook] = resolve_hooks([hook], directory or Path.cwd(), registry)
    logger.debug("Calling hook {}", name)
    hook(forge_config, *args)


__all__ = [
    "Hook",
    "HookRegistry",
    "PROJECT_HOOKS_FILE",
    "load_project_hooks",
    "require_search",
    "resolve_hooks",
    "run_hook",
]
