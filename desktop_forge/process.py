"""Thin wrappers around the external tools the orchestrators drive."""

from __future__ import annotations

import shutil
import subprocess
from pathlib import Path
from typing import Iterable, List, Optional, Sequence

from loguru import logger


def run(cmd: Sequence[str], cwd: Path | None = None, *, check: bool = True, quiet: bool = False) -> int:
    """Run ``cmd`` to completion and return its exit status."""

    logger.debug("Running {} (cwd={})", " ".join(str(part) for part in cmd), cwd)
    output = subprocess.DEVNULL if quiet else None
    result = subprocess.run([str(part) for part in cmd], cwd=cwd, check=check, stdout=output, stderr=output)
    return result.returncode


def node_bin(project_dir: Path, name: str) -> List[str]:
    """Command prefix for a Node CLI, preferring the project's local install."""

    local = Path(project_dir) / "node_modules" / ".bin" / name
    if local.exists():
        return [str(local)]
    found = shutil.which(name)
    if found:
        return [found]
    return ["npx", "--no-install", name]


def has_yarn(preferred: Optional[str] = None) -> bool:
    if preferred is not None:
        return preferred == "yarn"
    return shutil.which("yarn") is not None


def init_git(directory: Path, *, quiet: bool = True) -> None:
    """Initialize a git repository unless ``directory`` already is inside one."""

    inside = subprocess.run(
        ["git", "rev-parse", "--show-toplevel"],
        cwd=directory,
        stdout=subprocess.DEVNULL,
        stderr=subprocess.DEVNULL,
        check=False,
    )
    if inside.returncode == 0:
        logger.debug("{} is already a git repository, skipping git init", directory)
        return
    run(["git", "init"], cwd=directory, quiet=quiet)


def prune(directory: Path, package_manager: Optional[str] = None) -> None:
    """Prune removed packages from ``node_modules``; the exit status is ignored."""

    cmd = ["yarn"] if has_yarn(package_manager) else ["npm", "prune"]
    logger.debug("Pruning node_modules in {}", directory)
    run(cmd, cwd=directory, check=False, quiet=True)


def install_dependencies(
    directory: Path,
    packages: Iterable[str],
    *,
    dev: bool = False,
    exact: bool = False,
    package_manager: Optional[str] = None,
) -> None:
    packages = list(packages)
    if not packages:
        return
    if has_yarn(package_manager):
        cmd = ["yarn", "add", *packages]
        if dev:
            cmd.append("--dev")
        if exact:
            cmd.append("--exact")
    else:
        cmd = ["npm", "install", *packages, "--save-dev" if dev else "--save"]
        if exact:
            cmd.append("--save-exact")
    logger.debug("Installing {} in {}", ", ".join(packages), directory)
    run(cmd, cwd=directory, quiet=True)


__all__ = ["run", "node_bin", "has_yarn", "init_git", "prune", "install_dependencies"]
