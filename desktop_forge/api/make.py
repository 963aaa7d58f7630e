"""Make distributables for a packaged Electron application."""

from __future__ import annotations

from pathlib import Path
from typing import Iterable, List, Optional

from loguru import logger

from ..errors import ForgeError
from ..forge_config import load_forge_config
from ..hooks import HookRegistry, load_project_hooks, run_hook
from ..logger import step
from ..makers import MAKERS, Maker
from ..manifest import read_manifest
from ..packager import Packager, bundle_name, expand, host_arch, host_platform
from ..resolve_dir import resolve_dir
from .package import package

LINUX_ARCHS = ("ia32", "x64", "armv7l")


def target_archs(arch: str, platform: str) -> List[str]:
    if arch != "all":
        return expand(arch, [arch])
    return list(LINUX_ARCHS) if platform == "linux" else ["x64"]


def select_makers(targets: Iterable[str]) -> List[Maker]:
    makers = []
    for target in targets:
        maker = MAKERS.get(target)
        if maker is None:
            raise ForgeError(f"Could not find a build target with the name: {target}")
        if not maker.is_supported():
            raise ForgeError(f'Cannot build for "{target}" on this platform, its requirements are not met')
        makers.append(maker)
    return makers


def make(
    dir: Path | str | None = None,
    interactive: bool = False,
    skip_package: bool = False,
    overrides: Optional[Iterable[str]] = None,
    arch: str | None = None,
    platform: str | None = None,
    out_dir: Path | str | None = None,
    packager: Optional[Packager] = None,
    registry: Optional[HookRegistry] = None,
) -> List[Path]:
    """Package the app (unless ``skip_package``) and run every configured maker.

    Returns the paths of the produced artifacts.
    """

    given = Path(dir) if dir is not None else Path.cwd()
    arch = arch or host_arch()
    platform = platform or host_platform()
    quiet = not interactive

    project_dir = resolve_dir(given)
    if project_dir is None:
        raise ForgeError(f"Failed to locate makeable Electron application in {given}")
    out = Path(out_dir) if out_dir is not None else project_dir / "out"

    manifest = read_manifest(project_dir)
    forge_config = load_forge_config(project_dir, manifest)
    registry = load_project_hooks(project_dir, registry)
    targets = list(overrides) if overrides else forge_config.make_targets.get(platform, [])
    makers = select_makers(targets)
    archs = target_archs(arch, platform)

    if skip_package:
        logger.info("Skipping package step, using previously packaged application")
    else:
        for target_arch in archs:
            package(
                dir=project_dir,
                interactive=interactive,
                arch=target_arch,
                platform=platform,
                out_dir=out,
                packager=packager,
                registry=registry,
            )

    app_name = bundle_name(forge_config.packager_config, manifest, project_dir)
    artifacts: List[Path] = []
    for target_arch in archs:
        packaged = out / f"{app_name}-{platform}-{target_arch}"
        if not packaged.is_dir():
            raise ForgeError(f"Couldn't find packaged app at: {packaged}")
        for maker in makers:
            with step(f"Making for target: {maker.name} - On platform: {platform} - For arch: {target_arch}", quiet=quiet):
                artifacts.extend(
                    maker.build(
                        dir=packaged,
                        app_name=app_name,
                        target_platform=platform,
                        target_arch=target_arch,
                        forge_config=forge_config,
                        manifest=manifest,
                        project_dir=project_dir,
                    )
                )

    run_hook(forge_config, "postMake", artifacts, directory=project_dir, registry=registry)
    for artifact in artifacts:
        logger.info("Made {}", artifact)
    return artifacts


__all__ = ["make", "select_makers", "target_archs"]
