"""Import an existing Electron project into the forge layout.

The import replaces the legacy ``electron``/``electron-prebuilt`` runtime with
``electron-prebuilt-compile``, sets up git and the forge dependencies, adds a
template forge config and ports an existing babel configuration to
``.compilerc``.
"""

from __future__ import annotations

import json
import re
import shutil
from pathlib import Path
from typing import Dict, Optional

from loguru import logger

from ..logger import step
from ..manifest import MANIFEST_NAME, Manifest, read_manifest, write_manifest
from ..process import init_git, install_dependencies, prune
from ..prompts import ask, confirm
from ..resolve_dir import PREBUILT_COMPILE
from ..settings import Settings

TEMPLATE_DIR = Path(__file__).resolve().parents[1] / "tmpl"

RUNTIME_PACKAGES = ("electron", "electron-prebuilt")

BUILD_TOOL_PACKAGES: Dict[str, str] = {
    "electron-builder": "provides mostly equivalent functionality",
    "electron-download": "already uses this module as a transitive dependency",
    "electron-installer-debian": "already uses this module as a transitive dependency",
    "electron-installer-dmg": "already uses this module as a transitive dependency",
    "electron-installer-flatpak": "already uses this module as a transitive dependency",
    "electron-installer-redhat": "already uses this module as a transitive dependency",
    "electron-osx-sign": "already uses this module as a transitive dependency",
    "electron-packager": "already uses this module as a transitive dependency",
    "electron-winstaller": "already uses this module as a transitive dependency",
}

DEPENDENCIES = ["electron-compile"]
DEV_DEPENDENCIES = [
    "babel-preset-env",
    "babel-preset-react",
    "babel-plugin-transform-async-to-generator",
    "electron-forge",
]

STALE_BINARIES = ("node_modules/.bin/electron", "node_modules/.bin/electron.cmd")
IGNORE_RULE = "out/"
BABEL_KEY = "application/javascript"

_RANGE_PREFIX = re.compile(r"^[\^~>=<v\s]+")


def _remove_path(path: Path) -> None:
    if path.is_dir() and not path.is_symlink():
        shutil.rmtree(path)
    elif path.exists() or path.is_symlink():
        path.unlink()


def _strip_runtime_dependencies(manifest: Manifest, interactive: bool) -> Optional[str]:
    runtime_name = None
    for key in manifest.all_dependency_names():
        if key in RUNTIME_PACKAGES:
            manifest.remove_dependency(key)
            runtime_name = key
        elif key in BUILD_TOOL_PACKAGES:
            explanation = BUILD_TOOL_PACKAGES[key]
            if confirm(
                f'Do you want us to remove the "{key}" dependency in package.json? Electron Forge {explanation}.',
                interactive=interactive,
            ):
                logger.debug("Removing build tool dependency {}", key)
                manifest.remove_dependency(key)
    return runtime_name


def detect_runtime_version(directory: Path, name: str, declared: Optional[str]) -> str:
    """Version of the installed runtime, else the declared range without its operator."""

    installed = directory / "node_modules" / name / MANIFEST_NAME
    if installed.is_file():
        version = read_manifest(installed.parent).version
        if version:
            return version
    if not declared:
        raise FileNotFoundError(f"Cannot determine the installed version of {name}")
    logger.warning("{} is not installed, using the declared version {}", name, declared)
    return _RANGE_PREFIX.sub("", declared)


def fix_gitignore(directory: Path) -> bool:
    """Append the ``out/`` rule to ``.gitignore``; returns whether it was added."""

    gitignore = directory / ".gitignore"
    if not gitignore.is_file():
        return False
    content = gitignore.read_text(encoding="utf-8")
    rules = {line.strip().strip("/") for line in content.splitlines()}
    if "out" in rules:
        return False
    if content and not content.endswith("\n"):
        content += "\n"
    gitignore.write_text(f"{content}{IGNORE_RULE}\n", encoding="utf-8")
    return True


def port_babel_config(directory: Path, manifest: Manifest) -> bool:
    """Merge a legacy babel config into ``.compilerc``."""

    babel_config = manifest.babel
    babelrc = directory / ".babelrc"
    if not babel_config and babelrc.is_file():
        babel_config = json.loads(babelrc.read_text(encoding="utf-8"))
    if not babel_config:
        return False

    compilerc = directory / ".compilerc"
    compile_config = {}
    if compilerc.is_file():
        compile_config = json.loads(compilerc.read_text(encoding="utf-8"))
    compile_config[BABEL_KEY] = babel_config
    compilerc.write_text(json.dumps(compile_config, indent=2), encoding="utf-8")
    return True


def import_project(
    dir: Path | str | None = None,
    interactive: bool = False,
    settings: Optional[Settings] = None,
) -> bool:
    """Import the project in ``dir``.

    Returns ``False`` when the user declines one of the confirmations and
    ``True`` once the import is complete. A missing project aborts the process.
    """

    directory = Path(dir) if dir is not None else Path.cwd()
    settings = settings or Settings.from_env(directory)
    quiet = not interactive

    logger.debug("Attempting to import project in: {}", directory)
    if not directory.is_dir() or not (directory / MANIFEST_NAME).is_file():
        logger.error("We couldn't find a project in: {}", directory)
        raise SystemExit(1)

    if not confirm(
        f'WARNING: We will now attempt to import: "{directory}".  This will involve modifying some files, '
        "are you sure you want to continue?",
        interactive=interactive,
    ):
        return False

    with step("Initializing Git Repository", quiet=quiet):
        init_git(directory)

    manifest = read_manifest(directory)
    if manifest.forge_config is not None:
        logger.warning('It looks like this project is already configured for "electron-forge"')
        if not confirm("Are you sure you want to continue?", interactive=interactive):
            return False

    if interactive and confirm(
        'Do you want us to change the "main" attribute of your package.json?  If you are currently using babel '
        'and pointing to a "build" directory say yes.',
        interactive=interactive,
        default=False,
    ):
        manifest.main = ask(
            "Enter the relative path to your uncompiled main file",
            interactive=interactive,
            default=manifest.main,
        )

    declared = dict(manifest.dev_dependencies)
    declared.update(manifest.dependencies)
    runtime_name = _strip_runtime_dependencies(manifest, interactive)

    runtime_version = None
    if runtime_name:
        runtime_version = detect_runtime_version(directory, runtime_name, declared.get(runtime_name))
        manifest.dev_dependencies[PREBUILT_COMPILE] = runtime_version

    with step("Writing modified package.json file", quiet=quiet):
        write_manifest(directory, manifest)

    if runtime_name:
        with step("Pruning deleted modules", quiet=quiet):
            prune(directory, settings.package_manager)

        with step("Installing dependencies", quiet=quiet):
            logger.debug("Deleting old dependencies forcefully")
            for stale in (*STALE_BINARIES, f"node_modules/{runtime_name}"):
                _remove_path(directory / stale)

            install_dependencies(directory, DEPENDENCIES, package_manager=settings.package_manager)
            install_dependencies(directory, DEV_DEPENDENCIES, dev=True, package_manager=settings.package_manager)
            install_dependencies(
                directory,
                [f"{PREBUILT_COMPILE}@{runtime_version}"],
                dev=True,
                exact=True,
                package_manager=settings.package_manager,
            )

    manifest = read_manifest(directory)
    template = read_manifest(TEMPLATE_DIR)
    manifest.set_forge_config(template.forge_config)
    with step("Writing modified package.json file", quiet=quiet):
        write_manifest(directory, manifest)

    with step("Fixing .gitignore", quiet=quiet):
        fix_gitignore(directory)

    if manifest.babel or (directory / ".babelrc").is_file():
        with step("Porting original babel config", quiet=quiet):
            port_babel_config(directory, manifest)
        logger.info(
            "NOTE: You might be able to remove your `.compilerc` file completely if you are only using the "
            "`es2015` and `react` presets"
        )

    logger.info(
        'We have ATTEMPTED to convert your app to be in a format that electron-forge understands. '
        'The "{}" dependency was added, bump its version to get newer versions of Electron. '
        "You might need to convert any CLI/gulp/grunt build tasks yourself.",
        PREBUILT_COMPILE,
    )
    return True


__all__ = [
    "import_project",
    "detect_runtime_version",
    "fix_gitignore",
    "port_babel_config",
    "BUILD_TOOL_PACKAGES",
    "RUNTIME_PACKAGES",
]
