"""Command line entry point for desktop-forge."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from loguru import logger

from .api import import_project, make, package
from .errors import ForgeError
from .logger import setup_logging
from .settings import Settings


def parse_args(argv: list[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="desktop-forge", description="Import, package and make Electron apps")
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default=None,
        help="Console log level (defaults to FORGE_LOG_LEVEL or INFO)",
    )
    commands = parser.add_subparsers(dest="command", required=True)

    import_cmd = commands.add_parser("import", help="Import an existing project")
    import_cmd.add_argument("dir", nargs="?", type=Path, default=None)
    import_cmd.add_argument("--interactive", action="store_true", help="Prompt before changing anything")

    for name, help_text in (("package", "Package the application"), ("make", "Make distributables")):
        command = commands.add_parser(name, help=help_text)
        command.add_argument("dir", nargs="?", type=Path, default=None)
        command.add_argument("--interactive", action="store_true", help="Report progress")
        command.add_argument("--arch", default=None, help="Target arch, 'all' for every arch")
        command.add_argument("--platform", default=None, help="Target platform")
        command.add_argument("--out-dir", type=Path, default=None, help="Output directory (default <dir>/out)")
        if name == "make":
            command.add_argument("--skip-package", action="store_true", help="Reuse a previously packaged app")
            command.add_argument("--targets", nargs="*", default=None, help="Makers to run instead of make_targets")

    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = parse_args(sys.argv[1:] if argv is None else argv)
    settings = Settings.from_env(args.dir)
    setup_logging(console_level=args.log_level or settings.log_level, log_directory=settings.log_directory)

    try:
        if args.command == "import":
            import_project(dir=args.dir, interactive=args.interactive, settings=settings)
        elif args.command == "package":
            package(
                dir=args.dir,
                interactive=args.interactive,
                arch=args.arch,
                platform=args.platform,
                out_dir=args.out_dir,
            )
        else:
            make(
                dir=args.dir,
                interactive=args.interactive,
                skip_package=args.skip_package,
                overrides=args.targets,
                arch=args.arch,
                platform=args.platform,
                out_dir=args.out_dir,
            )
    except ForgeError as exc:
        logger.error("{}", exc)
        return 1
    return 0


if __name__ == "__main__":  # pragma: no cover - manual invocation
    raise SystemExit(main())
