"""Centralized logging configuration using Loguru."""

from __future__ import annotations

import pathlib
import sys
from contextlib import contextmanager
from typing import Iterator

from loguru import logger


def setup_logging(
    *,
    console_level: str = "INFO",
    file_level: str = "DEBUG",
    log_directory: str | None = None,
    log_filename: str = "desktop_forge.log",
) -> None:
    """Configure the CLI logging sinks.

    Parameters
    ----------
    console_level:
        Minimum log level for console output.
    file_level:
        Minimum log level for file output.
    log_directory:
        Optional directory for a structured log file. Nothing is written to
        disk when omitted.
    log_filename:
        Name of the file that captures structured log output.

    Existing handlers are removed so repeated calls do not duplicate output.
    """

    logger.remove()

    logger.add(
        sys.stderr,
        level=console_level.upper(),
        backtrace=True,
        diagnose=False,
        colorize=True,
        format="<level>{message}</level>",
    )

    if log_directory is None:
        logger.bind(console_level=console_level).debug("Logging configured")
        return

    log_path = pathlib.Path(log_directory).expanduser().resolve()
    log_path.mkdir(parents=True, exist_ok=True)
    file_path = log_path / log_filename

    logger.add(
        file_path,
        level=file_level.upper(),
        backtrace=False,
        diagnose=False,
        rotation="10 MB",
        retention="30 days",
        compression="zip",
        serialize=True,
    )

    logger.bind(
        console_level=console_level,
        file_level=file_level,
        log_directory=str(log_path),
        log_file=str(file_path),
    ).debug("Logging configured")


@contextmanager
def step(message: str, *, quiet: bool = False) -> Iterator[None]:
    """Log the start and outcome of a long-running step.

    Quiet steps (non-interactive runs) only report at debug level, failures
    are always reported before the exception propagates.
    """

    level = "DEBUG" if quiet else "INFO"
    logger.log(level, "{} ...", message)
    try:
        yield
    except Exception:
        logger.error("{} failed", message)
        raise
    if quiet:
        logger.debug("{} done", message)
    else:
        logger.success(message)


__all__ = ["setup_logging", "step"]
