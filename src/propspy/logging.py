"""Logging helpers used by the PROPSPY pytest plugin.

This module provides utilities for configuring console logging with Rich
and an in-memory "flight recorder" that buffers log records and writes them
to disk on flush. Handlers are attached to the ``propspy`` logger only, so
they do not interfere with pytest's own log capture of the root logger.
"""

from __future__ import annotations

import logging
import platform
import sys
from importlib.metadata import version
from logging.handlers import MemoryHandler
from pathlib import Path
from typing import TYPE_CHECKING, Literal, TypeAlias

import pytest
from rich.console import Console
from rich.logging import RichHandler

if TYPE_CHECKING:
    from collections.abc import Sequence
    from logging import Logger

    from propspy.config import LeakPolicy

PROJECT_PREFIX = "propspy"


def config_console_handler(
    level: int = logging.INFO, debug_mode: bool = False, color: bool = True
) -> RichHandler:
    """Configure and return a RichHandler for console output.

    The handler writes to stderr. In debug mode the handler is set to DEBUG and
    includes the logger name, timestamps and source file/line information.

    Args:
        level: Minimum level for console output (overridden to DEBUG in debug_mode).
        debug_mode: When True, enable debug formatting (show_path, timestamps).
        color: Enable color output when True.

    Returns:
        RichHandler: Configured handler.
    """
    ColorSystem: TypeAlias = Literal["auto", "standard", "256", "truecolor", "windows"]
    color_system: ColorSystem | None = "auto" if color else None
    console = Console(color_system=color_system, stderr=True)

    if debug_mode:
        level = logging.DEBUG

    handler = RichHandler(
        level=level,
        console=console,
        rich_tracebacks=True,
        show_time=False,
        show_path=debug_mode,
        enable_link_path=debug_mode,
    )

    fmt = "%(asctime)s %(name)s: %(message)s" if debug_mode else "%(message)s"
    handler.setFormatter(logging.Formatter(fmt=fmt))

    return handler


def config_flight_recorder(
    path: Path,
    capacity: int = 2000,
    flush_level: int = logging.WARNING,
    flush_on_close: bool = False,
) -> MemoryHandler:
    """Configure and return an in-memory flight recorder backed by a file.

    The flight recorder buffers up to `capacity` log records and flushes
    them to the file when a record at `flush_level` or higher is emitted
    (or on close if `flush_on_close` is True). A leaked-interception warning
    therefore dumps the wrap/restore history that led up to it.

    Args:
        path: Destination file path for flushed records.
        capacity: Number of records to buffer in memory.
        flush_level: Level at or above which the buffer will be flushed.
        flush_on_close: If True, flush the buffer when the handler is closed.

    Returns:
        MemoryHandler: A memory-backed handler with a FileHandler target.
    """
    file_handler = logging.FileHandler(path, mode="w", encoding="utf-8")
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(
        logging.Formatter(
            "[%(asctime)s] %(levelname)s %(name)s:%(lineno)d: %(message)s"
        )
    )

    return MemoryHandler(
        capacity=capacity,
        flushLevel=flush_level,
        target=file_handler,
        flushOnClose=flush_on_close,
    )


def attach_handlers(handlers: Sequence[logging.Handler]) -> Logger:
    """Attach ``handlers`` to the project logger and open it up to DEBUG.

    Handlers do their own level filtering, so the logger passes everything.

    Returns:
        The project logger.
    """
    project_logger = logging.getLogger(PROJECT_PREFIX)
    project_logger.setLevel(logging.DEBUG)
    for handler in handlers:
        project_logger.addHandler(handler)
    return project_logger


def detach_handlers(handlers: Sequence[logging.Handler]) -> None:
    """Remove ``handlers`` from the project logger and close them.

    Closing a flight recorder flushes it when it was built with
    ``flush_on_close``, and always closes its file.
    """
    project_logger = logging.getLogger(PROJECT_PREFIX)
    for handler in handlers:
        project_logger.removeHandler(handler)
        handler.close()
        if isinstance(handler, MemoryHandler) and handler.target is not None:
            handler.target.close()
    project_logger.setLevel(logging.NOTSET)


def log_startup(
    logger: Logger,
    *,
    app_version: str,
    handlers: Sequence[logging.Handler],
    log_path: Path | None,
    leak_policy: LeakPolicy,
) -> None:
    """Log a one-line summary of the harness setup and DEBUG diagnostics.

    Args:
        logger: Logger used to emit startup messages.
        app_version: Application version string to display.
        handlers: Handlers attached to the project logger.
        log_path: Path to the flight-recorder output file, or None.
        leak_policy: Policy applied to operations left wrapped at teardown.
    """
    logger.info(
        "PROPSPY %s - leak-policy=%s, flight-recorder=%s",
        app_version,
        leak_policy.value,
        "ON" if log_path else "OFF",
    )
    logger.debug("Python: %s", sys.version.split()[0])
    logger.debug("Platform: %s %s", platform.system(), platform.release())
    logger.debug("pytest: %s", pytest.__version__)
    logger.debug("Rich: %s", version("rich"))
    logger.debug("Handlers: %s", [type(h).__name__ for h in handlers])
    if log_path:
        logger.debug("Flight recorder: path=%s", log_path)

