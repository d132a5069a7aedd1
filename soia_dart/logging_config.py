"""Logging setup shared by all modules of the package.

Modules call ``get_logger(__name__)``; the CLI calls ``setup_logging`` once
to attach a rich console handler (and optionally a file handler).
"""

import logging
from pathlib import Path

from rich.console import Console
from rich.logging import RichHandler

PACKAGE_LOGGER = "soia_dart"

_configured = False


def setup_logging(level: str | int = "WARNING", log_file: str | Path | None = None) -> None:
    """Configure the package logger.

    Args:
        level: Log level name or number.
        log_file: Optional file receiving the same records, without markup.
    """
    global _configured

    logger = logging.getLogger(PACKAGE_LOGGER)
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            raise ValueError(f"Unknown log level: {level}")
    logger.setLevel(level)

    if _configured:
        return

    console_handler = RichHandler(
        console=Console(stderr=True),
        show_path=False,
        rich_tracebacks=True,
    )
    console_handler.setFormatter(logging.Formatter("%(message)s", datefmt="[%X]"))
    logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setFormatter(
            logging.Formatter("%(asctime)s %(name)s %(levelname)s %(message)s")
        )
        logger.addHandler(file_handler)

    logger.propagate = False
    _configured = True


def get_logger(name: str) -> logging.Logger:
    """Return a logger under the package namespace."""
    return logging.getLogger(name)
