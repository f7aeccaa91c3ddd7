"""Logger setup for the resource-docs command line."""

from __future__ import annotations

import logging
from pathlib import Path

ROOT_LOGGER = "resource_docs"
CONSOLE_FORMAT = "[resource-docs] %(levelname)s %(message)s"
FILE_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def get_logger(name: str | None = None) -> logging.Logger:
    """Return the package logger, or its child *name*."""
    if not name:
        return logging.getLogger(ROOT_LOGGER)
    return logging.getLogger(ROOT_LOGGER).getChild(name)


def configure_logging(
    *, verbose: bool = False, log_file: str | Path | None = None
) -> logging.Logger:
    """Send package log records to stderr and, when given, to *log_file*.

    Handlers installed by an earlier call are closed and replaced.
    """
    level = logging.DEBUG if verbose else logging.INFO
    logger = get_logger()
    logger.setLevel(level)
    logger.propagate = False

    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    handlers: list[logging.Handler] = [_handler(logging.StreamHandler(), CONSOLE_FORMAT, level)]
    if log_file is not None:
        path = Path(log_file)
        path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(_handler(logging.FileHandler(path, encoding="utf-8"), FILE_FORMAT, level))

    for handler in handlers:
        logger.addHandler(handler)
    return logger


def _handler(handler: logging.Handler, fmt: str, level: int) -> logging.Handler:
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(fmt))
    return handler


__all__ = ["configure_logging", "get_logger"]
