"""Logging utilities for portmeta commands."""

from __future__ import annotations

import logging

_LOGGER_NAME = "portmeta"


def get_logger(name: str | None = None) -> logging.Logger:
    """Return a module-scoped logger under the portmeta hierarchy."""
    full_name = f"{_LOGGER_NAME}.{name}" if name else _LOGGER_NAME
    return logging.getLogger(full_name)


def configure_logging(*, verbose: bool = False) -> logging.Logger:
    """Send portmeta diagnostics to stderr; DEBUG when verbose, else warnings only.

    Progress lines are not logged, so the default level keeps stderr limited to
    them and to genuine problems.
    """
    level = logging.DEBUG if verbose else logging.WARNING
    logger = logging.getLogger(_LOGGER_NAME)
    logger.setLevel(level)
    logger.propagate = False

    # main() may run several times in one process (tests); keep a single handler.
    for handler in list(logger.handlers):
        logger.removeHandler(handler)

    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter("[portmeta] %(levelname)s %(name)s: %(message)s"))
    logger.addHandler(handler)
    return logger


__all__ = ["configure_logging", "get_logger"]
