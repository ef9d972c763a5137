"""Logging helpers shared by the CLI, the service and the evaluation pipeline."""

from __future__ import annotations

import logging
from pathlib import Path

_LOGGER_NAME = "hackeval"
_NOISY_LIBRARIES = ("httpx", "httpcore")


def get_logger(name: str | None = None) -> logging.Logger:
    """Return a logger nested under ``hackeval`` (``hackeval.<name>``)."""
    full_name = f"{_LOGGER_NAME}.{name}" if name else _LOGGER_NAME
    return logging.getLogger(full_name)


def configure_logging(
    *,
    verbose: bool = False,
    log_file: Path | None = None,
    level: str | None = None,
) -> logging.Logger:
    """Install console (and optional file) handlers on the hackeval logger.

    ``level`` accepts a logging level name from configuration and wins over
    ``verbose``. Per-request logs from the HTTP client are kept at WARNING
    unless verbose output was requested.
    """
    resolved = _resolve_level(level, verbose)
    logger = logging.getLogger(_LOGGER_NAME)
    logger.setLevel(resolved)
    logger.propagate = False

    # Repeated CLI invocations in one process must not stack handlers.
    for handler in list(logger.handlers):
        logger.removeHandler(handler)

    console = logging.StreamHandler()
    console.setLevel(resolved)
    console.setFormatter(logging.Formatter("[hackeval] %(levelname)s %(message)s"))
    logger.addHandler(console)

    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        sink = logging.FileHandler(log_file, encoding="utf-8")
        sink.setLevel(resolved)
        sink.setFormatter(
            logging.Formatter("%(asctime)s %(levelname)s %(name)s [%(threadName)s]: %(message)s")
        )
        logger.addHandler(sink)

    for library in _NOISY_LIBRARIES:
        logging.getLogger(library).setLevel(logging.DEBUG if verbose else logging.WARNING)

    return logger


def _resolve_level(level: str | None, verbose: bool) -> int:
    if level:
        value = logging.getLevelName(level.strip().upper())
        if isinstance(value, int):
            return value
    return logging.DEBUG if verbose else logging.INFO


__all__ = ["configure_logging", "get_logger"]
