"""Logging configuration for todox."""

import logging
import sys
from datetime import UTC, datetime
from pathlib import Path

LOGGER_NAME = "todox"
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def setup_logging(verbose: int = 0, log_file: Path | None = None) -> None:
    """Configure the ``todox`` logger from the CLI verbosity and log file.

    Nothing is logged unless ``verbose`` is set or a log file is given.
    Calling this again replaces the handlers of the previous call, so running
    several commands in one process never duplicates log lines.

    Args:
        verbose: Verbosity level (0=off, 1=INFO, 2+=DEBUG)
        log_file: Optional path to write logs to file
    """
    logger = logging.getLogger(LOGGER_NAME)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    if verbose == 0 and log_file is None:
        return

    level = logging.DEBUG if verbose >= 2 else logging.INFO
    logger.setLevel(level)
    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)

    handlers: list[logging.Handler] = []
    if verbose > 0:
        handlers.append(logging.StreamHandler(sys.stderr))
    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_file, encoding="utf-8"))

    for handler in handlers:
        handler.setLevel(level)
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    timestamp = datetime.now(UTC).strftime("%Y-%m-%d %H:%M:%S UTC")
    logger.info("")
    logger.info("=" * 60)
    logger.info("todox starting | %s | level=%s", timestamp, logging.getLevelName(level))
    logger.info("=" * 60)
