"""
Logging setup for the snpeff-extract command.

Library modules only create ``logging.getLogger(__name__)`` loggers under the
``snpeff_extract`` namespace. The CLI calls ``setup_logging`` once per run to
attach handlers to that namespace; the root logger is left alone so the
package can be embedded in other tools without hijacking their output.

Step announcements go through ``get_progress_logger``, which always reaches
the console and, when a log file is configured, the log file as well.
"""

import logging
from datetime import datetime
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional, Union

PACKAGE_LOGGER = "snpeff_extract"
PROGRESS_LOGGER = "snpeff_extract.progress"

FILE_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"
MAX_LOG_BYTES = 5 * 1024 * 1024
LOG_BACKUPS = 3


def setup_logging(
    log_dir: Optional[Union[str, Path]] = None,
    console_level: int = logging.WARNING,
) -> Optional[Path]:
    """
    Attach a console handler to the package logger and, with ``log_dir``,
    a rotating DEBUG-level log file.

    Calling it again replaces the handlers of the previous call.

    Args:
        log_dir: Directory for the run's log file. None keeps logs on the
            console only.
        console_level: Minimum level shown on the console.

    Returns:
        Path of the log file, or None when no file is written.
    """
    reset_logging()

    package_logger = logging.getLogger(PACKAGE_LOGGER)
    package_logger.setLevel(logging.DEBUG)
    package_logger.propagate = False

    console_handler = logging.StreamHandler()
    console_handler.setLevel(console_level)
    console_handler.setFormatter(logging.Formatter("%(message)s"))
    package_logger.addHandler(console_handler)

    progress = get_progress_logger()

    if log_dir is None:
        return None

    log_path = Path(log_dir)
    log_path.mkdir(parents=True, exist_ok=True)
    log_file = log_path / f"snpeff_extract_{datetime.now():%Y%m%d_%H%M%S}.log"

    file_handler = RotatingFileHandler(log_file, maxBytes=MAX_LOG_BYTES, backupCount=LOG_BACKUPS)
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(logging.Formatter(FILE_FORMAT))
    package_logger.addHandler(file_handler)
    # Progress does not propagate, so it needs the file handler too
    progress.addHandler(file_handler)

    return log_file


def get_progress_logger() -> logging.Logger:
    """Logger for step announcements, printed regardless of console level."""
    logger = logging.getLogger(PROGRESS_LOGGER)

    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter("%(message)s"))
        logger.addHandler(handler)
        logger.setLevel(logging.INFO)
        logger.propagate = False

    return logger


def reset_logging() -> None:
    """Close and detach every handler set up by this module."""
    closed = set()
    for name in (PROGRESS_LOGGER, PACKAGE_LOGGER):
        logger = logging.getLogger(name)
        for handler in list(logger.handlers):
            if id(handler) not in closed:
                handler.close()
                closed.add(id(handler))
            logger.removeHandler(handler)
    logging.getLogger(PACKAGE_LOGGER).propagate = True
