"""Logging configuration and setup."""

import sys

from loguru import logger

from dataexport.core.config import settings


def setup_logging() -> None:
    """Configures Loguru logging for console and optional file output.

    This function removes the default handler and sets up a colorized console
    output to stderr. When ``LOG_DIR`` is configured, a rotated/compressed log
    file is added as well, with async (enqueued) writes.
    """
    logger.remove()  # Remove default handler

    # Console Handler (Stderr)
    logger.add(
        sys.stderr,
        level=settings.LOG_LEVEL,
        format="<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | <cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>",
    )

    if settings.LOG_DIR is None:
        return

    # File Handler (Rotated & Compressed)
    log_file = settings.LOG_DIR / "export_data.log"
    log_file.parent.mkdir(parents=True, exist_ok=True)
    logger.add(
        str(log_file),
        rotation=settings.LOG_ROTATION,
        retention=settings.LOG_RETENTION,
        compression="zip",
        level=settings.LOG_LEVEL,
        enqueue=True,  # Async logging
        backtrace=True,
        diagnose=False,  # Locals may hold the password
        format="{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function}:{line} - {message}",
    )

    logger.debug(f"File logging enabled: {log_file}")
