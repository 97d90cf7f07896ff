"""Logging configuration and utilities for the statement summary mailer."""

import logging
import os
from typing import Optional

from statement_summary.config.settings import LOG_LEVEL, LOG_FORMAT, LOGS_DIR

PACKAGE_LOGGER_NAME = "statement_summary"


def setup_logger(
    name: str,
    log_file: Optional[str] = None,
    level: str = LOG_LEVEL,
    logs_dir: str = LOGS_DIR,
    log_format: str = LOG_FORMAT
) -> logging.Logger:
    """Set up a logger with console and file handlers.

    Args:
        name: Logger name.
        log_file: Optional log file name. If None, uses logger name.
        level: Logging level.
        logs_dir: Directory that receives the log file.
        log_format: Format string for both handlers.

    Returns:
        Configured logger instance.
    """
    logger = logging.getLogger(name)
    logger.setLevel(getattr(logging, level.upper(), logging.INFO))

    # Clear existing handlers to avoid duplicates
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    formatter = logging.Formatter(log_format)

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if log_file is None:
        log_file = f"{name}.log"

    os.makedirs(logs_dir, exist_ok=True)
    file_handler = logging.FileHandler(os.path.join(logs_dir, log_file))
    file_handler.setFormatter(formatter)
    logger.addHandler(file_handler)

    return logger


def configure_logging(settings) -> logging.Logger:
    """Attach handlers to the package root logger from settings.

    Module loggers obtained through ``get_logger(__name__)`` propagate to it.

    Args:
        settings: Settings instance providing level, format and logs dir.

    Returns:
        The configured package logger.
    """
    return setup_logger(
        PACKAGE_LOGGER_NAME,
        log_file="statement_summary.log",
        level=settings.get_log_level(),
        logs_dir=settings.logs_dir,
        log_format=settings.log_format,
    )


def get_logger(name: str) -> logging.Logger:
    """Get a logger instance.

    Args:
        name: Logger name.

    Returns:
        Logger instance.
    """
    return logging.getLogger(name)


class ProcessingLogger:
    """Logger for a single unit of work (one statement file or object)."""

    def __init__(self, unit_id: str, logger: Optional[logging.Logger] = None) -> None:
        """Initialize processing logger.

        Args:
            unit_id: Identifier of the unit being processed (path, object key or task id).
            logger: Optional logger to write to.
        """
        self.unit_id = unit_id
        self.logger = logger or get_logger(f"{PACKAGE_LOGGER_NAME}.processing")

    def log_start(self, source: str) -> None:
        """Log processing start.

        Args:
            source: Description of the statement source.
        """
        self.logger.info(f"Started processing {self.unit_id} from: {source}")

    def log_progress(self, message: str) -> None:
        """Log processing progress.

        Args:
            message: Progress message.
        """
        self.logger.info(f"{self.unit_id}: {message}")

    def log_error(self, error: Exception, context: str = "") -> None:
        """Log processing error.

        Args:
            error: Exception that occurred.
            context: Additional context information.
        """
        self.logger.error(f"{self.unit_id}: Error in {context}: {str(error)}")

    def log_completion(self, destination: str) -> None:
        """Log processing completion.

        Args:
            destination: Where the summary went (recipient address or stdout).
        """
        self.logger.info(f"{self.unit_id}: Completed successfully. Summary delivered to {destination}")
