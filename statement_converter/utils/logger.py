"""Logging configuration and utilities for the statement converter."""

import logging
import os
from typing import Optional

from statement_converter.config.settings import LOG_LEVEL, LOG_FORMAT, LOGS_DIR


def setup_logger(
    name: str,
    log_file: Optional[str] = None,
    level: str = LOG_LEVEL,
    logs_dir: str = LOGS_DIR,
    log_format: str = LOG_FORMAT,
    console_output: bool = True
) -> logging.Logger:
    """Set up a logger with console and file handlers.

    Args:
        name: Logger name.
        log_file: Optional log file name. If None, uses logger name.
        level: Logging level.
        logs_dir: Directory that receives the log file.
        log_format: Format string for both handlers.
        console_output: Whether to attach a console handler.

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

    if console_output:
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


def get_logger(name: str) -> logging.Logger:
    """Get a logger instance.

    Args:
        name: Logger name.

    Returns:
        Logger instance.
    """
    return logging.getLogger(name)


class ConversionLogger:
    """Logger that prefixes every line with a conversion request id."""

    def __init__(self, request_id: str, logger: Optional[logging.Logger] = None) -> None:
        """Initialize conversion logger.

        Args:
            request_id: Unique identifier for the conversion request.
            logger: Logger to write to. Defaults to the ``conversion`` logger.
        """
        self.request_id = request_id
        self.logger = logger or get_logger("conversion")

    def log_start(self, filename: str, size: int) -> None:
        self.logger.info(f"Conversion {self.request_id} started for {filename} ({size} bytes)")

    def log_progress(self, message: str) -> None:
        self.logger.info(f"Conversion {self.request_id}: {message}")

    def log_error(self, error: Exception, context: str = "") -> None:
        """Log a conversion error with traceback.

        Args:
            error: Exception that occurred.
            context: Additional context information.
        """
        self.logger.error(
            f"Conversion {self.request_id}: Error in {context}: {error}",
            exc_info=True,
        )

    def log_completion(self, filename: str, transaction_count: int) -> None:
        self.logger.info(
            f"Conversion {self.request_id}: Completed {filename} "
            f"with {transaction_count} transactions"
        )
