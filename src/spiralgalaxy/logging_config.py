"""
Logging Configuration
Sets up the package logger for the application.

VTK and PyVista report rendering problems as Python warnings; they are routed
into the same handlers so they show up in the console dock and the log file.
"""
import logging
import sys
from typing import Optional

PACKAGE_LOGGER = "spiralgalaxy"
LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
DATE_FORMAT = '%H:%M:%S'


def setup_logging(
    level: int = logging.INFO,
    log_file: Optional[str] = None,
    capture_warnings: bool = True,
) -> logging.Logger:
    """
    Configures the logger for the 'spiralgalaxy' namespace.

    Args:
        level: Logging level (e.g. logging.DEBUG, logging.INFO)
        log_file: Optional path to save logs to a file.
        capture_warnings: Route ``warnings.warn`` output through logging.

    Returns:
        The package logger.
    """
    logger = logging.getLogger(PACKAGE_LOGGER)
    logger.setLevel(level)

    # Calling twice must not duplicate output
    if logger.hasHandlers():
        logger.handlers.clear()

    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)
    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    if log_file:
        handlers.append(logging.FileHandler(log_file, mode='w', encoding='utf-8'))

    for handler in handlers:
        handler.setLevel(level)
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    if capture_warnings:
        logging.captureWarnings(True)
        warnings_logger = logging.getLogger("py.warnings")
        warnings_logger.handlers.clear()
        for handler in handlers:
            warnings_logger.addHandler(handler)

    logger.info(f"Logging initialized (level {logging.getLevelName(level)}).")
    return logger
