"""Logging configuration for the provider_kubeadm package."""
import logging
import sys
from typing import Optional

from .config import Config


def setup_logger(
    name: str = "provider_kubeadm",
    log_file: Optional[str] = None,
    debug: bool = False,
) -> logging.Logger:
    """
    Set up the provider logger writing to the provider log file.

    Stdout is the response channel to the host, so nothing is logged there.

    Args:
        name: The name of the logger
        log_file: Path of the log file (default: Config.LOG_FILE)
        debug: Also log to stderr at DEBUG level

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(name)
    level = logging.DEBUG if debug else logging.getLevelName(Config.LOG_LEVEL)
    logger.setLevel(level)

    # Don't add handlers if they're already configured
    if logger.handlers:
        return logger

    formatter = logging.Formatter(Config.LOG_FORMAT, datefmt='%Y-%m-%d %H:%M:%S')

    if debug:
        stream_handler = logging.StreamHandler(sys.stderr)
        stream_handler.setFormatter(formatter)
        logger.addHandler(stream_handler)

    path = log_file or Config.LOG_FILE
    try:
        file_handler = logging.FileHandler(path)
    except OSError as e:
        fallback = logging.StreamHandler(sys.stderr)
        fallback.setFormatter(formatter)
        if not debug:
            logger.addHandler(fallback)
        logger.warning(f"Unable to open log file {path}: {e}")
        return logger

    file_handler.setFormatter(formatter)
    logger.addHandler(file_handler)
    return logger
