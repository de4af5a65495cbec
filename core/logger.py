"""
Service Logger

Configures a named logger for a service from LoggingConfig.
"""

import logging
import sys
from typing import Optional

from core.config.logging_config import LoggingConfig


def setup_service_logger(
    service_name: str,
    level: Optional[str] = None,
    config: Optional[LoggingConfig] = None,
) -> logging.Logger:
    """
    Create (or reuse) a logger for a service.

    Args:
        service_name: Logger name, usually the service name
        level: Optional level override (DEBUG, INFO, ...)
        config: Optional logging config (loaded from env if not provided)

    Returns:
        Configured logger
    """
    if config is None:
        config = LoggingConfig.from_env()

    logger = logging.getLogger(service_name)
    logger.setLevel((level or config.log_level).upper())

    # Handlers are attached once per logger name
    if logger.handlers:
        return logger

    formatter = logging.Formatter(config.log_format)

    if config.enable_console:
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setFormatter(formatter)
        logger.addHandler(console_handler)

    if config.log_file:
        file_handler = logging.FileHandler(config.log_file)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    logger.propagate = False
    return logger


__all__ = ["setup_service_logger"]
