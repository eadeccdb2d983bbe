"""
Unified Logging Configuration

This module sets up a centralized logging system for the whole sampler.
All modules should import and use the logger from this module instead of
using print() statements.

Usage:
    from core.logging import logger, get_logger

    logger.info("Sampling started")
    log = get_logger(__name__)
    log.debug("Received frame")

Log Levels (from most to least verbose):
    DEBUG    - Per-frame diagnostics (e.g., "Dropped ticker for XRPUSDT")
    INFO     - Lifecycle messages (e.g., "Connected to okx")
    WARNING  - Suspicious but tolerated situations (e.g., empty sampling window)
    ERROR    - Fatal feed failures reported once at the top level

Configuration:
    Log level is controlled by the LOG_LEVEL setting in .env file
    (or the --log-level command line override).
"""

import logging
import sys
from typing import Optional


ROOT_LOGGER_NAME = "wsaggregator"


def setup_logging(
    log_level: str = "INFO",
    log_format: Optional[str] = None,
    include_timestamp: bool = True,
    include_module: bool = True
) -> logging.Logger:
    """
    Configure and return the application logger.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_format: Custom log format string (uses default if None)
        include_timestamp: Include timestamp in log messages
        include_module: Include logger name in log messages

    Returns:
        logging.Logger: Configured logger instance

    Example:
        >>> logger = setup_logging(log_level="DEBUG")
        >>> logger.info("Sampling started")
        2024-01-01 12:00:00 [INFO] wsaggregator: Sampling started
    """
    if log_format is None:
        format_parts = []

        if include_timestamp:
            format_parts.append("%(asctime)s")

        format_parts.append("[%(levelname)s]")

        if include_module:
            format_parts.append("%(name)s:")

        format_parts.append("%(message)s")

        log_format = " ".join(format_parts)

    level = getattr(logging, log_level.upper(), logging.INFO)

    logging.basicConfig(
        level=level,
        format=log_format,
        datefmt="%Y-%m-%d %H:%M:%S",
        stream=sys.stdout,
        force=True  # Override any existing configuration
    )

    logger = logging.getLogger(ROOT_LOGGER_NAME)
    logger.setLevel(level)

    return logger


# ============================================
# Initialize Logger with Settings
# ============================================

# Try to load log level from settings, fallback to INFO
try:
    from core.config import settings
    log_level = settings.log_level if hasattr(settings, "log_level") else "INFO"
except ImportError:
    log_level = "INFO"

logger = setup_logging(log_level=log_level)


# ============================================
# Convenience Functions
# ============================================

def get_logger(name: str) -> logging.Logger:
    """
    Get a logger for a specific module or component.

    Args:
        name: Name for the logger (typically __name__)

    Returns:
        logging.Logger: Child of the application logger

    Example:
        >>> log = get_logger("services.sampling_loop")
        >>> log.name
        'wsaggregator.services.sampling_loop'
    """
    return logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")


def set_log_level(level: str) -> None:
    """
    Change the log level at runtime.

    Args:
        level: New log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    """
    logger.setLevel(getattr(logging, level.upper(), logging.INFO))
    logging.getLogger().setLevel(getattr(logging, level.upper(), logging.INFO))


# ============================================
# Log Helper Functions
# ============================================

def log_websocket_event(exchange: str, event: str, details: Optional[str] = None) -> None:
    """
    Log a WebSocket lifecycle event with consistent formatting.

    Args:
        exchange: Exchange display name
        event: Event type (e.g., "connected", "subscribed", "closed", "error")
        details: Additional details (optional)

    Example:
        >>> log_websocket_event("binance", "connected", "wss://stream.binance.com:9443/ws/btcusdt@ticker")
        [INFO] WebSocket: binance connected | wss://stream.binance.com:9443/ws/btcusdt@ticker

        >>> log_websocket_event("okx", "error", "Connection refused")
        [ERROR] WebSocket: okx error | Connection refused
    """
    details_str = f" | {details}" if details else ""

    level = logging.ERROR if event == "error" else logging.INFO
    logger.log(level, f"WebSocket: {exchange} {event}{details_str}")


logger.debug("Logging system initialized")
