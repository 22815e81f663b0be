"""
Logging setup for the BizDesk backend.

Rules:
- NEVER log auth tokens, APP_KEY or cookie values (encrypted or not)
- Log high-level events and record identifiers (e.g., "Order 12 completed")
- Payment amounts and student contact numbers stay out of INFO logs
"""

import logging
from typing import Optional

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Client libraries that log every request (and its headers) at INFO/DEBUG
NOISY_LOGGERS = ("httpx", "httpcore", "hpack")


def resolve_level(level_name: Optional[str]) -> int:
    """Map a LOG_LEVEL name to a logging level, falling back to INFO."""
    level = logging.getLevelName((level_name or "").upper())
    return level if isinstance(level, int) else logging.INFO


def configure_logging(level_name: Optional[str] = "INFO") -> int:
    """
    Configure root logging once for the process.

    Third-party HTTP loggers are held at WARNING so request headers
    (Authorization, Cookie) never reach the log output.

    Returns:
        The resolved root level
    """
    level = resolve_level(level_name)
    logging.basicConfig(level=level, format=LOG_FORMAT, datefmt=DATE_FORMAT)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))

    return level


def get_logger(name: str, level: Optional[int] = None) -> logging.Logger:
    """
    Get a logger for the specified module.

    Usage:
        >>> from bizdesk.utils.logging import get_logger
        >>> logger = get_logger(__name__)
        >>> logger.info("Department created")
    """
    logger = logging.getLogger(name)
    if level is not None:
        logger.setLevel(level)
    return logger
