"""Logging configuration for applications embedding the aggregation layer."""

import logging
from typing import Optional

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(level: Optional[str] = None, fmt: str = LOG_FORMAT) -> logging.Logger:
    """
    Configure the ``risk_aggregation`` logger hierarchy.

    Args:
        level: Level name; defaults to INFO
        fmt: Log record format

    Returns:
        The package root logger
    """
    package_logger = logging.getLogger("risk_aggregation")
    package_logger.setLevel(getattr(logging, (level or "INFO").upper(), logging.INFO))

    if not package_logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(fmt))
        package_logger.addHandler(handler)

    return package_logger
