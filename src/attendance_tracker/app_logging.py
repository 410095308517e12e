"""Logging configuration helpers."""

import logging

LOG_FORMAT = "%(asctime)s %(levelname)s [attendance] %(name)s: %(message)s"


def configure_logging(level: str = "INFO") -> None:
    """Route attendance_tracker logs to one stream handler at ``level``."""
    logger = logging.getLogger("attendance_tracker")
    logger.setLevel(level.upper())
    if logger.handlers:
        return
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(handler)
    logger.propagate = False
