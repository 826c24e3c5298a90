"""
Logging setup for the "meetdesk" logger tree.

Every module logs through a named child logger, e.g.
logging.getLogger("meetdesk.routers.google_auth"). configure_logging()
attaches one console handler to the "meetdesk" parent so all of them share
the same format.
"""

import logging
import sys

from meetdesk.core.config import settings


LOG_FORMAT = "[%(asctime)s] %(levelname)s [%(name)s] %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def configure_logging(level: str | None = None) -> logging.Logger:
    """
    Configure the root "meetdesk" logger.

    Safe to call more than once: the console handler is only added
    the first time.

    Args:
        level: Log level name (defaults to settings.LOG_LEVEL)

    Returns:
        The configured "meetdesk" logger
    """
    logger = logging.getLogger("meetdesk")
    logger.setLevel((level or settings.LOG_LEVEL).upper())

    if not logger.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))
        logger.addHandler(handler)

    return logger
