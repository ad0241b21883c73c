"""
Logging setup for the Taskboard backend.

Modules log through ``logging.getLogger(__name__)``; this only installs
the root handler once at startup.
"""

import logging

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(level: str = "INFO") -> None:
    """
    Configure the root logger.

    Leaves existing root handlers alone (uvicorn or a test runner may
    already have installed some) and only adjusts the level then.

    Args:
        level: Log level name (e.g. "DEBUG", "INFO")
    """
    logging.basicConfig(format=LOG_FORMAT)
    logging.getLogger().setLevel(getattr(logging, level.upper(), logging.INFO))
