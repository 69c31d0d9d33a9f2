"""
Logging setup for command-line use.

Library modules only create `logging.getLogger(__name__)` loggers; the entry
points call `configure_logging` once to attach a stderr handler.
"""

import logging
import sys

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(level: str = "INFO") -> None:
    """
    Configures the root logger to write to stderr.

    Args:
        level (str): Level name (e.g. "DEBUG", "INFO", "WARNING").

    Raises:
        ValueError: If the level name is unknown.
    """
    numeric = logging.getLevelName(level.upper())
    if not isinstance(numeric, int):
        raise ValueError(f"Unknown log level: {level}")

    logging.basicConfig(
        level=numeric,
        format=LOG_FORMAT,
        stream=sys.stderr,
        force=True,
    )
