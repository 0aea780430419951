"""
Root logging for the CLI and the web trigger.

Everything goes to stdout so the web trigger can relay a child crawl line by line.
"""

import logging
import sys

_QUIET_LOGGERS = ("playwright", "asyncio", "uvicorn.access")


def setup_logging(level: int | None = None) -> logging.Logger:
    """Send crawler logs to stdout at `level` and return the package logger."""
    if level is None:
        level = logging.INFO

    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler(sys.stdout)],
    )

    logger = logging.getLogger("linkedin_crawler")
    logger.setLevel(level)

    # Keep the progress lines readable
    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    return logger
