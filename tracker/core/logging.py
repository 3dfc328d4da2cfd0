"""Logging configuration.

One stdout handler on the root logger; every part of the application logs
through a channel logger named ``tracker.<channel>`` (http, lessons, history,
cli) so output can be filtered by source.
"""

import logging
import sys

LOG_FORMAT = "%(asctime)s %(levelname)-8s %(name)s %(message)s"

CHANNELS = ("http", "lessons", "history", "cli")


def setup_logging(level: str = "INFO") -> logging.Logger:
    """Configure the root logger and the channel loggers."""
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))

    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, level.upper(), logging.INFO))
    root_logger.handlers = [handler]

    for channel in CHANNELS:
        logging.getLogger(f"tracker.{channel}").setLevel(root_logger.level)

    return root_logger


def get_logger(channel: str) -> logging.Logger:
    """Get a channel-specific logger."""
    return logging.getLogger(f"tracker.{channel}")
