"""Console logging for the shop backend.

Each named logger gets its own :class:`RichHandler` and does not propagate,
so records are emitted once even when the root logger is configured.
"""
import logging
import os

from rich.logging import RichHandler

_FORMAT = "[%(name)s] %(message)s"


def _level() -> int:
    return logging.DEBUG if os.getenv("DEBUG") else logging.INFO


def get_logger(name=None) -> logging.Logger:
    logger = logging.getLogger(name or "shop")
    level = _level()
    logger.setLevel(level)

    if not any(isinstance(h, RichHandler) for h in logger.handlers):
        handler = RichHandler(
            show_time=True,
            show_path=False,
            rich_tracebacks=True,
            log_time_format="[%X]",
        )
        handler.setFormatter(logging.Formatter(_FORMAT))
        handler.setLevel(level)
        logger.addHandler(handler)
        logger.propagate = False

    return logger
