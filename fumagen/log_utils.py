"""
log_utils.py - Logging setup with icons

Library modules log through ``logging.getLogger(__name__)``; the CLI calls
``setup_logging`` once so records come out message-only with a level icon.
"""

import logging

from fumagen.icons import icons


# Message-only; no per-line timestamps
LOG_FORMAT = "%(message)s"


def _level_icon(levelno: int) -> str:
    if levelno >= logging.ERROR:
        return icons.ERROR
    if levelno >= logging.WARNING:
        return icons.WARNING
    if levelno >= logging.INFO:
        return icons.INFO
    return icons.DEBUG


class IconLogFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        base = super().format(record)
        return f"{_level_icon(record.levelno)} {base}"


def setup_logging(verbosity: int) -> None:
    level = logging.WARNING
    if verbosity == 1:
        level = logging.INFO
    elif verbosity >= 2:
        level = logging.DEBUG

    handler = logging.StreamHandler()
    handler.setFormatter(IconLogFormatter(LOG_FORMAT))

    root = logging.getLogger()
    root.handlers.clear()
    root.setLevel(level)
    root.addHandler(handler)
