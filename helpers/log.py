"""Logging setup shared by the CLI entry points."""

import logging

DEFAULT_LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s | %(message)s"


def configure_logging(level: int | str = logging.WARNING) -> None:
    """
    Configure the root logger once. Log records go to stderr so that the
    report lines on stdout stay machine-readable.
    """
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.WARNING

    root = logging.getLogger()
    if not root.handlers:
        logging.basicConfig(level=level, format=DEFAULT_LOG_FORMAT)
    else:
        root.setLevel(level)
