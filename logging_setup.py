# logging_setup.py

from __future__ import annotations

import logging
import os
import sys

# third-party loggers that only matter when something goes wrong
_QUIET_LOGGERS = ("sqlalchemy.engine", "urllib3", "passlib", "httpx")


def setup_logging(level: str | int | None = None) -> None:
    """
    Configure the root logger with a single stderr handler.

    Level comes from the argument, then LOG_LEVEL, then INFO.
    Call this ONCE, before the app starts handling requests.
    """
    if level is None:
        level = os.getenv("LOG_LEVEL", "INFO").upper()

    root = logging.getLogger()
    root.setLevel(level)

    # Remove any pre-existing handlers to avoid duplicates.
    for h in list(root.handlers):
        root.removeHandler(h)

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(
        logging.Formatter(
            fmt="%(asctime)s %(levelname)s %(name)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
    )
    root.addHandler(handler)

    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    # Route warnings.warn(...) into logging as 'py.warnings'
    logging.captureWarnings(True)
