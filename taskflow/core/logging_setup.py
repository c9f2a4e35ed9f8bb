from __future__ import annotations

import logging
import sys

_FORMAT = "%(asctime)s.%(msecs)03d %(levelname)s %(name)s: %(message)s"
_DATEFMT = "%Y-%m-%d %H:%M:%S"


def setup_logging(level: str | int = logging.INFO) -> None:
    """
    Configure the ``taskflow`` logger tree with a single stderr handler.

    Safe to call more than once (each app instance calls it); the previous
    handler installed here is replaced instead of stacking duplicates.
    """
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO

    logger = logging.getLogger("taskflow")
    logger.setLevel(level)

    for handler in list(logger.handlers):
        if getattr(handler, "_taskflow_handler", False):
            logger.removeHandler(handler)

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(fmt=_FORMAT, datefmt=_DATEFMT))
    handler._taskflow_handler = True  # type: ignore[attr-defined]
    logger.addHandler(handler)

    logging.captureWarnings(True)
