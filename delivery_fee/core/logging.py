from __future__ import annotations

import logging
import sys

from pythonjsonlogger.json import JsonFormatter

ROOT_LOGGER = "delivery_fee"


def configure_logging(level: str = "INFO") -> logging.Logger:
    """Attach a JSON stdout handler to the package logger.

    Idempotent: calling it again only updates the level.
    """
    logger = logging.getLogger(ROOT_LOGGER)
    logger.setLevel(getattr(logging, level.upper()))

    if not logger.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(
            JsonFormatter(
                fmt="%(asctime)s %(name)s %(levelname)s %(message)s",
                datefmt="%Y-%m-%d %H:%M:%S",
            )
        )
        logger.addHandler(handler)
        logger.propagate = False

    logging.getLogger("httpx").setLevel(logging.WARNING)
    return logger
