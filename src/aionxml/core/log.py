"""Root logger setup driven by AppSettings.log_level."""

from __future__ import annotations

import logging
import sys

from aionxml.core.config import AppSettings

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(settings: AppSettings | None = None) -> None:
    """Attach a single stdout handler to the ``aionxml`` logger.

    Safe to call more than once; later calls only adjust the level.
    """
    if settings is None:
        settings = AppSettings()

    logger = logging.getLogger("aionxml")
    logger.setLevel(settings.log_level.upper())
    if logger.handlers:
        return

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(handler)
