"""Logging configuration shared by the UI suite and the diagnostic scripts."""
from __future__ import annotations

import logging

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(debug: bool = False) -> None:
    """Install a single stream handler on the `gero_e2e` logger.

    Safe to call more than once (scripts and conftest both call it).
    """
    logger = logging.getLogger("gero_e2e")
    logger.setLevel(logging.DEBUG if debug else logging.INFO)
    if not any(getattr(h, "_gero_e2e", False) for h in logger.handlers):
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        handler._gero_e2e = True  # type: ignore[attr-defined]
        logger.addHandler(handler)
