from __future__ import annotations

import logging
import os

LOG_FORMAT = "%(asctime)s [%(name)s] %(levelname)s: %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
LOG_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG")


def log_level_name() -> str:
    """Level name from AGENTWALLET_LOG_LEVEL, INFO when unset or unknown."""
    name = os.getenv("AGENTWALLET_LOG_LEVEL", "INFO").strip().upper()
    return name if name in LOG_LEVELS else "INFO"


def configure_logging() -> None:
    logging.basicConfig(
        level=getattr(logging, log_level_name()),
        format=LOG_FORMAT,
        datefmt=LOG_DATE_FORMAT,
    )
