"""Logging helpers."""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"


def parse_level(level: str) -> int:
    """Translate a string log level into logging constant."""
    value = getattr(logging, level.upper(), None)
    if not isinstance(value, int):
        raise ValueError(f"Unknown log level: {level}")
    return value


def setup_logging(level: str = "INFO", log_file: Optional[Path] = None) -> None:
    """Configure the root logger used by the board stores, workflow and CLI.

    Messages go to stderr in LOG_FORMAT, plus log_file when given. Storage
    conditions (corrupt collection, failed writes) are logged at ERROR/WARNING.
    """
    logging.basicConfig(level=parse_level(level), format=LOG_FORMAT)
    if log_file:
        handler = logging.FileHandler(log_file)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logging.getLogger().addHandler(handler)
