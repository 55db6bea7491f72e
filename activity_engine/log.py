"""Logging setup for command line and demo entry points."""

from __future__ import annotations

import logging
from typing import Optional

from activity_engine.config import LOG_FORMAT, LOG_LEVEL


def setup_logging(level: Optional[str] = None) -> None:
    """Configure the root logger once; later calls only adjust the level."""

    resolved = (level or LOG_LEVEL).upper()
    root = logging.getLogger()
    if not root.handlers:
        logging.basicConfig(level=resolved, format=LOG_FORMAT)
    root.setLevel(resolved)
