"""Logging setup for the API process."""

import logging
from typing import Optional

from config import LOG_LEVEL

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logging(level: Optional[str] = None) -> None:
    """Configure the root logger once for the whole process.

    Args:
        level: Optional level name overriding LOG_LEVEL.
    """
    logging.basicConfig(
        level=(level or LOG_LEVEL),
        format=LOG_FORMAT,
    )
    # pymongo is chatty at DEBUG (heartbeats, topology changes)
    logging.getLogger("pymongo").setLevel(logging.WARNING)
