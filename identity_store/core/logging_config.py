"""
Logging setup for applications hosting the identity stores.
"""
import logging
from typing import Optional

from identity_store.config import get_settings


def configure_logging(level: Optional[str] = None) -> None:
    """
    Configure the root logger.

    Args:
        level: Level name (defaults to the LOG_LEVEL setting)
    """
    if level is None:
        level = get_settings().log_level

    logging.basicConfig(
        level=getattr(logging, level.upper()),
        format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
