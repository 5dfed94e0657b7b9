"""Logging configuration"""
import logging
import sys
from typing import Optional

from infrastructure.config import Settings, get_settings


def setup_logging(settings: Optional[Settings] = None, verbose: bool = True) -> None:
    """Configure application logging"""
    settings = settings or get_settings()

    if verbose:
        level = getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO)
    else:
        level = logging.WARNING

    logging.basicConfig(
        level=level,
        format=settings.LOG_FORMAT,
        handlers=[logging.StreamHandler(sys.stdout)]
    )
