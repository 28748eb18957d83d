"""Process logging configuration."""

from __future__ import annotations

import logging

LOG_FORMAT = "%(asctime)s %(levelname)-7s %(name)s: %(message)s"


def configure_logging(level: str = "INFO") -> None:
    """Configure the root logger; a no-op for handlers if already configured."""
    logging.basicConfig(level=level.upper(), format=LOG_FORMAT)
