"""Utilities shared by pdfsuitex tools."""

from __future__ import annotations

import hashlib
import logging
from datetime import datetime, timezone


def get_logger(name: str) -> logging.Logger:
    logger = logging.getLogger(name)
    if not logger.handlers:
        handler = logging.StreamHandler()
        formatter = logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")
        handler.setFormatter(formatter)
        logger.addHandler(handler)
        logger.propagate = False
    return logger


def content_id(prefix: str, data: bytes) -> str:
    """Return a stable identifier derived from ``data``."""

    return f"{prefix}-{hashlib.sha1(data).hexdigest()[:16]}"


def pdf_date(value: datetime) -> str:
    """Format ``value`` as a UTC PDF date string (``D:YYYYMMDDHHmmSSZ``).

    Aware datetimes are converted to UTC; naive datetimes are taken to be UTC
    already.
    """

    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc)
    return value.strftime("D:%Y%m%d%H%M%SZ")


def configure_logging(level: int | str, name: str = "pdfsuitex") -> logging.Logger:
    """Set the level of the package logger every ``pdfsuitex.*`` logger inherits."""

    logger = logging.getLogger(name)
    logger.setLevel(level)
    return logger
