"""Shared utility functions for econorm."""

import logging
from datetime import datetime
from pathlib import Path

import pytz


def setup_logger(
    name: str, log_file: Path | None = None, level: int | str | None = None
) -> logging.Logger:
    """Set up logger with console and file handlers.

    Calling this twice for the same name does not stack duplicate handlers.

    Args:
        name: Logger name
        log_file: Optional path to log file
        level: Logging level (int constant or string name like 'DEBUG', 'INFO').
            Defaults to ``Config.LOG_LEVEL``.

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(name)

    if level is None:
        from econorm.shared.config import Config

        level = Config.LOG_LEVEL

    # Convert string level to int if needed
    if isinstance(level, str):
        numeric_level = getattr(logging, level.upper(), logging.INFO)
        logger.setLevel(numeric_level)
    else:
        logger.setLevel(level)

    formatter = logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")

    # Console handler
    if not any(type(h) is logging.StreamHandler for h in logger.handlers):
        console_handler = logging.StreamHandler()
        console_handler.setFormatter(formatter)
        logger.addHandler(console_handler)

    # File handler
    if log_file:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        target = str(log_file.resolve())
        if not any(
            isinstance(h, logging.FileHandler) and h.baseFilename == target
            for h in logger.handlers
        ):
            file_handler = logging.FileHandler(log_file)
            file_handler.setFormatter(formatter)
            logger.addHandler(file_handler)

    return logger


def to_utc(dt: datetime, from_tz: str = "UTC") -> datetime:
    """Convert datetime to UTC."""
    if dt.tzinfo is None:
        dt = pytz.timezone(from_tz).localize(dt)
    return dt.astimezone(pytz.UTC)


def utc_now_iso() -> str:
    """Current UTC time as an ISO 8601 string."""
    return datetime.now(pytz.UTC).isoformat()


def parse_as_of(value: str | datetime | None) -> str | None:
    """Normalize an FX as-of marker to an ISO 8601 UTC string.

    Bare dates (``2024-01-31``) are kept as-is; datetimes are converted to UTC.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        return to_utc(value).isoformat()
    text = str(value).strip()
    if len(text) == 10:
        return text
    try:
        parsed = datetime.fromisoformat(text.replace("Z", "+00:00"))
    except ValueError:
        return text
    return to_utc(parsed).isoformat()
