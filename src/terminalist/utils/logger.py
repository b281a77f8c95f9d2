"""Application-wide logger writing to platformdirs user_log_dir.

Modules log through ``logging.getLogger(__name__)``; those loggers are
children of the ``terminalist`` logger configured here. Task content is user
data and should reach the log only through ``redact_user_text_for_log``.
"""

from __future__ import annotations

import logging
import logging.handlers
import unicodedata
from pathlib import Path

from platformdirs import user_log_dir

_APP_NAME = "terminalist"
_LOG_FILE = "terminalist.log"
_MAX_BYTES = 5 * 1024 * 1024  # 5 MB
_BACKUP_COUNT = 3

_FORMATTER = logging.Formatter(
    fmt="%(asctime)s %(levelname)-8s [%(name)s] %(message)s",
    datefmt="%Y-%m-%dT%H:%M:%S",
)

_logger: logging.Logger | None = None


def get_log_file_path() -> Path:
    return Path(user_log_dir(_APP_NAME)) / _LOG_FILE


def get_logger(level: str | int = logging.DEBUG) -> logging.Logger:
    """Return the singleton application logger, initialising it on first call.

    Args:
        level: Level applied on first initialisation
    """
    global _logger
    if _logger is not None:
        return _logger

    log_path = get_log_file_path()
    log_path.parent.mkdir(parents=True, exist_ok=True)

    handler = logging.handlers.RotatingFileHandler(
        log_path,
        maxBytes=_MAX_BYTES,
        backupCount=_BACKUP_COUNT,
        encoding="utf-8",
    )
    handler.setFormatter(_FORMATTER)

    logger = logging.getLogger(_APP_NAME)
    logger.setLevel(level)
    if not logger.handlers:
        logger.addHandler(handler)
    logger.propagate = False

    _logger = logger
    return _logger


def sanitize_for_log(value: str) -> str:
    """Escape control characters so one record stays on one line.

    Example:
        "a\\nb" -> "a\\u{000A}b"
    """
    return "".join(
        f"\\u{{{ord(ch):04X}}}" if unicodedata.category(ch) == "Cc" else ch
        for ch in value
    )


def redact_user_text_for_log(value: str) -> str:
    """Replace user-entered text with its length."""
    return f"[redacted len={len(value)}]"
