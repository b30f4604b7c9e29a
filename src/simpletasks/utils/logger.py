"""Application-wide logger writing to platformdirs user_log_dir."""

from __future__ import annotations

import logging
import logging.handlers
import re
from pathlib import Path

from platformdirs import user_log_dir

_APP_NAME = "simpletasks"
_LOG_FILE = "simpletasks.log"
_MAX_BYTES = 5 * 1024 * 1024  # 5 MB
_BACKUP_COUNT = 3

_SECRET_PATTERN = re.compile(
    r"""(?P<key>password|token)(?P<sep>['"]?\s*[=:]\s*)(?P<value>'[^']*'|"[^"]*"|[^\s,)}]+)""",
    re.IGNORECASE,
)
_BEARER_PATTERN = re.compile(r"Bearer\s+\S+")
REDACTED = "***"

_logger: logging.Logger | None = None


class RedactingFilter(logging.Filter):
    """Mask passwords and tokens before a record reaches the log file."""

    def filter(self, record: logging.LogRecord) -> bool:
        message = record.getMessage()
        redacted = _BEARER_PATTERN.sub(f"Bearer {REDACTED}", message)
        redacted = _SECRET_PATTERN.sub(rf"\g<key>\g<sep>{REDACTED}", redacted)
        if redacted != message:
            record.msg = redacted
            record.args = None
        return True


def get_logger(name: str | None = None) -> logging.Logger:
    """Return the application logger, initialising it on first call.

    With *name*, return the child logger for that module, e.g.
    ``get_logger(__name__)`` inside ``simpletasks.api.client`` yields the
    ``simpletasks.api.client`` logger writing to the same file.
    """
    global _logger
    if _logger is None:
        _logger = _create_logger()
    if name is None:
        return _logger
    return _logger.getChild(name.removeprefix(f"{_APP_NAME}."))


def _create_logger() -> logging.Logger:
    log_dir = Path(user_log_dir(_APP_NAME))
    log_dir.mkdir(parents=True, exist_ok=True)

    handler = logging.handlers.RotatingFileHandler(
        log_dir / _LOG_FILE,
        maxBytes=_MAX_BYTES,
        backupCount=_BACKUP_COUNT,
        encoding="utf-8",
    )
    handler.setFormatter(
        logging.Formatter(
            fmt="%(asctime)s %(levelname)-8s [%(name)s] %(message)s",
            datefmt="%Y-%m-%dT%H:%M:%S",
        )
    )
    handler.addFilter(RedactingFilter())

    logger = logging.getLogger(_APP_NAME)
    logger.setLevel(logging.DEBUG)
    if not logger.handlers:
        logger.addHandler(handler)
    logger.propagate = False
    return logger
