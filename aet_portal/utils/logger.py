"""
Logging for the portal.

Every module asks get_logger(__name__) for its logger; the first call
installs the handlers on the root logger:
  - console, always
  - portal.log under LOG_DIR, rotated by size (skipped when LOG_DIR is empty)

Service modules tag their messages ([LICENSE], [VEHICLE], [ADMIN], ...), so
the file can be grepped per concern.
"""

import logging
import os
from logging.handlers import RotatingFileHandler

from aet_portal.config import settings

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Multipart parsing and the test client log every request part at INFO
QUIET_LOGGERS = ("multipart", "python_multipart", "httpx")

_configured = False


def _log_dir():
    """LOG_DIR as an absolute path; relative paths hang off the repo root."""
    if not settings.LOG_DIR:
        return None
    if os.path.isabs(settings.LOG_DIR):
        return settings.LOG_DIR
    root = os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))
    return os.path.join(root, settings.LOG_DIR)


def _build_handlers(level: str) -> list:
    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT)
    handlers = [logging.StreamHandler()]

    log_dir = _log_dir()
    if log_dir:
        os.makedirs(log_dir, exist_ok=True)
        handlers.append(RotatingFileHandler(
            filename=os.path.join(log_dir, "portal.log"),
            maxBytes=settings.LOG_FILE_MAX_BYTES,
            backupCount=settings.LOG_FILE_BACKUPS,
            encoding="utf-8",
        ))

    for handler in handlers:
        handler.setLevel(level)
        handler.setFormatter(formatter)
    return handlers


def _configure_root_logger():
    global _configured
    if _configured:
        return
    _configured = True

    level = settings.LOG_LEVEL.upper()
    root = logging.getLogger()
    root.setLevel(level)
    for handler in _build_handlers(level):
        root.addHandler(handler)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    _configure_root_logger()
    return logging.getLogger(name)
