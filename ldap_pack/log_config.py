"""Logging setup for the pack.

Always logs to stdout. When a log directory is configured, also writes
`ldap_pack.log` there, rotated at midnight (UTC) and kept for
`retention_days` files.
"""
from __future__ import annotations

import logging
import os
from logging.handlers import TimedRotatingFileHandler

_LOG_FORMAT = "%(asctime)s [%(levelname)-8s] %(name)s: %(message)s"
_LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
_LOG_FILE_NAME = "ldap_pack.log"
_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

# Loggers that flood DEBUG output with wire-level detail.
_NOISY_LOGGERS = ("ldap3", "uvicorn.access")

_installed: list[logging.Handler] = []


def _parse_level(level: str) -> tuple[str, int]:
    name = (level or "").strip().upper()
    if name not in _LEVELS:
        name = "INFO"
    return name, logging.getLevelName(name)


def _rotating_file(log_dir: str, retention_days: int) -> logging.Handler:
    os.makedirs(log_dir, exist_ok=True)
    handler = TimedRotatingFileHandler(
        os.path.join(log_dir, _LOG_FILE_NAME),
        when="midnight",
        backupCount=retention_days,
        encoding="utf-8",
        utc=True,
    )
    handler.suffix = "%Y-%m-%d"
    return handler


def setup_logging(level: str = "INFO", log_dir: str = "", retention_days: int = 30) -> None:
    """Install our handlers on the root logger, replacing the ones from a previous call."""
    level_name, log_level = _parse_level(level)
    retention_days = max(1, min(365, int(retention_days or 30)))
    log_dir = (log_dir or "").strip()

    root = logging.getLogger()
    while _installed:
        old = _installed.pop()
        root.removeHandler(old)
        old.close()

    handlers: list[logging.Handler] = [logging.StreamHandler()]
    if log_dir:
        handlers.append(_rotating_file(log_dir, retention_days))

    formatter = logging.Formatter(_LOG_FORMAT, datefmt=_LOG_DATE_FORMAT)
    for h in handlers:
        h.setLevel(log_level)
        h.setFormatter(formatter)
        root.addHandler(h)
        _installed.append(h)
    root.setLevel(log_level)

    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(max(log_level, logging.WARNING))

    logging.getLogger("ldap_pack").info(
        "Logging configured: level=%s, file=%s, retention=%d days",
        level_name, get_log_file() or "-", retention_days,
    )


def get_log_file() -> str | None:
    """Path of the active log file, or None when logging to the console only."""
    for h in _installed:
        if isinstance(h, TimedRotatingFileHandler):
            return h.baseFilename
    return None
