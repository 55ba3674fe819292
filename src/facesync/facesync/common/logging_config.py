"""Logging configuration for the check-in service."""

from __future__ import annotations

import logging
import logging.handlers
from pathlib import Path
from typing import Optional

from flask import Flask

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(module)s:%(lineno)d - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Handlers added by setup_logging, removed again when it is called a second time.
_installed: list[logging.Handler] = []


def setup_logging(
    app: Flask,
    log_level: str = "INFO",
    log_dir: Optional[str] = None,
    max_log_size: int = 10 * 1024 * 1024,
    backup_count: int = 5,
) -> logging.Logger:
    """Configure the root logger and return the app logger.

    Args:
        app: Flask app instance
        log_level: DEBUG, INFO, WARNING, ERROR or CRITICAL
        log_dir: directory for rotating log files; console only when empty
        max_log_size: maximum size of one log file (bytes)
        backup_count: number of rotated files to keep
    """

    level = getattr(logging, str(log_level).upper(), logging.INFO)
    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    # Replace only our own handlers.
    for handler in _installed:
        root_logger.removeHandler(handler)
        handler.close()
    _installed.clear()

    console_handler = logging.StreamHandler()
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)
    _installed.append(console_handler)

    if log_dir:
        path = Path(log_dir)
        path.mkdir(parents=True, exist_ok=True)
        file_handler = logging.handlers.RotatingFileHandler(
            path / "facesync.log",
            maxBytes=max_log_size,
            backupCount=backup_count,
            encoding="utf-8",
        )
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)
        _installed.append(file_handler)

    # Werkzeug request lines are noisy at INFO
    logging.getLogger("werkzeug").setLevel(max(level, logging.WARNING))

    app.logger.setLevel(level)
    app.logger.info("Logging configured (level=%s, dir=%s)", logging.getLevelName(level), log_dir or "-")
    return app.logger
