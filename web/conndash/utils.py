"""
Utility helpers: directory setup, logging config, and time utils.
"""

from __future__ import annotations

import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path
from datetime import datetime, timezone
from flask import Flask


def ensure_dirs(*paths: Path) -> None:
    """Ensure each directory exists."""
    for p in paths:
        p.mkdir(parents=True, exist_ok=True)


def init_logging(app: Flask) -> logging.Logger:
    """Configure a console logger + rotating file handler."""
    log_level = getattr(logging, app.config["LOG_LEVEL"].upper(), logging.INFO)
    logger = logging.getLogger("conndash")
    logger.setLevel(log_level)
    logger.propagate = False  # avoid duplicate logs if root has handlers

    # create_app may run more than once per process (tests)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    fmt = logging.Formatter("%(asctime)s - %(levelname)s - %(message)s")

    # Console
    ch = logging.StreamHandler()
    ch.setLevel(log_level)
    ch.setFormatter(fmt)
    logger.addHandler(ch)

    # File (rotating)
    log_file = Path(app.config["LOG_FILE"])
    ensure_dirs(log_file.parent)
    fh = RotatingFileHandler(log_file, maxBytes=1_000_000, backupCount=5)
    fh.setLevel(log_level)
    fh.setFormatter(fmt)
    logger.addHandler(fh)

    # engine modules log under their package name
    logging.getLogger("conn_reconciler").setLevel(log_level)

    if app.config["SECRET_KEY"] == "dev-unsafe-change-this":
        logger.warning("Using default SECRET_KEY. Set FLASK_SECRET_KEY for production.")

    return logger


def utcnow_iso() -> str:
    """Return current UTC timestamp in RFC3339-ish ISO format."""
    return datetime.now(timezone.utc).replace(tzinfo=None).isoformat() + "Z"
