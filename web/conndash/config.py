"""
Configuration objects for the Flask application.

Override via environment variables or a .env file (when using python-dotenv).
"""

from __future__ import annotations
import os


class Config:
    """Base configuration (safe defaults)."""

    # Security
    SECRET_KEY = os.getenv("FLASK_SECRET_KEY", "dev-unsafe-change-this")

    # Storage
    LOG_FOLDER = os.getenv("LOG_FOLDER", "logs")

    # Requests (snapshot bodies can be large with thousands of connections)
    MAX_CONTENT_LENGTH = int(os.getenv("MAX_CONTENT_LENGTH", str(8 * 1024 * 1024)))  # 8 MiB

    # Logging
    LOG_FILE = os.getenv("APP_LOG_FILE", "logs/app.log")
    LOG_LEVEL = os.getenv("APP_LOG_LEVEL", "INFO")

    # Connection engine
    MAX_CLOSED_ROWS = int(os.getenv("MAX_CLOSED_ROWS", "200"))
    PROXY_HOP_LABEL = os.getenv("PROXY_HOP_LABEL", "Proxy")
    NEGATIVE_SPEED_POLICY = os.getenv("NEGATIVE_SPEED_POLICY", "passthrough")


class ProductionConfig(Config):
    """Production overrides."""
    LOG_LEVEL = os.getenv("APP_LOG_LEVEL", "INFO")


class DevelopmentConfig(Config):
    """Development overrides."""
    LOG_LEVEL = os.getenv("APP_LOG_LEVEL", "DEBUG")


class TestingConfig(Config):
    """Testing overrides: small bounds, no file logging noise in the repo."""
    TESTING = True
    LOG_LEVEL = "DEBUG"
    LOG_FILE = os.getenv("APP_LOG_FILE", "logs/test.log")
    MAX_CLOSED_ROWS = 5
