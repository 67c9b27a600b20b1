"""
pytest configuration and fixtures for the connection engine tests
"""

import sys
from pathlib import Path

import pytest

# Packages live under web/
sys.path.insert(0, str(Path(__file__).parent.parent / "web"))

from conn_reconciler import ConnectionStore, EngineConfig  # noqa: E402


@pytest.fixture
def engine_config():
    """Small closed-row bound so truncation is easy to hit"""
    return EngineConfig(max_closed_rows=3)


@pytest.fixture
def store(engine_config):
    return ConnectionStore(engine_config)


@pytest.fixture
def app(tmp_path):
    """Flask app wired with TestingConfig; logs go to a temp dir"""
    from conndash import create_app
    from conndash.config import TestingConfig

    class _Cfg(TestingConfig):
        LOG_FOLDER = str(tmp_path / "logs")
        LOG_FILE = str(tmp_path / "logs" / "test.log")

    return create_app(_Cfg)


@pytest.fixture
def client(app):
    return app.test_client()
