"""
Flask app factory: registers config, logging, the feed manager, blueprints,
and error handlers.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Type

from flask import Flask, jsonify
from werkzeug.exceptions import HTTPException, RequestEntityTooLarge

from conn_reconciler import EngineConfig
from conndash.config import Config, DevelopmentConfig, ProductionConfig
from conndash.utils import ensure_dirs, init_logging
from conndash.managers.feed_manager import FeedManager
from conndash.routes import connections as connections_bp


def engine_config_from(app: Flask) -> EngineConfig:
    """Build the engine config from Flask settings (pydantic validates it)."""
    return EngineConfig(
        max_closed_rows=int(app.config["MAX_CLOSED_ROWS"]),
        proxy_hop=app.config["PROXY_HOP_LABEL"],
        negative_speed_policy=app.config["NEGATIVE_SPEED_POLICY"],
    )


def create_app(config_class: Type[Config] | None = None) -> Flask:
    """Create and configure the Flask application."""
    app = Flask(__name__)

    # Config selection
    cfg: Type[Config]
    env = os.getenv("FLASK_ENV", "production").lower()
    if config_class is not None:
        cfg = config_class
    elif env.startswith("dev"):
        cfg = DevelopmentConfig
    else:
        cfg = ProductionConfig
    app.config.from_object(cfg)

    ensure_dirs(Path(app.config["LOG_FOLDER"]))

    app.secret_key = app.config["SECRET_KEY"]

    # Logging
    logger = init_logging(app)
    app.logger = logger  # align Flask's logger with ours

    engine_cfg = engine_config_from(app)
    app.extensions["feed_mgr"] = FeedManager(logger=logger, config=engine_cfg)
    logger.info(
        "Connection engine ready (max_closed_rows=%s, proxy_hop=%s, negative_speed=%s)",
        engine_cfg.max_closed_rows,
        engine_cfg.proxy_hop,
        engine_cfg.negative_speed_policy,
    )

    # Error handlers
    @app.errorhandler(RequestEntityTooLarge)
    def handle_too_large(_e):
        return jsonify({"success": False, "error": "Snapshot too large"}), 413

    @app.errorhandler(HTTPException)
    def handle_http_exception(e: HTTPException):
        return jsonify({"success": False, "error": e.description}), e.code

    @app.errorhandler(Exception)
    def handle_unexpected_exception(e: Exception):
        app.logger.exception("Unhandled error")
        return jsonify({"success": False, "error": "Internal server error"}), 500

    # Blueprints
    app.register_blueprint(connections_bp.bp)

    # Health
    @app.route("/healthz")
    def healthz():
        return jsonify({"status": "ok"}), 200

    return app
