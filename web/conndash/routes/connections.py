"""
Connection routes: snapshot intake, pause toggle, and published views.
"""

from __future__ import annotations

from flask import Blueprint, current_app, jsonify, request

from conndash.managers.feed_manager import FeedManager
from conndash.serializers import (
    connections_to_json,
    views_to_json,
    virtual_map_to_json,
)

bp = Blueprint("connections", __name__, url_prefix="/connections")


def _mgr() -> FeedManager:
    return current_app.extensions["feed_mgr"]


@bp.route("/snapshot", methods=["POST"])
def push_snapshot():
    """
    Ingest one snapshot message from the transport.

    Body (JSON): {"connections": [...], "uploadTotal": n, "downloadTotal": n}
    A body without a connection list is accepted and ignored.
    """
    data = request.get_json(silent=True)
    applied = _mgr().ingest(data)
    return jsonify({"success": True, "applied": applied})


@bp.route("")
def all_views():
    """Return every published view plus pause state and process totals."""
    mgr = _mgr()
    body = views_to_json(mgr.store.views)
    body.update(mgr.status())
    return jsonify(body)


@bp.route("/active")
def active():
    return jsonify(connections_to_json(_mgr().store.active_connections))


@bp.route("/closed")
def closed():
    return jsonify(connections_to_json(_mgr().store.closed_connections))


@bp.route("/virtual")
def virtual():
    return jsonify(virtual_map_to_json(_mgr().store.virtual_connections))


@bp.route("/pause", methods=["GET", "POST"])
def pause():
    """
    Read or set the pause flag.

    Body (JSON, POST): {"paused": true}
    """
    mgr = _mgr()
    if request.method == "POST":
        data = request.get_json(silent=True)
        if not isinstance(data, dict) or not isinstance(data.get("paused"), bool):
            return jsonify({"success": False, "error": "Body must be {\"paused\": <bool>}"}), 400
        mgr.set_paused(data["paused"])
    return jsonify({"success": True, "paused": mgr.paused})


@bp.route("/via/<path:hop>")
def via(hop: str):
    """Ids of connections in the latest snapshot routed through `hop`."""
    return jsonify({"hop": hop, "ids": _mgr().connection_ids_via(hop)})
