"""
Drive a ConnectionStore from a SnapshotSourcePort.
"""

from __future__ import annotations

import logging
from typing import Dict

from ..ports import SnapshotSourcePort
from .store import ConnectionStore

logger = logging.getLogger(__name__)


def run_feed(*, source: SnapshotSourcePort, store: ConnectionStore) -> Dict[str, int]:
    """
    Feed every message from `source` into `store`, in order.

    Returns a small metrics dict: messages_seen, snapshots_applied,
    messages_skipped.
    """
    seen = applied = 0
    for message in source.messages():
        seen += 1
        if store.ingest(message):
            applied += 1

    metrics = {
        "messages_seen": seen,
        "snapshots_applied": applied,
        "messages_skipped": seen - applied,
    }
    logger.info(
        "Feed finished: %d messages, %d applied", metrics["messages_seen"], applied
    )
    return metrics
