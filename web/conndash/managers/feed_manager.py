"""
Thread-safe wrapper around the connection store for the web layer.

Owns one ConnectionStore and exposes what the routes need:
- snapshot intake from the transport (raw JSON-decoded messages),
- the pause toggle,
- a summary of the latest published views plus process totals.

The store serializes its own updates; the manager's bookkeeping (skip count,
ingest and publication timestamps) is guarded by `_lock`. The lock is never
held while calling into the store, because the store calls `on_views` back
from inside its update step.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional
import logging
import threading
import time

from conn_reconciler import ConnectionStore, EngineConfig, PublishedViews

from ..utils import utcnow_iso


@dataclass
class FeedManager:
    """
    Attributes:
        logger: Application logger.
        config: Engine configuration used to build the store.

    State (protected by _lock):
        last_ingest_at: UNIX timestamp of the last applied snapshot.
        last_published_at: UNIX timestamp of the last publication.
        skipped: Number of messages ignored as no-ops.
    """
    logger: logging.Logger
    config: EngineConfig = field(default_factory=EngineConfig)

    store: ConnectionStore = field(init=False, repr=False)
    _lock: threading.Lock = field(default_factory=threading.Lock, init=False, repr=False)

    last_ingest_at: Optional[float] = None
    last_published_at: Optional[float] = None
    skipped: int = 0

    def __post_init__(self) -> None:
        self.store = ConnectionStore(self.config, sink=self)

    # ------------------------------ Sink port ------------------------------

    def on_views(self, views: PublishedViews) -> None:
        with self._lock:
            self.last_published_at = time.time()

    # ----------------------------- Control plane ----------------------------

    def ingest(self, payload: Any) -> bool:
        """Apply one feed message; malformed messages are logged and skipped."""
        applied = self.store.ingest_payload(payload)
        with self._lock:
            if applied:
                self.last_ingest_at = time.time()
            else:
                self.skipped += 1
        if not applied:
            self.logger.debug("Snapshot skipped (no connection list)")
        return applied

    def set_paused(self, flag: bool) -> bool:
        self.store.set_paused(flag)
        self.logger.info("Connection views %s", "paused" if flag else "live")
        return self.store.paused

    @property
    def paused(self) -> bool:
        return self.store.paused

    def connection_ids_via(self, hop: str) -> List[str]:
        return self.store.connection_ids_via(hop)

    # ------------------------------ Telemetry ------------------------------

    def status(self) -> Dict[str, object]:
        upload_total, download_total = self.store.totals()
        views = self.store.views
        with self._lock:
            skipped = self.skipped
            last_ingest_at = self.last_ingest_at
            last_published_at = self.last_published_at
        return {
            "timestamp": utcnow_iso(),
            "paused": self.store.paused,
            "processed": self.store.processed_count,
            "publishedSequence": views.sequence,
            "skipped": skipped,
            "lastIngestAt": last_ingest_at,
            "lastPublishedAt": last_published_at,
            "activeCount": len(views.active),
            "closedCount": len(views.closed),
            "uploadTotal": upload_total,
            "downloadTotal": download_total,
        }
