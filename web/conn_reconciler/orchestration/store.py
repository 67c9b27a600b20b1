"""
Connection store: the single owner of all derived connection state.

One entry point, `ingest()`, runs the whole recomputation for a snapshot:

    snapshot -> derive speeds -> merge history -> fold buckets
             -> (not paused) detect closures + publish -> truncate history

Internal state (last active list, bucket rows, history) always advances,
paused or not, so speeds after a resume are deltas against the last
processed snapshot. Published views only change while not paused.

All of it runs under one lock; readers get immutable PublishedViews objects
that are swapped in whole.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import replace
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Optional, Tuple

from ..config import EngineConfig
from ..dto import (
    DerivedConnection,
    PublishedViews,
    SnapshotMessage,
    VirtualConnection,
)
from ..intake.message_parser import parse_message
from ..pipeline.buckets import classify_bucket, fold_virtual_connections
from ..pipeline.closure import detect_closed
from ..pipeline.emitter import ViewEmitter
from ..pipeline.history import merge_history, truncate_history
from ..pipeline.speed import derive_speeds
from ..ports import ViewSinkPort

logger = logging.getLogger(__name__)


class ConnectionStore:
    """
    Reconciles a snapshot feed into active, closed and aggregated views.

    Parameters
    ----------
    config : EngineConfig | None
        Engine knobs; defaults are used when omitted.
    sink : ViewSinkPort | None
        Optional consumer notified on every publication.
    """

    def __init__(
        self,
        config: EngineConfig | None = None,
        *,
        sink: Optional[ViewSinkPort] = None,
    ) -> None:
        self._cfg = config or EngineConfig()
        self._emitter = ViewEmitter(sink=sink)
        self._lock = threading.Lock()

        # internal state, advances on every snapshot
        self._active: List[DerivedConnection] = []
        self._virtual: Dict[str, VirtualConnection] = {}
        self._history: List[DerivedConnection] = []
        self._latest: Optional[SnapshotMessage] = None
        self._processed = 0

        # externally visible state, frozen while paused
        self._paused = False
        self._views = PublishedViews()

    # ------------------------------ Config ------------------------------

    @property
    def config(self) -> EngineConfig:
        return self._cfg

    @property
    def emitter(self) -> ViewEmitter:
        return self._emitter

    # ---------------------------- Pause gate ----------------------------

    @property
    def paused(self) -> bool:
        return self._paused

    def set_paused(self, flag: bool) -> None:
        with self._lock:
            flag = bool(flag)
            if flag != self._paused:
                logger.debug("Connection views %s", "paused" if flag else "resumed")
            self._paused = flag

    # ----------------------------- Ingestion -----------------------------

    def ingest_payload(self, payload: Any) -> bool:
        """Parse a JSON-decoded feed message and ingest it."""
        return self.ingest(parse_message(payload))

    def ingest(self, message: Optional[SnapshotMessage]) -> bool:
        """
        Process one snapshot.

        Returns True if a recomputation happened, False for an absent message
        or one without a connection list (no recomputation; only the latest
        message and its totals are recorded).
        """
        if message is None:
            logger.debug("Ignoring empty snapshot frame")
            return False

        with self._lock:
            self._latest = message
            if message.connections is None:
                logger.debug("Ignoring snapshot without a connection list")
                return False

            cfg = self._cfg
            derived = derive_speeds(
                message.connections,
                self._active,
                negative_policy=cfg.negative_speed_policy,
            )
            active = [
                replace(
                    c,
                    preserve=classify_bucket(
                        c,
                        proxy_hop=cfg.proxy_hop,
                        proxy_bucket=cfg.proxy_bucket,
                        direct_bucket=cfg.direct_bucket,
                    ),
                )
                for c in derived
            ]

            history = merge_history(self._history, active)
            virtual = fold_virtual_connections(
                self._virtual,
                active,
                proxy_hop=cfg.proxy_hop,
                proxy_bucket=cfg.proxy_bucket,
                direct_bucket=cfg.direct_bucket,
            )
            self._processed += 1

            views: Optional[PublishedViews] = None
            if not self._paused:
                closed = detect_closed(history, active, max_rows=cfg.max_closed_rows)
                views = PublishedViews(
                    active=tuple(active),
                    closed=tuple(closed),
                    virtual=MappingProxyType(dict(virtual)),
                    sequence=self._processed,
                )
                self._views = views

            self._active = active
            self._virtual = virtual
            self._history = truncate_history(history, len(active), cfg.max_closed_rows)

            if views is not None:
                self._emitter.publish(views)
            return True

    # ------------------------------ Readers ------------------------------

    @property
    def views(self) -> PublishedViews:
        return self._views

    @property
    def active_connections(self) -> Tuple[DerivedConnection, ...]:
        return self._views.active

    @property
    def closed_connections(self) -> Tuple[DerivedConnection, ...]:
        return self._views.closed

    @property
    def virtual_connections(self) -> Mapping[str, VirtualConnection]:
        return self._views.virtual

    @property
    def all_connections(self) -> Tuple[DerivedConnection, ...]:
        """Bounded internal cache of recently seen connections (read-only copy)."""
        with self._lock:
            return tuple(self._history)

    @property
    def processed_count(self) -> int:
        return self._processed

    @property
    def latest_message(self) -> Optional[SnapshotMessage]:
        return self._latest

    def totals(self) -> Tuple[float, float]:
        """Process-wide (upload_total, download_total) from the latest message."""
        latest = self._latest
        if latest is None:
            return 0, 0
        return latest.upload_total, latest.download_total

    def connection_ids_via(self, hop: str) -> List[str]:
        """
        Ids of connections in the latest raw snapshot whose chain includes `hop`.

        Reads the raw message rather than the published views so the answer is
        current even while paused.
        """
        latest = self._latest
        if latest is None or not latest.connections:
            return []
        return [rec.id for rec in latest.connections if hop in rec.chains]
