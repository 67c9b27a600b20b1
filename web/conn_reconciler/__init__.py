"""
conn_reconciler: turns a connections snapshot feed into display-ready views.

Public API (stable):
- EngineConfig             (configuration)
- ConnectionStore          (owns state; single `ingest` entry point; pause gate)
- run_feed                 (drive a store from a source)
- SnapshotSourcePort       (input adapter interface)
- ViewSinkPort             (output adapter interface)
- RecordedSnapshotSource   (JSON Lines replay source)
- parse_message            (JSON-decoded feed message -> SnapshotMessage)
- DTOs: RawConnectionRecord, SnapshotMessage, DerivedConnection,
        VirtualConnection, PublishedViews

Pipeline stages (speed, history, closure, buckets) live under
`conn_reconciler.pipeline` and are pure functions.
"""

from __future__ import annotations

# Configuration
from .config import EngineConfig

# Orchestration
from .orchestration.runner import run_feed
from .orchestration.store import ConnectionStore

# Ports
from .ports import SnapshotSourcePort, ViewSinkPort

# Adapters
from .intake.message_parser import parse_message
from .intake.recorded_source import RecordedSnapshotSource

# DTOs
from .dto import (
    DerivedConnection,
    PublishedViews,
    RawConnectionRecord,
    SnapshotMessage,
    VirtualConnection,
)

__all__ = [
    "EngineConfig",
    "ConnectionStore",
    "run_feed",
    "SnapshotSourcePort",
    "ViewSinkPort",
    "parse_message",
    "RecordedSnapshotSource",
    "DerivedConnection",
    "PublishedViews",
    "RawConnectionRecord",
    "SnapshotMessage",
    "VirtualConnection",
]
