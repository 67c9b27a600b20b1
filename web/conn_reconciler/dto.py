"""
Data Transfer Objects (DTOs) used across the reconciliation engine.

These are immutable and independent of any transport or web framework.
Field names are snake_case here; the camelCase wire names used by the
proxy core are handled at the edges (intake parser, HTTP serializers).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Literal, Mapping, Optional, Tuple

Bucket = Literal["Proxy", "Direct"]


def _empty_mapping() -> Mapping[str, Any]:
    return MappingProxyType({})


# === Intake ===
@dataclass(frozen=True)
class RawConnectionRecord:
    """One connection as reported by a snapshot; counters are cumulative bytes."""
    id: str                               # stable for the connection's lifetime
    chains: Tuple[str, ...]               # hop names, ordered as reported
    upload: Any                           # numeric when present; anything else means "no baseline"
    download: Any
    metadata: Mapping[str, Any] = field(default_factory=_empty_mapping)


@dataclass(frozen=True)
class SnapshotMessage:
    """
    One periodic report from the transport.

    `connections` is None when the message carried no connection list; the
    store treats that as a no-op. Totals are process-wide and only passed
    through for display.
    """
    connections: Optional[Tuple[RawConnectionRecord, ...]]
    upload_total: float = 0
    download_total: float = 0


# === Derived ===
@dataclass(frozen=True)
class DerivedConnection:
    id: str
    chains: Tuple[str, ...]
    upload: Any
    download: Any
    upload_speed: float
    download_speed: float
    metadata: Mapping[str, Any] = field(default_factory=_empty_mapping)
    preserve: Optional[str] = None        # bucket this connection was folded into


@dataclass(frozen=True)
class VirtualConnection:
    """Aggregate row for one route class; cumulative counters outlive members."""
    bucket: str
    upload: float
    download: float
    upload_speed: float
    download_speed: float
    member_count: int = 0


# === Published bundle ===
@dataclass(frozen=True)
class PublishedViews:
    active: Tuple[DerivedConnection, ...] = ()
    closed: Tuple[DerivedConnection, ...] = ()
    virtual: Mapping[str, VirtualConnection] = field(default_factory=_empty_mapping)
    sequence: int = 0                     # snapshots processed when published
