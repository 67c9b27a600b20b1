"""
Snapshot message parsing.

Goal: turn a JSON-decoded message from the proxy core's connections feed
into a SnapshotMessage without ever raising. The feed looks like:

    {
      "uploadTotal": 123, "downloadTotal": 456,
      "connections": [
        {"id": "...", "chains": ["Proxy", "node-a"], "upload": 10,
         "download": 20, "metadata": {...}, "rule": "...", "start": "..."},
        ...
      ]
    }

Rules
-----
- Not a mapping, or no `connections` list          -> message with connections=None
- A record that is not a mapping or has no usable id -> dropped
- Duplicate ids within one message                  -> first occurrence wins
- Counters are passed through as-is (the speed deriver decides whether they
  are usable); every other key is kept as opaque metadata.
"""

from __future__ import annotations

from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Optional, Tuple

from ..dto import RawConnectionRecord, SnapshotMessage

_RESERVED_KEYS = frozenset({"id", "chains", "upload", "download"})


def _coerce_id(value: Any) -> Optional[str]:
    if isinstance(value, bool):
        return None
    if isinstance(value, str):
        return value or None
    if isinstance(value, int):
        return str(value)
    return None


def _coerce_chains(value: Any) -> Tuple[str, ...]:
    if isinstance(value, (list, tuple)):
        return tuple(str(hop) for hop in value if hop is not None)
    if isinstance(value, str) and value:
        return (value,)
    return ()


def _total(value: Any) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return 0
    return value


def parse_record(raw: Any) -> Optional[RawConnectionRecord]:
    """Build one RawConnectionRecord, or None if the entry cannot be keyed."""
    if not isinstance(raw, Mapping):
        return None
    conn_id = _coerce_id(raw.get("id"))
    if conn_id is None:
        return None

    metadata: Dict[str, Any] = {k: v for k, v in raw.items() if k not in _RESERVED_KEYS}
    return RawConnectionRecord(
        id=conn_id,
        chains=_coerce_chains(raw.get("chains")),
        upload=raw.get("upload"),
        download=raw.get("download"),
        metadata=MappingProxyType(metadata),
    )


def parse_message(payload: Any) -> SnapshotMessage:
    """
    Parse one feed message.

    Always returns a SnapshotMessage; `connections` is None when the payload
    carries no connection list, which the store handles as a no-op.
    """
    if not isinstance(payload, Mapping):
        return SnapshotMessage(connections=None)

    upload_total = _total(payload.get("uploadTotal"))
    download_total = _total(payload.get("downloadTotal"))

    raw_conns = payload.get("connections")
    if not isinstance(raw_conns, (list, tuple)):
        return SnapshotMessage(
            connections=None,
            upload_total=upload_total,
            download_total=download_total,
        )

    records: List[RawConnectionRecord] = []
    seen = set()
    for raw in raw_conns:
        rec = parse_record(raw)
        if rec is None or rec.id in seen:
            continue
        seen.add(rec.id)
        records.append(rec)

    return SnapshotMessage(
        connections=tuple(records),
        upload_total=upload_total,
        download_total=download_total,
    )
