"""
Bucket aggregation: fold active connections into two running rows.

Responsibilities (kept minimal, one thing each):
- Classify a connection into the proxied or the direct bucket.
- Carry each bucket's cumulative counters forward across snapshots and layer
  in the current members' contribution.

Notes
-----
- Members come and go constantly, so a bucket total cannot be recomputed by
  summing member counters; the previous row is the baseline.
- When a previous row exists, members contribute their per-interval speed to
  the cumulative counters. When the bucket has never been seen, members
  contribute their full cumulative counters.
- Buckets with no members this snapshot keep their previous row untouched.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable, Mapping, Optional

from ..dto import DerivedConnection, VirtualConnection
from .speed import is_number


def classify_bucket(
    conn: DerivedConnection,
    *,
    proxy_hop: str = "Proxy",
    proxy_bucket: str = "Proxy",
    direct_bucket: str = "Direct",
) -> str:
    """Return `proxy_bucket` if any hop is literally `proxy_hop`, else `direct_bucket`."""
    return proxy_bucket if proxy_hop in conn.chains else direct_bucket


# ---- Mutable accumulator (lives only inside one fold) ----

@dataclass
class _Row:
    bucket: str
    upload: float
    download: float
    upload_speed: float = 0
    download_speed: float = 0
    members: int = 0
    has_baseline: bool = False

    def freeze(self) -> VirtualConnection:
        return VirtualConnection(
            bucket=self.bucket,
            upload=self.upload,
            download=self.download,
            upload_speed=self.upload_speed,
            download_speed=self.download_speed,
            member_count=self.members,
        )


def _seed(bucket: str, prev: Optional[VirtualConnection]) -> _Row:
    """Start a row from the previous cumulative values (0 when absent or not numeric)."""
    if prev is None:
        return _Row(bucket=bucket, upload=0, download=0)
    up = prev.upload if is_number(prev.upload) else 0
    down = prev.download if is_number(prev.download) else 0
    return _Row(bucket=bucket, upload=up, download=down, has_baseline=True)


def _num_or_zero(value: object) -> float:
    return value if is_number(value) else 0  # type: ignore[return-value]


def fold_virtual_connections(
    previous: Mapping[str, VirtualConnection],
    active: Iterable[DerivedConnection],
    *,
    proxy_hop: str = "Proxy",
    proxy_bucket: str = "Proxy",
    direct_bucket: str = "Direct",
) -> Dict[str, VirtualConnection]:
    """
    Recompute the aggregate rows for one snapshot.

    Parameters
    ----------
    previous : Mapping[str, VirtualConnection]
        Rows produced for the previous snapshot (may be empty).
    active : Iterable[DerivedConnection]
        Current active connections with speeds already derived.

    Returns
    -------
    Dict[str, VirtualConnection]
        Every bucket ever observed; untouched buckets are carried over as-is.
    """
    rows: Dict[str, _Row] = {}

    for conn in active:
        bucket = classify_bucket(
            conn,
            proxy_hop=proxy_hop,
            proxy_bucket=proxy_bucket,
            direct_bucket=direct_bucket,
        )
        row = rows.get(bucket)
        if row is None:
            row = _seed(bucket, previous.get(bucket))
            rows[bucket] = row

        up_speed = _num_or_zero(conn.upload_speed)
        down_speed = _num_or_zero(conn.download_speed)

        if row.has_baseline:
            row.upload += up_speed
            row.download += down_speed
        else:
            row.upload += _num_or_zero(conn.upload)
            row.download += _num_or_zero(conn.download)

        row.upload_speed += up_speed
        row.download_speed += down_speed
        row.members += 1

    out: Dict[str, VirtualConnection] = dict(previous)
    for bucket, row in rows.items():
        out[bucket] = row.freeze()
    return out
