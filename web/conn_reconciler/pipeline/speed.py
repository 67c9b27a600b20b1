"""
Per-connection speed from cumulative counters.

Responsibilities:
- Join the current snapshot's records to the previous active list by `id`.
- Emit one DerivedConnection per record with per-interval upload/download deltas.

Notes
-----
- A record without a usable previous baseline (new id, or previous counters
  not numeric) gets speed 0 in both directions.
- Counters going backwards are handled by the configured policy; the default
  passes the negative delta through unchanged.
"""

from __future__ import annotations

import logging
import math
from typing import Any, Dict, Iterable, List, Tuple

from ..config import NegativeSpeedPolicy
from ..dto import DerivedConnection, RawConnectionRecord

logger = logging.getLogger(__name__)


def is_number(value: Any) -> bool:
    """True for real int/float values; bools and NaN do not count as counters."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return not math.isnan(value)


def _deltas(
    record: RawConnectionRecord,
    prev: DerivedConnection,
    policy: NegativeSpeedPolicy,
) -> Tuple[float, float]:
    if not (is_number(record.upload) and is_number(record.download)):
        # current counters unusable; no meaningful delta this round
        return 0, 0

    up = record.upload - prev.upload
    down = record.download - prev.download
    if up >= 0 and down >= 0:
        return up, down

    logger.debug(
        "Counter went backwards for %s (up=%s, down=%s, policy=%s)",
        record.id, up, down, policy,
    )
    if policy == "clamp":
        return max(0, up), max(0, down)
    if policy == "rebaseline":
        return 0, 0
    return up, down


def derive_speeds(
    records: Iterable[RawConnectionRecord],
    prev_active: Iterable[DerivedConnection],
    *,
    negative_policy: NegativeSpeedPolicy = "passthrough",
) -> List[DerivedConnection]:
    """
    Convert raw records into DerivedConnection objects with speed fields.

    Parameters
    ----------
    records : Iterable[RawConnectionRecord]
        The current snapshot, in snapshot order.
    prev_active : Iterable[DerivedConnection]
        Active list produced for the previous snapshot (the internal one,
        not necessarily the published one).
    negative_policy : {"passthrough", "clamp", "rebaseline"}
        Handling of decreasing counters.
    """
    prev_by_id: Dict[str, DerivedConnection] = {p.id: p for p in prev_active}

    out: List[DerivedConnection] = []
    for rec in records:
        prev = prev_by_id.get(rec.id)
        if prev is None or not is_number(prev.upload) or not is_number(prev.download):
            up, down = 0, 0
        else:
            up, down = _deltas(rec, prev, negative_policy)

        out.append(
            DerivedConnection(
                id=rec.id,
                chains=rec.chains,
                upload=rec.upload,
                download=rec.download,
                upload_speed=up,
                download_speed=down,
                metadata=rec.metadata,
            )
        )
    return out
