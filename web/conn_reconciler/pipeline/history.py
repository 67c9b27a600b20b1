"""
Bounded "all seen" working set.

The historical set is an insertion-ordered, id-deduplicated list of every
connection observed within a sliding window. It exists so the closure
detector can tell which connections disappeared.

Known limitation: the window is `active_count + max_closed` entries. A burst
of churn larger than that within one interval evicts entries before the
closure detector sees them, so some closures are never reported.
"""

from __future__ import annotations

from typing import Iterable, List, Sequence

from ..dto import DerivedConnection


def merge_history(
    history: Sequence[DerivedConnection],
    active: Iterable[DerivedConnection],
) -> List[DerivedConnection]:
    """
    Union `active` into `history` keyed by id.

    Existing entries keep both their position and their stored values; ids
    not seen before are appended in `active` order.
    """
    merged = list(history)
    seen = {c.id for c in merged}
    for conn in active:
        if conn.id in seen:
            continue
        seen.add(conn.id)
        merged.append(conn)
    return merged


def truncate_history(
    history: Sequence[DerivedConnection],
    active_count: int,
    max_closed: int,
) -> List[DerivedConnection]:
    """Keep only the most recent `active_count + max_closed` entries."""
    limit = max(0, int(active_count) + int(max_closed))
    if limit == 0:
        return []
    return list(history[-limit:])
