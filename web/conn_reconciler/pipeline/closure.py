"""
Closure detection: historical set minus the current active set, by id.
"""

from __future__ import annotations

from typing import Iterable, List, Sequence

from ..dto import DerivedConnection


def detect_closed(
    history: Sequence[DerivedConnection],
    active: Iterable[DerivedConnection],
    *,
    max_rows: int,
) -> List[DerivedConnection]:
    """
    Return connections present in `history` but absent from `active`.

    Order follows `history` (oldest first, most recent last) and only the
    last `max_rows` entries are kept.
    """
    active_ids = {c.id for c in active}
    closed = [c for c in history if c.id not in active_ids]
    if max_rows <= 0:
        return []
    return closed[-max_rows:]
