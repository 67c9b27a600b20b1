"""
View emission (synchronous, minimal).

Purpose
-------
Forward each published set of views from the store to downstream
consumers (ViewSinkPort). Forwarding is immediate and in registration
order; there is no buffering because every publication supersedes the
previous one anyway.

Behavior
--------
- `publish(views)` -> calls `sink.on_views(views)` for every sink
- `attach(sink)` / `detach(sink)` manage the sink list
- A failing sink is logged and skipped so one bad consumer cannot stall
  the update step or starve the others.
"""

from __future__ import annotations

import logging
from typing import List, Optional

from ..dto import PublishedViews
from ..ports import ViewSinkPort

logger = logging.getLogger(__name__)


class ViewEmitter:
    """
    Minimal synchronous fan-out.

    Parameters
    ----------
    sink : Optional[ViewSinkPort]
        Initial consumer; more can be attached later.
    """

    def __init__(self, *, sink: Optional[ViewSinkPort] = None) -> None:
        self._sinks: List[ViewSinkPort] = []
        if sink is not None:
            self._sinks.append(sink)

    # --- registration ---

    def attach(self, sink: ViewSinkPort) -> None:
        if sink not in self._sinks:
            self._sinks.append(sink)

    def detach(self, sink: ViewSinkPort) -> None:
        if sink in self._sinks:
            self._sinks.remove(sink)

    @property
    def sink_count(self) -> int:
        return len(self._sinks)

    # --- emission ---

    def publish(self, views: PublishedViews) -> None:
        """Forward one PublishedViews bundle to every sink."""
        for sink in list(self._sinks):
            try:
                sink.on_views(views)
            except Exception:
                logger.exception("View sink %r failed", sink)
