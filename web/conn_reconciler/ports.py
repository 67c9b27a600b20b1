"""
Hexagonal interfaces (Ports) for the reconciliation engine.

The snapshot transport and the display are collaborators; these Protocols
are the only things the engine knows about them. Keep them small so they
are easy to fake in tests.
"""

from __future__ import annotations

from typing import Iterable, Optional, Protocol

from .dto import PublishedViews, SnapshotMessage


class SnapshotSourcePort(Protocol):
    """
    Supplies snapshot messages in arrival order.
    Implementations may wrap a websocket, a queue, or a recorded session.
    """

    def messages(self) -> Iterable[Optional[SnapshotMessage]]:
        """Yield messages in the order they arrived; None stands for an empty frame."""
        ...


class ViewSinkPort(Protocol):
    """
    Receives every published set of views.
    Called synchronously from inside the store's update step, so it must not
    call back into the store.
    """

    def on_views(self, views: PublishedViews) -> None:
        """Receive the newly published active/closed/virtual views."""
        ...
