"""
Recorded-session SnapshotSource adapter.

Replays a connections feed captured as JSON Lines, one message per line,
exactly as the proxy core sent it:

  {"uploadTotal": 10, "downloadTotal": 20, "connections": [...]}
  {"uploadTotal": 15, "downloadTotal": 31, "connections": [...]}

Blank lines are skipped; a line that is not valid JSON yields None (an
empty frame) so the replay keeps its position in the sequence instead of
aborting.
"""

from __future__ import annotations

import json
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Iterator, Optional

from ..dto import SnapshotMessage
from ..ports import SnapshotSourcePort
from .message_parser import parse_message


@dataclass(frozen=True)
class RecordedSnapshotSource(SnapshotSourcePort):
    """
    Replay snapshot messages from a JSON Lines file.

    Parameters
    ----------
    path : str | os.PathLike
        File to read; a missing file yields nothing.
    """

    path: str | os.PathLike

    def messages(self) -> Iterable[Optional[SnapshotMessage]]:
        p = Path(self.path)
        if not p.exists():
            return []

        def _iter() -> Iterator[Optional[SnapshotMessage]]:
            with p.open("r", encoding="utf-8") as f:
                for line in f:
                    line = line.strip()
                    if not line:
                        continue
                    try:
                        payload = json.loads(line)
                    except json.JSONDecodeError:
                        yield None
                        continue
                    yield parse_message(payload)

        return _iter()
