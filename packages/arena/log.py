"""
Combat log - append-only record of engine events for replay and debugging.
"""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List


@dataclass(frozen=True)
class CombatLogEntry:
    """A single combat log entry."""
    seq: int
    event_type: str
    data: Dict[str, Any]
    ts: int  # wall clock, ms

    def to_dict(self) -> Dict[str, Any]:
        return {"seq": self.seq, "t": self.event_type, "ts": self.ts, **self.data}


@dataclass
class CombatLog:
    """Ordered event log. Entries are only ever appended."""
    entries: List[CombatLogEntry] = field(default_factory=list)

    def log(self, event_type: str, **data) -> CombatLogEntry:
        """Add a log entry."""
        entry = CombatLogEntry(
            seq=len(self.entries),
            event_type=event_type,
            data=data,
            ts=int(time.time() * 1000),
        )
        self.entries.append(entry)
        return entry

    def get_events(self, event_type: str) -> List[CombatLogEntry]:
        """Get all events of a specific type."""
        return [e for e in self.entries if e.event_type == event_type]

    def to_list(self) -> List[Dict[str, Any]]:
        return [e.to_dict() for e in self.entries]

    def __len__(self) -> int:
        return len(self.entries)

    def __iter__(self) -> Iterator[CombatLogEntry]:
        return iter(self.entries)
