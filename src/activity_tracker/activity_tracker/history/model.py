from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..sessions.model import SessionEntry


@dataclass(frozen=True)
class TimelineEntry:
    """Display view of a ledger entry with its recomputed end and duration."""

    entry: SessionEntry
    effective_end: Optional[datetime]
    effective_seconds: Optional[int]

    @property
    def is_active(self) -> bool:
        return self.effective_end is None

    def to_dict(self) -> dict:
        data = self.entry.to_dict()
        data.update(
            {
                "effective_end": self.effective_end.isoformat() if self.effective_end else None,
                "effective_seconds": self.effective_seconds,
                "is_active": self.is_active,
            }
        )
        return data
