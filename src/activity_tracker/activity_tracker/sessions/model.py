from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.enums import EntryKind


@dataclass(frozen=True)
class SessionEntry:
    """Domain entity: one timed record of a user doing one category of work.

    ``category_name_snapshot`` is copied from the category when the entry is
    created (or explicitly edited) and is what history and reports display,
    even after the category is renamed or deleted.
    """

    entry_id: int
    user_id: int
    category_id: Optional[int]
    category_name_snapshot: str
    start_time: datetime
    end_time: Optional[datetime] = None
    duration_seconds: Optional[int] = None
    is_manual: bool = False
    is_edited: bool = False
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @property
    def is_open(self) -> bool:
        return self.end_time is None

    @property
    def kind(self) -> EntryKind:
        return EntryKind.from_flags(is_manual=self.is_manual, is_edited=self.is_edited)

    def to_dict(self) -> dict:
        return {
            "id": self.entry_id,
            "user_id": self.user_id,
            "category_id": self.category_id,
            "category_name": self.category_name_snapshot,
            "start_time": self.start_time.isoformat(),
            "end_time": self.end_time.isoformat() if self.end_time else None,
            "duration_seconds": self.duration_seconds,
            "is_manual": self.is_manual,
            "is_edited": self.is_edited,
            "kind": self.kind.value,
        }


@dataclass(frozen=True)
class MonitorRow:
    """Read-model: an entry joined with its owner (admin monitor, export feed)."""

    entry: SessionEntry
    full_name: str
    username: str

    def to_dict(self) -> dict:
        data = self.entry.to_dict()
        data.update(
            {
                "full_name": self.full_name,
                "username": self.username,
                "created_at": self.entry.created_at.isoformat() if self.entry.created_at else None,
            }
        )
        return data
