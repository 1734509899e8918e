from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Optional


@dataclass(frozen=True)
class UserPreferences:
    """Free-form client settings of one user, stored as a JSON object."""

    user_id: int
    preferences: dict[str, Any] = field(default_factory=dict)
    updated_at: Optional[datetime] = None

    def to_dict(self) -> dict:
        return {
            "user_id": self.user_id,
            "preferences": dict(self.preferences),
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }
