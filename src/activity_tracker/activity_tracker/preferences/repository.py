from __future__ import annotations

from datetime import datetime
from typing import Any, Optional, Protocol

from .model import UserPreferences


class PreferencesRepository(Protocol):
    def get_for_user(self, user_id: int) -> Optional[UserPreferences]:
        raise NotImplementedError

    def upsert(self, *, user_id: int, preferences: dict[str, Any], now: datetime) -> UserPreferences:
        raise NotImplementedError
