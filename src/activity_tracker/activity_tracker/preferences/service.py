from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Optional

from ..common.datetime_utils import now_local
from ..core.exceptions import ValidationError
from ..users.service import AccessPolicy
from .model import UserPreferences
from .repository import PreferencesRepository

logger = logging.getLogger(__name__)


class PreferencesService:
    """Use case: read and replace the caller's own client settings."""

    def __init__(self, preferences: PreferencesRepository, access: AccessPolicy):
        self._preferences = preferences
        self._access = access

    def get(self, user_id: int) -> Optional[UserPreferences]:
        return self._preferences.get_for_user(int(user_id))

    def save(self, user_id: int, preferences: Any, *, now: datetime | None = None) -> UserPreferences:
        if not isinstance(preferences, dict):
            raise ValidationError("preferences must be a JSON object")
        user = self._access.require_active(user_id)

        saved = self._preferences.upsert(user_id=user.user_id, preferences=preferences, now=now or now_local())
        logger.info("preferences saved user=%s keys=%s", user.user_id, sorted(preferences))
        return saved
