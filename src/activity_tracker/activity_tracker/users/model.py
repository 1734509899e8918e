from __future__ import annotations

from dataclasses import dataclass

from ..core.enums import Role, UserStatus


@dataclass(frozen=True)
class User:
    """Domain entity: a tracked worker.

    Note: plain data object, no database access. Identity and status changes
    are owned by the user directory, the engine only reads them.
    """

    user_id: int
    full_name: str
    username: str
    role: Role
    status: UserStatus = UserStatus.ACTIVE

    @property
    def is_active(self) -> bool:
        return self.status == UserStatus.ACTIVE

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN
