from __future__ import annotations

from typing import Sequence

from ..core.exceptions import AuthenticationError, AuthorizationError, NotFoundError, UserNotActiveError
from .model import User
from .repository import UserRepository


class AccessPolicy:
    """Use case: decide whether a user may act, and on whose data.

    Status and role come from the user directory; the rules here are the only
    ones the tracking engine applies (active users only, owner or admin).
    """

    def __init__(self, users: UserRepository):
        self._users = users

    def resolve_caller(self, user_id: int) -> User:
        user = self._users.get_by_id(int(user_id))
        if not user:
            raise AuthenticationError("Unknown user")
        return user

    def require_active(self, user_id: int) -> User:
        user = self._users.get_by_id(int(user_id))
        if not user:
            raise NotFoundError("User not found")
        if not user.is_active:
            raise UserNotActiveError(f"User {user.user_id} is {user.status.value}")
        return user

    def require_owner_or_admin(self, *, acting_user_id: int, owner_id: int) -> User:
        actor = self.require_active(acting_user_id)
        if actor.user_id != int(owner_id) and not actor.is_admin:
            raise AuthorizationError("Only the owner or an admin may do this")
        return actor

    def require_admin(self, acting_user_id: int) -> User:
        actor = self.require_active(acting_user_id)
        if not actor.is_admin:
            raise AuthorizationError("Admin only")
        return actor

    def require_scope(self, acting_user_id: int, user_ids: Sequence[int]) -> User:
        """Admins may read anyone's data; everybody else only their own."""

        actor = self.require_active(acting_user_id)
        if not actor.is_admin and any(int(uid) != actor.user_id for uid in user_ids):
            raise AuthorizationError("Only admins can view other users' data")
        return actor
