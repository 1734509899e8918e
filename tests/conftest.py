from __future__ import annotations

import threading
from contextlib import contextmanager
from dataclasses import dataclass, field, replace
from datetime import date, datetime
from typing import Optional

import pytest

from src.activity_tracker.activity_tracker.attendance.model import DailyAttendanceRecord
from src.activity_tracker.activity_tracker.categories.model import Category
from src.activity_tracker.activity_tracker.container import wire_container
from src.activity_tracker.activity_tracker.core.enums import Role, UserStatus
from src.activity_tracker.activity_tracker.preferences.model import UserPreferences
from src.activity_tracker.activity_tracker.sessions.model import MonitorRow, SessionEntry
from src.activity_tracker.activity_tracker.users.model import User


ADMIN_ID = 1
STAFF_ID = 2
OTHER_STAFF_ID = 3
DISABLED_ID = 4

MEETING = 1
EMAIL = 2
DEVELOPMENT = 3
DELETED_CATEGORY = 4


@dataclass
class InMemoryUsers:
    users: dict[int, User]

    def get_by_id(self, user_id: int) -> Optional[User]:
        return self.users.get(int(user_id))


@dataclass
class InMemoryCategories:
    categories: dict[int, Category]

    def get_by_id(self, category_id: int) -> Optional[Category]:
        return self.categories.get(int(category_id))

    def rename(self, category_id: int, name: str) -> None:
        self.categories[category_id] = replace(self.categories[category_id], name=name)

    def soft_delete(self, category_id: int) -> None:
        self.categories[category_id] = replace(self.categories[category_id], is_deleted=True)


@dataclass
class InMemoryPreferences:
    saved: dict[int, UserPreferences] = field(default_factory=dict)

    def get_for_user(self, user_id: int) -> Optional[UserPreferences]:
        return self.saved.get(int(user_id))

    def upsert(self, *, user_id, preferences, now):
        self.saved[user_id] = UserPreferences(user_id=user_id, preferences=dict(preferences), updated_at=now)
        return self.saved[user_id]


@dataclass
class StoreState:
    sessions: dict[int, SessionEntry] = field(default_factory=dict)
    attendance: dict[tuple[int, date], DailyAttendanceRecord] = field(default_factory=dict)
    next_entry_id: int = 1
    next_attendance_id: int = 1

    def copy(self) -> "StoreState":
        return StoreState(
            sessions=dict(self.sessions),
            attendance=dict(self.attendance),
            next_entry_id=self.next_entry_id,
            next_attendance_id=self.next_attendance_id,
        )


class InMemorySessions:
    def __init__(self, state: StoreState, users: InMemoryUsers):
        self._state = state
        self._users = users

    def get_by_id(self, entry_id: int):
        return self._state.sessions.get(int(entry_id))

    def get_open_for_user(self, user_id: int):
        found = [e for e in self._state.sessions.values() if e.user_id == user_id and e.end_time is None]
        assert len(found) <= 1, "storage holds two open entries"
        return found[0] if found else None

    def list_for_user_between(self, user_id, start, end):
        items = [e for e in self._state.sessions.values() if e.user_id == user_id and start <= e.start_time < end]
        return sorted(items, key=lambda e: (e.start_time, e.entry_id))

    def list_for_users_between(self, user_ids, start, end):
        items = [e for e in self._state.sessions.values() if e.user_id in set(user_ids) and start <= e.start_time <= end]
        return sorted(items, key=lambda e: (e.start_time, e.entry_id))

    def append(self, *, user_id, category_id, category_name_snapshot, start_time, end_time=None,
               duration_seconds=None, is_manual=False, now):
        if end_time is None and self.get_open_for_user(user_id):
            raise RuntimeError("unique constraint: one open entry per user")
        entry = SessionEntry(
            entry_id=self._state.next_entry_id,
            user_id=user_id,
            category_id=category_id,
            category_name_snapshot=category_name_snapshot,
            start_time=start_time,
            end_time=end_time,
            duration_seconds=duration_seconds,
            is_manual=is_manual,
            created_at=now,
            updated_at=now,
        )
        self._state.sessions[entry.entry_id] = entry
        self._state.next_entry_id += 1
        return entry

    def close(self, *, entry_id, end_time, duration_seconds, now):
        entry = replace(self._state.sessions[entry_id], end_time=end_time, duration_seconds=duration_seconds, updated_at=now)
        self._state.sessions[entry_id] = entry
        return entry

    def update_category(self, *, entry_id, category_id, category_name_snapshot, now):
        entry = replace(
            self._state.sessions[entry_id],
            category_id=category_id,
            category_name_snapshot=category_name_snapshot,
            is_edited=True,
            updated_at=now,
        )
        self._state.sessions[entry_id] = entry
        return entry

    def delete(self, entry_id):
        return self._state.sessions.pop(int(entry_id), None) is not None

    def first_for_user_from(self, user_id, instant):
        later = self.list_for_user_between(user_id, instant, datetime.max)
        return later[0] if later else None

    def _owned(self, items):
        items = sorted(items, key=lambda e: (e.start_time, e.entry_id), reverse=True)
        rows = []
        for e in items:
            user = self._users.get_by_id(e.user_id)
            rows.append(MonitorRow(entry=e, full_name=user.full_name, username=user.username))
        return rows

    def list_recent(self, *, since, limit):
        items = [e for e in self._state.sessions.values() if e.created_at and e.created_at >= since]
        return self._owned(items)[:limit]

    def list_owned(self, *, user_id=None, start=None, end=None):
        return self._owned(
            e
            for e in self._state.sessions.values()
            if (user_id is None or e.user_id == user_id)
            and (start is None or e.start_time >= start)
            and (end is None or e.start_time <= end)
        )


class InMemoryAttendance:
    def __init__(self, state: StoreState):
        self._state = state

    def get_for_user_and_date(self, user_id, work_date):
        return self._state.attendance.get((user_id, work_date))

    def upsert(self, *, user_id, work_date, has_left, left_at, is_fixed, now):
        existing = self._state.attendance.get((user_id, work_date))
        if existing:
            record = replace(existing, has_left=has_left, left_at=left_at, is_fixed=is_fixed, updated_at=now)
        else:
            record = DailyAttendanceRecord(
                attendance_id=self._state.next_attendance_id,
                user_id=user_id,
                work_date=work_date,
                has_left=has_left,
                left_at=left_at,
                is_fixed=is_fixed,
                created_at=now,
                updated_at=now,
            )
            self._state.next_attendance_id += 1
        self._state.attendance[(user_id, work_date)] = record
        return record


@dataclass
class InMemoryUnitOfWork:
    sessions: InMemorySessions
    attendance: InMemoryAttendance


class InMemoryTransactionManager:
    """Serialises transactions with one lock; changes are staged and applied on success."""

    def __init__(self, users: InMemoryUsers):
        self.state = StoreState()
        self._users = users
        self._lock = threading.RLock()
        self.locked_users: list[int] = []

    @contextmanager
    def transaction(self, *, lock_user_id=None, read_only=False):
        with self._lock:
            if lock_user_id is not None:
                self.locked_users.append(lock_user_id)
            staged = self.state.copy()
            yield InMemoryUnitOfWork(InMemorySessions(staged, self._users), InMemoryAttendance(staged))
            if not read_only:
                self.state = staged

    def open_entries(self, user_id: int) -> list[SessionEntry]:
        return [e for e in self.state.sessions.values() if e.user_id == user_id and e.end_time is None]

    def seed_entry(self, **kwargs) -> SessionEntry:
        """Insert a ledger row directly, bypassing the services."""

        with self.transaction() as uow:
            kwargs.setdefault("category_id", None)
            kwargs.setdefault("now", kwargs["start_time"])
            return uow.sessions.append(**kwargs)


@pytest.fixture
def fixed_now() -> datetime:
    # Monday
    return datetime(2026, 2, 2, 9, 0, 0)


@pytest.fixture
def users() -> InMemoryUsers:
    return InMemoryUsers(
        {
            ADMIN_ID: User(user_id=ADMIN_ID, full_name="Admin", username="admin", role=Role.ADMIN),
            STAFF_ID: User(user_id=STAFF_ID, full_name="Staff A", username="staff_a", role=Role.STAFF),
            OTHER_STAFF_ID: User(user_id=OTHER_STAFF_ID, full_name="Staff B", username="staff_b", role=Role.STAFF),
            DISABLED_ID: User(
                user_id=DISABLED_ID,
                full_name="Gone",
                username="gone",
                role=Role.STAFF,
                status=UserStatus.DISABLED,
            ),
        }
    )


@pytest.fixture
def categories() -> InMemoryCategories:
    return InMemoryCategories(
        {
            MEETING: Category(category_id=MEETING, name="Meeting"),
            EMAIL: Category(category_id=EMAIL, name="Email"),
            DEVELOPMENT: Category(category_id=DEVELOPMENT, name="Development"),
            DELETED_CATEGORY: Category(category_id=DELETED_CATEGORY, name="Old", is_deleted=True),
        }
    )


@pytest.fixture
def tx(users) -> InMemoryTransactionManager:
    return InMemoryTransactionManager(users)


@pytest.fixture
def container(tx, users, categories):
    return wire_container(
        tx=tx,
        users_repo=users,
        categories_repo=categories,
        preferences_repo=InMemoryPreferences(),
        cutoff_hour=5,
    )
