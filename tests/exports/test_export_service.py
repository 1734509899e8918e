from __future__ import annotations

from datetime import datetime, timedelta

import pytest

from src.activity_tracker.activity_tracker.core.exceptions import AuthorizationError, ValidationError

ADMIN_ID = 1
STAFF_ID = 2
OTHER_STAFF_ID = 3
DISABLED_ID = 4


def _seed(tx, user_id, name, start, minutes=30):
    return tx.seed_entry(
        user_id=user_id,
        category_name_snapshot=name,
        start_time=start,
        end_time=start + timedelta(minutes=minutes),
        duration_seconds=minutes * 60,
    )


@pytest.fixture
def ledger(tx):
    return [
        _seed(tx, STAFF_ID, "Meeting", datetime(2026, 1, 5, 9)),
        _seed(tx, STAFF_ID, "Email", datetime(2026, 1, 20, 9)),
        _seed(tx, OTHER_STAFF_ID, "Development", datetime(2026, 1, 10, 9)),
    ]


def test_staff_get_only_their_own_rows_newest_first(container, ledger):
    rows = container.export_service.export_rows(acting_user_id=STAFF_ID)

    assert [r.entry.category_name_snapshot for r in rows] == ["Email", "Meeting"]
    assert {r.username for r in rows} == {"staff_a"}


def test_staff_cannot_export_someone_else(container, ledger):
    with pytest.raises(AuthorizationError):
        container.export_service.export_rows(acting_user_id=STAFF_ID, target_user_id=OTHER_STAFF_ID)


def test_admin_gets_everyone_or_one_target(container, ledger):
    exports = container.export_service

    everyone = exports.export_rows(acting_user_id=ADMIN_ID)
    target = exports.export_rows(acting_user_id=ADMIN_ID, target_user_id=OTHER_STAFF_ID)

    assert len(everyone) == 3
    assert [r.entry.category_name_snapshot for r in target] == ["Development"]
    assert target[0].full_name == "Staff B"


def test_range_filter_on_start_time(container, ledger):
    rows = container.export_service.export_rows(
        acting_user_id=ADMIN_ID,
        start=datetime(2026, 1, 6),
        end=datetime(2026, 1, 20, 9),
    )

    assert [r.entry.category_name_snapshot for r in rows] == ["Email", "Development"]


def test_rows_keep_snapshot_name_after_rename(container, categories, fixed_now):
    container.session_service.switch(STAFF_ID, 1, now=fixed_now)
    container.session_service.stop(STAFF_ID, now=fixed_now + timedelta(minutes=20))
    categories.rename(1, "Standup")

    row = container.export_service.export_rows(acting_user_id=STAFF_ID)[0].to_dict()

    assert row["category_name"] == "Meeting"
    assert row["duration_seconds"] == 1200
    assert row["username"] == "staff_a"
    assert row["created_at"] == fixed_now.isoformat()


def test_invalid_range_and_inactive_user(container):
    exports = container.export_service
    with pytest.raises(ValidationError):
        exports.export_rows(acting_user_id=STAFF_ID, start=datetime(2026, 2, 1), end=datetime(2026, 1, 1))
    with pytest.raises(AuthorizationError):
        exports.export_rows(acting_user_id=DISABLED_ID)
