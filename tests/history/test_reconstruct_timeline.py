from __future__ import annotations

from datetime import date, datetime, timedelta

import pytest

from src.activity_tracker.activity_tracker.core.exceptions import AuthorizationError
from src.activity_tracker.activity_tracker.history.service import reconstruct_timeline
from src.activity_tracker.activity_tracker.sessions.model import SessionEntry

ADMIN_ID = 1
STAFF_ID = 2
OTHER_STAFF_ID = 3
MEETING, EMAIL, DEVELOPMENT = 1, 2, 3

DAY = date(2026, 2, 2)


def _at(hour: int, minute: int = 0) -> datetime:
    return datetime(2026, 2, 2, hour, minute)


def _entry(entry_id, start, end=None, duration=None, name="Meeting", is_manual=False) -> SessionEntry:
    return SessionEntry(
        entry_id=entry_id,
        user_id=STAFF_ID,
        category_id=None,
        category_name_snapshot=name,
        start_time=start,
        end_time=end,
        duration_seconds=duration,
        is_manual=is_manual,
    )


def test_each_entry_ends_where_the_next_starts():
    entries = [
        _entry(1, _at(9), _at(9, 5), duration=300),
        _entry(2, _at(9, 30), _at(12), duration=99999),
        _entry(3, _at(10, 30)),
    ]

    timeline = reconstruct_timeline(entries)

    assert [t.effective_seconds for t in timeline] == [30 * 60, 60 * 60, None]
    assert timeline[0].effective_end == _at(9, 30)
    assert timeline[1].effective_end == _at(10, 30)
    assert timeline[2].is_active


def test_input_order_does_not_matter():
    entries = [_entry(2, _at(10)), _entry(1, _at(9), _at(9), duration=0)]

    timeline = reconstruct_timeline(entries)

    assert [t.entry.entry_id for t in timeline] == [1, 2]
    assert timeline[0].effective_seconds == 3600


def test_last_closed_entry_keeps_stored_duration():
    timeline = reconstruct_timeline([_entry(1, _at(9), _at(10), duration=3600)])

    assert timeline[0].effective_end == _at(10)
    assert timeline[0].effective_seconds == 3600
    assert not timeline[0].is_active


def test_last_closed_entry_without_duration_uses_elapsed_time():
    timeline = reconstruct_timeline([_entry(1, _at(9), _at(9, 45))])

    assert timeline[0].effective_seconds == 45 * 60


def test_negative_or_garbage_durations_read_as_zero():
    assert reconstruct_timeline([_entry(1, _at(9), _at(10), duration=-50)])[0].effective_seconds == 0
    assert reconstruct_timeline([_entry(1, _at(9), _at(10), duration="junk")])[0].effective_seconds == 0


def test_zero_length_entries_are_dropped_unless_alone():
    entries = [
        _entry(1, _at(9), _at(9), duration=0),
        _entry(2, _at(9), _at(10), duration=3600, name="Email"),
    ]

    timeline = reconstruct_timeline(entries)

    assert [t.entry.entry_id for t in timeline] == [2]
    assert len(reconstruct_timeline([_entry(1, _at(8), _at(8), duration=0, is_manual=True)])) == 1


def test_empty_day():
    assert reconstruct_timeline([]) == []


def test_switch_then_stop_scenario(container):
    sessions = container.session_service
    sessions.switch(STAFF_ID, MEETING, now=_at(9))
    sessions.switch(STAFF_ID, EMAIL, now=_at(9, 30))
    sessions.stop(STAFF_ID, now=_at(10))

    timeline = container.history_service.get_history(STAFF_ID, DAY)

    assert [(t.entry.category_name_snapshot, t.effective_seconds) for t in timeline] == [
        ("Meeting", 1800),
        ("Email", 1800),
    ]
    assert all(not t.is_active for t in timeline)


def test_manual_entry_is_stretched_to_the_next_one(container):
    sessions = container.session_service
    manual = sessions.add_manual(STAFF_ID, EMAIL, _at(8), now=_at(8, 30))
    assert manual.duration_seconds == 0
    sessions.switch(STAFF_ID, MEETING, now=_at(9))

    timeline = container.history_service.get_history(STAFF_ID, DAY)

    first = timeline[0]
    assert first.entry.entry_id == manual.entry_id
    assert first.effective_end == _at(9)
    assert first.effective_seconds == 3600
    assert timeline[1].is_active


def test_deleting_an_entry_extends_its_predecessor(container):
    sessions = container.session_service
    sessions.switch(STAFF_ID, MEETING, now=_at(9))
    middle = sessions.switch(STAFF_ID, EMAIL, now=_at(9, 30))
    sessions.switch(STAFF_ID, DEVELOPMENT, now=_at(10, 30))
    sessions.stop(STAFF_ID, now=_at(11))

    sessions.delete(middle.entry_id, acting_user_id=STAFF_ID)
    timeline = container.history_service.get_history(STAFF_ID, DAY)

    assert [t.effective_seconds for t in timeline] == [90 * 60, 30 * 60]


def test_history_uses_business_day_window(container, tx):
    tx.seed_entry(user_id=STAFF_ID, category_name_snapshot="Late", start_time=datetime(2026, 2, 2, 4, 59),
                  end_time=datetime(2026, 2, 2, 5, 30), duration_seconds=31 * 60)
    tx.seed_entry(user_id=STAFF_ID, category_name_snapshot="Day", start_time=_at(9),
                  end_time=_at(10), duration_seconds=3600)
    tx.seed_entry(user_id=STAFF_ID, category_name_snapshot="Night", start_time=datetime(2026, 2, 3, 1, 30),
                  end_time=datetime(2026, 2, 3, 2, 0), duration_seconds=1800)

    names = [t.entry.category_name_snapshot for t in container.history_service.get_history(STAFF_ID, DAY)]
    previous = container.history_service.get_history(STAFF_ID, date(2026, 2, 1))

    assert names == ["Day", "Night"]
    assert [t.entry.category_name_snapshot for t in previous] == ["Late"]


def test_other_users_history_requires_admin(container):
    container.session_service.switch(STAFF_ID, MEETING, now=_at(9))
    history = container.history_service

    with pytest.raises(AuthorizationError):
        history.get_history(STAFF_ID, DAY, acting_user_id=OTHER_STAFF_ID)

    assert len(history.get_history(STAFF_ID, DAY, acting_user_id=ADMIN_ID)) == 1
    assert len(history.get_history(STAFF_ID, DAY, acting_user_id=STAFF_ID)) == 1


def test_timeline_to_dict():
    item = reconstruct_timeline([_entry(1, _at(9)), _entry(2, _at(9) + timedelta(minutes=10))])[0]

    data = item.to_dict()

    assert data["effective_seconds"] == 600
    assert data["effective_end"] == "2026-02-02T09:10:00"
    assert data["is_active"] is False
    assert data["category_name"] == "Meeting"


def test_successor_after_the_day_ends_the_last_entry():
    entries = [_entry(1, _at(16), _at(17), duration=3600), _entry(2, _at(17, 30), _at(17, 30), duration=0, is_manual=True)]
    tomorrow = _entry(3, datetime(2026, 2, 3, 9, 0))

    timeline = reconstruct_timeline(entries, tomorrow)

    assert [t.entry.entry_id for t in timeline] == [1, 2]
    assert timeline[1].effective_end == datetime(2026, 2, 3, 9, 0)
    assert timeline[1].effective_seconds == 15 * 3600 + 30 * 60


def test_manual_entry_with_no_elapsed_time_is_kept():
    entries = [
        _entry(1, _at(9), _at(9), duration=0, name="Email", is_manual=True),
        _entry(2, _at(9), _at(10), duration=3600),
    ]

    timeline = reconstruct_timeline(entries)

    assert [t.entry.entry_id for t in timeline] == [1, 2]
    assert timeline[0].effective_seconds == 0


def test_manual_entry_last_in_day_runs_until_next_days_first_entry(container):
    sessions = container.session_service
    sessions.switch(STAFF_ID, MEETING, now=_at(16))
    sessions.stop(STAFF_ID, now=_at(17))
    manual = sessions.add_manual(STAFF_ID, EMAIL, _at(17, 30), now=_at(18))
    sessions.switch(STAFF_ID, DEVELOPMENT, now=datetime(2026, 2, 3, 9, 0))

    timeline = container.history_service.get_history(STAFF_ID, DAY)

    assert [t.entry.category_name_snapshot for t in timeline] == ["Meeting", "Email"]
    assert timeline[0].effective_seconds == 90 * 60
    email = timeline[1]
    assert email.entry.entry_id == manual.entry_id
    assert email.effective_end == datetime(2026, 2, 3, 9, 0)
    assert not email.is_active


def test_next_day_history_is_unaffected_by_previous_day(container):
    sessions = container.session_service
    sessions.add_manual(STAFF_ID, EMAIL, _at(17, 30), now=_at(18))
    sessions.switch(STAFF_ID, DEVELOPMENT, now=datetime(2026, 2, 3, 9, 0))

    timeline = container.history_service.get_history(STAFF_ID, date(2026, 2, 3))

    assert [t.entry.category_name_snapshot for t in timeline] == ["Development"]
    assert timeline[0].is_active
