"""Example: drive the services directly (no Flask).

Controllers are thin; the rules live in the services, so the same calls work
from scripts, jobs or a shell.
"""

import importlib

from config import get_settings_module

from src.activity_tracker.activity_tracker.common.datetime_utils import now_local
from src.activity_tracker.activity_tracker.container import build_container


def main():
    settings = importlib.import_module(get_settings_module())
    container = build_container(db_config=settings.DB_CONFIG, cutoff_hour=settings.BUSINESS_DAY_CUTOFF_HOUR)

    entry = container.session_service.switch(user_id=2, category_id=1)
    print("started:", entry.to_dict())

    for item in container.history_service.get_history(2, container.attendance_service.work_date(now_local())):
        print(item.to_dict())

if __name__ == "__main__":
    main()
