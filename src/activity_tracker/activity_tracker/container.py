from __future__ import annotations

from dataclasses import dataclass

from .attendance.service import AttendanceService
from .categories.mysql_category_repository import MySQLCategoryRepository
from .categories.repository import CategoryRepository
from .categories.service import CategoryResolver
from .core.constants import DEFAULT_BUSINESS_DAY_CUTOFF_HOUR
from .database.connection import DBConfig, DatabaseConnection
from .database.mysql_unit_of_work import MySQLTransactionManager
from .database.unit_of_work import TransactionManager
from .exports.service import ExportService
from .history.service import HistoryService
from .preferences.mysql_preferences_repository import MySQLPreferencesRepository
from .preferences.repository import PreferencesRepository
from .preferences.service import PreferencesService
from .reports.service import StatsService
from .sessions.service import SessionService
from .users.mysql_user_repository import MySQLUserRepository
from .users.repository import UserRepository
from .users.service import AccessPolicy


@dataclass(frozen=True)
class Container:
    tx: TransactionManager
    users_repo: UserRepository
    categories_repo: CategoryRepository
    preferences_repo: PreferencesRepository

    access: AccessPolicy
    session_service: SessionService
    attendance_service: AttendanceService
    history_service: HistoryService
    stats_service: StatsService
    export_service: ExportService
    preferences_service: PreferencesService


def wire_container(
    *,
    tx: TransactionManager,
    users_repo: UserRepository,
    categories_repo: CategoryRepository,
    preferences_repo: PreferencesRepository,
    cutoff_hour: int = DEFAULT_BUSINESS_DAY_CUTOFF_HOUR,
) -> Container:
    """Build services over any storage backend (MySQL in production, fakes in tests)."""

    access = AccessPolicy(users_repo)
    resolver = CategoryResolver(categories_repo)

    return Container(
        tx=tx,
        users_repo=users_repo,
        categories_repo=categories_repo,
        preferences_repo=preferences_repo,
        access=access,
        session_service=SessionService(tx, resolver, access),
        attendance_service=AttendanceService(tx, access, cutoff_hour=cutoff_hour),
        history_service=HistoryService(tx, access, cutoff_hour=cutoff_hour),
        stats_service=StatsService(tx, access),
        export_service=ExportService(tx, access),
        preferences_service=PreferencesService(preferences_repo, access),
    )


def build_container(*, db_config: dict, cutoff_hour: int = DEFAULT_BUSINESS_DAY_CUTOFF_HOUR) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))
    return wire_container(
        tx=MySQLTransactionManager(conn),
        users_repo=MySQLUserRepository(conn),
        categories_repo=MySQLCategoryRepository(conn),
        preferences_repo=MySQLPreferencesRepository(conn),
        cutoff_hour=cutoff_hour,
    )
