"""SQLAlchemy adapter package for the local contact store."""

from __future__ import annotations

from .repositories import SqlAlchemyContactEventRepository, SqlAlchemyContactRepository
from .store import SqlAlchemyEventSynchronizer, SqlAlchemyRecordStore, run_locked
from .tables import ContactEventAction, contact_event_table, contact_table, create_all_tables
from .unit_of_work import (
    ContactRepositories,
    SqlAlchemyUnitOfWork,
    StartupError,
    build_session_factory,
    create_database_engine,
)

__all__ = [
    "ContactEventAction",
    "ContactRepositories",
    "SqlAlchemyContactEventRepository",
    "SqlAlchemyContactRepository",
    "SqlAlchemyEventSynchronizer",
    "SqlAlchemyRecordStore",
    "SqlAlchemyUnitOfWork",
    "StartupError",
    "build_session_factory",
    "contact_event_table",
    "contact_table",
    "create_all_tables",
    "create_database_engine",
    "run_locked",
]
