"""SQLAlchemy table metadata for the local contact store."""

from __future__ import annotations

from datetime import UTC, datetime
from enum import StrEnum
from typing import TYPE_CHECKING

from sqlalchemy import (
    JSON,
    Column,
    DateTime,
    Dialect,
    Enum,
    Index,
    Integer,
    MetaData,
    String,
    Table,
    TypeDecorator,
)

if TYPE_CHECKING:
    from sqlalchemy.engine import Engine

metadata = MetaData()


class UTCDateTime(TypeDecorator[datetime]):
    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(self, value: datetime | None, dialect: Dialect) -> datetime | None:
        _ = dialect
        if value is None:
            return None
        if value.tzinfo is None:
            value = value.replace(tzinfo=UTC)
        return value.astimezone(UTC)

    def process_result_value(self, value: datetime | None, dialect: Dialect) -> datetime | None:
        _ = dialect
        if value is None:
            return None
        return value if value.tzinfo else value.replace(tzinfo=UTC)


class ContactEventAction(StrEnum):
    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"
    CLEAR = "clear"


contact_table = Table(
    "contact",
    metadata,
    Column("id", String(64), primary_key=True),
    Column("name", String(512), nullable=False, default=""),
    Column("emails", JSON, nullable=False, default=list),
    Column("cards", JSON, nullable=False, default=list),
    Column("version", Integer, nullable=False, default=1),
    Column("modified_at", UTCDateTime(), nullable=False),
)

contact_event_table = Table(
    "contact_event",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("contact_id", String(64), nullable=True),
    Column(
        "action",
        Enum(ContactEventAction, native_enum=False, length=16),
        nullable=False,
    ),
    Column("created_at", UTCDateTime(), nullable=False),
    Index("ix_contact_event_contact_id", "contact_id"),
)


def create_all_tables(engine: Engine) -> None:
    metadata.create_all(engine, checkfirst=True)
