from __future__ import annotations

import os
from typing import TYPE_CHECKING

import pytest
from sqlalchemy.engine import Engine  # noqa: TC002
from sqlalchemy.orm import Session, sessionmaker  # noqa: TC002

from contactmerge.adapters.sqlalchemy import (
    SqlAlchemyRecordStore,
    build_session_factory,
    create_database_engine,
)

os.environ.setdefault("DATABASE_URI", "sqlite+pysqlite:///:memory:")

if TYPE_CHECKING:
    from collections.abc import Iterator


@pytest.fixture
def sqlite_engine() -> Iterator[Engine]:
    engine = create_database_engine("sqlite+pysqlite:///:memory:")
    try:
        yield engine
    finally:
        engine.dispose()


@pytest.fixture
def session_factory(sqlite_engine: Engine) -> sessionmaker[Session]:
    return build_session_factory(engine=sqlite_engine)


@pytest.fixture
def sqlite_store(session_factory: sessionmaker[Session]) -> SqlAlchemyRecordStore:
    counter = iter(range(1, 1_000))
    return SqlAlchemyRecordStore(session_factory, id_factory=lambda: f"local-{next(counter)}")
