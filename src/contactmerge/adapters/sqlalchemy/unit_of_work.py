"""SQLAlchemy-backed unit of work for the local contact store."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Literal

from sqlalchemy import create_engine, make_url
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from contactmerge.config.storage import get_database_config

from .repositories import SqlAlchemyContactEventRepository, SqlAlchemyContactRepository
from .tables import create_all_tables

if TYPE_CHECKING:
    from types import TracebackType

    from sqlalchemy.engine import Engine


class StartupError(RuntimeError):
    """Raised when a SQLAlchemy unit of work is used outside its lifecycle."""


def create_database_engine(uri: str) -> Engine:
    """Create an engine whose connections may be used from worker threads."""

    url = make_url(uri)
    if url.get_backend_name() == "sqlite" and url.database in {None, "", ":memory:"}:
        # one shared connection, otherwise each worker thread sees its own empty database
        return create_engine(
            url, future=True, poolclass=StaticPool, connect_args={"check_same_thread": False}
        )
    return create_engine(url, future=True)


def build_session_factory(
    *,
    engine: Engine | None = None,
    database_uri: str | None = None,
) -> sessionmaker[Session]:
    """Create the engine (unless given), ensure the tables exist and bind a session factory."""

    resolved_engine = engine or create_database_engine(database_uri or get_database_config().uri)
    create_all_tables(resolved_engine)
    return sessionmaker(bind=resolved_engine, expire_on_commit=False)


@dataclass(slots=True)
class ContactRepositories:
    """Repositories required to persist contacts and their change log."""

    contacts: SqlAlchemyContactRepository
    events: SqlAlchemyContactEventRepository


class SqlAlchemyUnitOfWork:
    """Unit of work managing one SQLAlchemy session."""

    def __init__(self, session_factory: sessionmaker[Session]) -> None:
        self.session_factory = session_factory
        self._session: Session | None = None
        self._repositories: ContactRepositories | None = None

    def __enter__(self) -> SqlAlchemyUnitOfWork:
        self.session = self.session_factory()
        self._repositories = ContactRepositories(
            contacts=SqlAlchemyContactRepository(self.session),
            events=SqlAlchemyContactEventRepository(self.session),
        )
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        traceback: TracebackType | None,
    ) -> Literal[False]:
        if exc_type is not None:
            self.rollback()
        self.session.close()
        self.session = None
        self._repositories = None
        return False

    def commit(self) -> None:
        self.session.commit()

    def rollback(self) -> None:
        self.session.rollback()

    @property
    def repositories(self) -> ContactRepositories:
        if self._repositories is None:
            raise StartupError("Unit of work session not initialised")
        return self._repositories

    @property
    def session(self) -> Session:
        if self._session is None:
            raise StartupError("Unit of work session not initialised")
        return self._session

    @session.setter
    def session(self, session: Session | None) -> None:
        if self._session is not None and session is not None:
            raise StartupError("Unit of work session already initialised")
        self._session = session
