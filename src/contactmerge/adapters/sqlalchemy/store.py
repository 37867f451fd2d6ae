"""Local record store and event log on top of SQLAlchemy.

Every mutation appends to the ``contact_event`` table in the same transaction,
which is what ``SqlAlchemyEventSynchronizer`` replays into a session.

SQLAlchemy sessions are synchronous, so each unit of work runs in a worker
thread via ``asyncio.to_thread``; the event loop keeps serving other merge
groups while a statement is in flight. Units of work sharing one ``lock``
never overlap, which keeps SQLite writers from contending for the database.
"""

from __future__ import annotations

import asyncio
import threading
from dataclasses import dataclass, field, replace
from logging import getLogger
from typing import TYPE_CHECKING, Final
from uuid import uuid4

from contactmerge.domain.ports.persistence import (
    CreateResult,
    CreationError,
    RecordUpdateError,
    RemovalError,
    RemovalResult,
    UpdateErrorKind,
)

from .tables import ContactEventAction
from .unit_of_work import SqlAlchemyUnitOfWork

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence

    from sqlalchemy.orm import Session, sessionmaker

    from contactmerge.domain.model import ContactID, ContactRecord
    from contactmerge.domain.session import ContactSession

log = getLogger(__name__)

_EVENT_BATCH_SIZE: Final[int] = 500


def _new_contact_id() -> str:
    return uuid4().hex


async def run_locked[T](lock: threading.Lock, func: Callable[[], T]) -> T:
    """Run blocking ``func`` in a worker thread while holding ``lock``."""

    def locked() -> T:
        with lock:
            return func()

    return await asyncio.to_thread(locked)


@dataclass(slots=True)
class SqlAlchemyRecordStore:
    """Record store that rejects updates carrying a stale ``version``."""

    session_factory: sessionmaker[Session]
    id_factory: Callable[[], str] = field(default=_new_contact_id)
    lock: threading.Lock = field(default_factory=threading.Lock, repr=False)

    def unit_of_work(self) -> SqlAlchemyUnitOfWork:
        return SqlAlchemyUnitOfWork(self.session_factory)

    async def update(self, record: ContactRecord) -> ContactRecord:
        if record.id is None:
            raise RecordUpdateError(
                "Cannot update a contact without an ID", kind=UpdateErrorKind.REJECTED
            )
        return await run_locked(self.lock, lambda: self._update(record))

    async def remove(self, identifiers: Sequence[ContactID]) -> RemovalResult:
        return await run_locked(self.lock, lambda: self._remove(tuple(identifiers)))

    async def clear(self) -> None:
        deleted = await run_locked(self.lock, self._clear)
        log.info("Cleared %d contact(s)", deleted)

    async def add(self, records: Sequence[ContactRecord]) -> CreateResult:
        return await run_locked(self.lock, lambda: self._add(tuple(records)))

    def _update(self, record: ContactRecord) -> ContactRecord:
        assert record.id is not None
        with self.unit_of_work() as uow:
            contacts = uow.repositories.contacts
            current = contacts.get(record.id)
            if current is None:
                raise RecordUpdateError(
                    f"Contact {record.id} does not exist", kind=UpdateErrorKind.NOT_FOUND
                )
            stored_version = current.version or 1
            if record.version is not None and record.version != stored_version:
                raise RecordUpdateError(
                    f"Contact {record.id} was modified concurrently "
                    f"(version {record.version}, stored {stored_version})",
                    kind=UpdateErrorKind.CONFLICT,
                )
            updated = contacts.replace(record, version=stored_version + 1)
            uow.repositories.events.append(ContactEventAction.UPDATE, record.id)
            uow.commit()
        return updated

    def _remove(self, identifiers: tuple[ContactID, ...]) -> RemovalResult:
        removed: list[ContactID] = []
        errors: list[RemovalError] = []
        with self.unit_of_work() as uow:
            for identifier in identifiers:
                if uow.repositories.contacts.delete(identifier):
                    uow.repositories.events.append(ContactEventAction.DELETE, identifier)
                    removed.append(identifier)
                else:
                    errors.append(
                        RemovalError(id=identifier, message=f"Contact {identifier} does not exist")
                    )
            uow.commit()
        return RemovalResult(removed=tuple(removed), errors=tuple(errors))

    def _clear(self) -> int:
        with self.unit_of_work() as uow:
            deleted = uow.repositories.contacts.delete_all()
            uow.repositories.events.append(ContactEventAction.CLEAR)
            uow.commit()
        return deleted

    def _add(self, records: tuple[ContactRecord, ...]) -> CreateResult:
        created: list[ContactRecord] = []
        errors: list[CreationError] = []
        with self.unit_of_work() as uow:
            contacts = uow.repositories.contacts
            for index, record in enumerate(records):
                identifier = record.id or self.id_factory()
                if contacts.get(identifier) is not None:
                    errors.append(
                        CreationError(index=index, message=f"Contact {identifier} already exists")
                    )
                    continue
                stored = contacts.add(replace(record, id=identifier))
                uow.repositories.events.append(ContactEventAction.CREATE, identifier)
                created.append(stored)
            uow.commit()
        return CreateResult(created=tuple(created), errors=tuple(errors), total=len(records))


@dataclass(frozen=True, slots=True)
class _ReplayedEvent:
    id: int
    action: ContactEventAction
    contact_id: ContactID | None
    record: ContactRecord | None


@dataclass(slots=True)
class SqlAlchemyEventSynchronizer:
    """Replays the local ``contact_event`` log past a cursor into a session.

    Rows are read in a worker thread; the session itself is only touched on
    the event loop.
    """

    session_factory: sessionmaker[Session]
    session: ContactSession | None = None
    last_event_id: int | None = None
    lock: threading.Lock = field(default_factory=threading.Lock, repr=False)
    applied: int = field(default=0, init=False)

    async def sync(self) -> None:
        if self.last_event_id is None:
            self.last_event_id = await run_locked(self.lock, self._latest_id)
            log.debug("Anchored event cursor at %s", self.last_event_id)
            return

        while True:
            cursor = self.last_event_id
            batch = await run_locked(self.lock, lambda: self._read_batch(cursor))
            for event in batch:
                self._apply(event)
                self.last_event_id = event.id
            if len(batch) < _EVENT_BATCH_SIZE:
                return

    def _latest_id(self) -> int:
        with SqlAlchemyUnitOfWork(self.session_factory) as uow:
            return uow.repositories.events.latest_id()

    def _read_batch(self, cursor: int) -> list[_ReplayedEvent]:
        with SqlAlchemyUnitOfWork(self.session_factory) as uow:
            rows = uow.repositories.events.since(cursor, limit=_EVENT_BATCH_SIZE)
            return [
                _ReplayedEvent(
                    id=row.id,
                    action=row.action,
                    contact_id=row.contact_id,
                    record=self._load(uow, row.action, row.contact_id),
                )
                for row in rows
            ]

    @staticmethod
    def _load(
        uow: SqlAlchemyUnitOfWork,
        action: ContactEventAction,
        contact_id: ContactID | None,
    ) -> ContactRecord | None:
        if contact_id is None or action in {ContactEventAction.DELETE, ContactEventAction.CLEAR}:
            return None
        return uow.repositories.contacts.get(contact_id)

    def _apply(self, event: _ReplayedEvent) -> None:
        self.applied += 1
        if self.session is None:
            return
        if event.action is ContactEventAction.CLEAR:
            self.session.clear()
        elif event.contact_id is None:
            return
        elif event.action is ContactEventAction.DELETE:
            self.session.forget((event.contact_id,))
        elif event.record is not None:
            self.session.remember(event.record)
