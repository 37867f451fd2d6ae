"""Application orchestration entry points."""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING

from contactmerge.adapters.contacts_api import HttpEventSynchronizer, HttpRecordStore
from contactmerge.adapters.sqlalchemy import (
    SqlAlchemyEventSynchronizer,
    SqlAlchemyRecordStore,
    build_session_factory,
)
from contactmerge.config import Backend, get_backend, get_contacts_api_config
from contactmerge.domain.editing import ContactEditor
from contactmerge.domain.merge import validate_merge_request
from contactmerge.domain.ports.notifications import CreateMode, NullListener
from contactmerge.domain.session import ContactSession

if TYPE_CHECKING:
    from collections.abc import Sequence

    from contactmerge.domain.editing import DeletionTarget
    from contactmerge.domain.merge import AggregateResult, MergeRequest
    from contactmerge.domain.model import ContactRecord
    from contactmerge.domain.ports.notifications import ContactsListener
    from contactmerge.domain.ports.persistence import CreateResult, RecordStore, RemovalResult
    from contactmerge.domain.ports.synchronization import EventSynchronizer

log = getLogger(__name__)


async def _noop_close() -> None:
    return None


@dataclass(slots=True)
class ContactServices:
    """Store and event log for one backend, sharing one session."""

    store: RecordStore
    synchronizer: EventSynchronizer
    session: ContactSession
    aclose: Callable[[], Awaitable[None]] = _noop_close


type ServicesFactory = Callable[[], ContactServices]


def build_services(backend: Backend | str | None = None) -> ContactServices:
    """Wire the adapters for ``backend`` (defaults to ``CONTACTMERGE_BACKEND``)."""

    resolved = backend if isinstance(backend, Backend) else get_backend(backend)
    session = ContactSession()
    if resolved is Backend.HTTP:
        store = HttpRecordStore(config=get_contacts_api_config())
        synchronizer = HttpEventSynchronizer(client=store.client, session=session)
        return ContactServices(
            store=store, synchronizer=synchronizer, session=session, aclose=store.aclose
        )

    session_factory = build_session_factory()
    local_store = SqlAlchemyRecordStore(session_factory)
    return ContactServices(
        store=local_store,
        synchronizer=SqlAlchemyEventSynchronizer(
            session_factory, session=session, lock=local_store.lock
        ),
        session=session,
    )


async def _run_with_editor[T](
    operation: Callable[[ContactEditor], Awaitable[T]],
    *,
    services_factory: ServicesFactory | None,
    listener: ContactsListener | None,
) -> T:
    services = (services_factory or build_services)()
    editor = ContactEditor(
        store=services.store,
        synchronizer=services.synchronizer,
        listener=listener or NullListener(),
        session=services.session,
    )
    try:
        # anchor the event cursor so the closing sync replays this operation's changes
        await services.synchronizer.sync()
        return await operation(editor)
    finally:
        await services.aclose()


def merge_contacts(
    request: MergeRequest,
    *,
    services_factory: ServicesFactory | None = None,
    listener: ContactsListener | None = None,
) -> AggregateResult:
    """Merge every group of ``request`` using the configured backend."""

    validate_merge_request(request)
    log.info("Starting merge of %d group(s)", len(request))
    return asyncio.run(
        _run_with_editor(
            lambda editor: editor.merge(request),
            services_factory=services_factory,
            listener=listener,
        )
    )


def create_contacts(
    records: Sequence[ContactRecord],
    *,
    mode: CreateMode = CreateMode.DEFAULT,
    services_factory: ServicesFactory | None = None,
    listener: ContactsListener | None = None,
) -> CreateResult:
    return asyncio.run(
        _run_with_editor(
            lambda editor: editor.create(records, mode=mode),
            services_factory=services_factory,
            listener=listener,
        )
    )


def update_contact(
    record: ContactRecord,
    *,
    services_factory: ServicesFactory | None = None,
    listener: ContactsListener | None = None,
) -> ContactRecord:
    return asyncio.run(
        _run_with_editor(
            lambda editor: editor.update(record),
            services_factory=services_factory,
            listener=listener,
        )
    )


def delete_contacts(
    target: DeletionTarget,
    *,
    services_factory: ServicesFactory | None = None,
    listener: ContactsListener | None = None,
) -> RemovalResult | None:
    return asyncio.run(
        _run_with_editor(
            lambda editor: editor.remove(target),
            services_factory=services_factory,
            listener=listener,
        )
    )
