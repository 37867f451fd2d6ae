"""Application service for creating, editing, deleting and merging contacts."""

from __future__ import annotations

from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING, Final, Literal

from contactmerge.domain.merge import MergeCoordinator, validate_merge_request
from contactmerge.domain.ports.notifications import CreateMode, notify
from contactmerge.domain.session import ContactSession

if TYPE_CHECKING:
    from collections.abc import Sequence

    from contactmerge.domain.merge import AggregateResult, MergeRequest
    from contactmerge.domain.model import ContactID, ContactRecord
    from contactmerge.domain.ports.notifications import ContactsListener
    from contactmerge.domain.ports.persistence import CreateResult, RecordStore, RemovalResult
    from contactmerge.domain.ports.synchronization import EventSynchronizer

log = getLogger(__name__)

ALL_CONTACTS: Final = "all"
type DeletionTarget = Sequence[ContactID] | Literal["all"]


@dataclass(slots=True)
class ContactEditor:
    store: RecordStore
    synchronizer: EventSynchronizer
    listener: ContactsListener
    session: ContactSession = field(default_factory=ContactSession)

    async def create(
        self,
        records: Sequence[ContactRecord],
        *,
        mode: CreateMode = CreateMode.DEFAULT,
    ) -> CreateResult:
        result = await self.store.add(records)
        for record in result.created:
            self.session.remember(record)
        log.info(
            "Created %d of %d contact(s) (%d error(s))",
            len(result.created),
            result.total,
            len(result.errors),
        )
        await self.synchronizer.sync()
        notify(self.listener.contacts_created, result, mode)
        return result

    async def update(self, record: ContactRecord) -> ContactRecord:
        updated = await self.store.update(record)
        self.session.remember(updated)
        notify(self.listener.contact_updated, updated)
        await self.synchronizer.sync()
        return updated

    async def remove(self, target: DeletionTarget) -> RemovalResult | None:
        """Delete the given contacts, or every contact when ``target`` is ``"all"``."""

        if target == ALL_CONTACTS:
            await self.store.clear()
            self.session.clear()
            log.info("Deleted all contacts")
            notify(self.listener.contacts_deleted, None)
            await self.synchronizer.sync()
            return None

        identifiers = tuple(target)
        result = await self.store.remove(identifiers)
        self.session.forget(result.removed)
        for error in result.errors:
            log.warning("Could not delete contact %s: %s", error.id, error.message)
        notify(self.listener.contacts_deleted, result.removed)
        await self.synchronizer.sync()
        return result

    async def merge(self, request: MergeRequest) -> AggregateResult:
        validate_merge_request(request)
        coordinator = MergeCoordinator(self.store, self.synchronizer, self.listener)
        try:
            result = await coordinator.run(request)
        finally:
            if coordinator.last_result is not None:
                self._apply_merge(coordinator.last_result)
        return result

    def _apply_merge(self, result: AggregateResult) -> None:
        self.session.forget(result.removed)
        for record in result.updated:
            cached = self.session.contacts.get(record.id) if record.id is not None else None
            # the closing sync may already have cached the stored, newer version
            if cached is not None and (cached.version or 0) > (record.version or 0):
                continue
            self.session.remember(record)
