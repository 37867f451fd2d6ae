"""Listener that reports workflow notifications through logging."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Sequence

    from contactmerge.domain.merge import AggregateResult
    from contactmerge.domain.model import ContactID, ContactRecord
    from contactmerge.domain.ports.notifications import ContactsListener, CreateMode
    from contactmerge.domain.ports.persistence import CreateResult

log = logging.getLogger(__name__)


class LoggingListener:
    def __init__(self, logger: logging.Logger | None = None) -> None:
        self._log = logger or log
        self.last_percent = 0

    def merge_started(self) -> None:
        self._log.info("Merging contacts...")

    def progress_updated(self, percent: int) -> None:
        self.last_percent = percent
        self._log.info("Merge progress: %d%%", percent)

    def record_updated(self, record: ContactRecord) -> None:
        self._log.debug("Contact %s (%s) merged", record.id, record.name)

    def contacts_changed(self) -> None:
        self._log.debug("Contact list changed")

    def merge_finished(self, result: AggregateResult) -> None:
        self._log.info(
            "Merged %d contact(s), removed %d duplicate(s), %d error(s)",
            len(result.updated),
            len(result.removed),
            len(result.errors),
        )
        for message in result.errors:
            self._log.warning(message)

    def contacts_created(self, result: CreateResult, mode: CreateMode) -> None:
        self._log.info(
            "Created %d of %d contact(s) (%s)", len(result.created), result.total, mode
        )
        for error in result.errors:
            self._log.warning("Contact #%d: %s", error.index, error.message)

    def contact_updated(self, record: ContactRecord) -> None:
        self._log.info("Contact %s edited", record.id)

    def contacts_deleted(self, identifiers: Sequence[ContactID] | None) -> None:
        if identifiers is None:
            self._log.info("All contacts deleted")
            return
        self._log.info("%d contact(s) deleted", len(identifiers))


if TYPE_CHECKING:
    _listener_check: ContactsListener = LoggingListener()
