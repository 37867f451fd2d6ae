"""Notification contract between the contact workflows and the presentation layer."""

from __future__ import annotations

from enum import StrEnum
from logging import getLogger
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence

    from contactmerge.domain.merge.contracts import AggregateResult
    from contactmerge.domain.model import ContactID, ContactRecord
    from contactmerge.domain.ports.persistence import CreateResult

log = getLogger(__name__)


class CreateMode(StrEnum):
    """Where a bulk create originates; presentation code reacts differently to imports."""

    DEFAULT = "default"
    IMPORT = "import"


@runtime_checkable
class MergeListener(Protocol):
    """Callbacks fired while a merge runs."""

    def merge_started(self) -> None: ...

    def progress_updated(self, percent: int) -> None: ...

    def record_updated(self, record: ContactRecord) -> None: ...

    def contacts_changed(self) -> None: ...

    def merge_finished(self, result: AggregateResult) -> None: ...


@runtime_checkable
class ContactsListener(MergeListener, Protocol):
    """Full set of callbacks fired by the contact editor."""

    def contacts_created(self, result: CreateResult, mode: CreateMode) -> None: ...

    def contact_updated(self, record: ContactRecord) -> None: ...

    def contacts_deleted(self, identifiers: Sequence[ContactID] | None) -> None: ...


class NullListener:
    """Listener that ignores every notification."""

    def merge_started(self) -> None:
        return None

    def progress_updated(self, percent: int) -> None:
        _ = percent

    def record_updated(self, record: ContactRecord) -> None:
        _ = record

    def contacts_changed(self) -> None:
        return None

    def merge_finished(self, result: AggregateResult) -> None:
        _ = result

    def contacts_created(self, result: CreateResult, mode: CreateMode) -> None:
        _ = result, mode

    def contact_updated(self, record: ContactRecord) -> None:
        _ = record

    def contacts_deleted(self, identifiers: Sequence[ContactID] | None) -> None:
        _ = identifiers


if TYPE_CHECKING:
    _listener_check: ContactsListener = NullListener()


def notify[**P](callback: Callable[P, object], *args: P.args, **kwargs: P.kwargs) -> None:
    """Invoke one listener callback; a failing listener is logged and never propagated."""

    try:
        callback(*args, **kwargs)
    except Exception:
        log.exception("Listener callback %s failed", getattr(callback, "__name__", callback))
