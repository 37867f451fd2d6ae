"""Ports for persisting contact records."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from typing import TYPE_CHECKING, Protocol, runtime_checkable

from contactmerge.domain.errors import ContactMergeError

if TYPE_CHECKING:
    from collections.abc import Sequence

    from contactmerge.domain.model import ContactID, ContactRecord


class UpdateErrorKind(StrEnum):
    """Why a store refused to update a record.

    Only ``CONFLICT`` voids the attempted update; every other kind still counts
    the caller's record as the attempted value.
    """

    CONFLICT = "conflict"
    NOT_FOUND = "not_found"
    REJECTED = "rejected"
    TRANSPORT = "transport"


class RecordUpdateError(ContactMergeError):
    """Raised by ``RecordStore.update`` with an explicit failure kind."""

    def __init__(self, message: str, *, kind: UpdateErrorKind) -> None:
        super().__init__(message)
        self.kind = kind

    @property
    def is_conflict(self) -> bool:
        return self.kind is UpdateErrorKind.CONFLICT


@dataclass(frozen=True, slots=True)
class RemovalError:
    """One identifier the store failed to delete."""

    id: ContactID
    message: str


@dataclass(frozen=True, slots=True)
class RemovalResult:
    """Partial result of a bulk delete."""

    removed: tuple[ContactID, ...] = ()
    errors: tuple[RemovalError, ...] = ()

    @property
    def error_messages(self) -> tuple[str, ...]:
        return tuple(error.message for error in self.errors)


@dataclass(frozen=True, slots=True)
class CreationError:
    """One submitted record the store failed to create."""

    index: int
    message: str


@dataclass(frozen=True, slots=True)
class CreateResult:
    """Partial result of a bulk create."""

    created: tuple[ContactRecord, ...] = ()
    errors: tuple[CreationError, ...] = field(default_factory=tuple)
    total: int = 0


@runtime_checkable
class RecordStore(Protocol):
    """Asynchronous persistence boundary for contact records."""

    async def update(self, record: ContactRecord) -> ContactRecord: ...

    async def remove(self, identifiers: Sequence[ContactID]) -> RemovalResult: ...

    async def clear(self) -> None: ...

    async def add(self, records: Sequence[ContactRecord]) -> CreateResult: ...
