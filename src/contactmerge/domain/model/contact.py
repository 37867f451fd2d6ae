"""Contact entities as seen by the merge workflow.

The workflow is payload-agnostic: it only relies on ``ContactRecord.id`` and
hands the rest of the record to the store untouched.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import IntEnum

type ContactID = str


class CardType(IntEnum):
    """How a card's data is protected."""

    CLEARTEXT = 0
    ENCRYPTED = 1
    SIGNED = 2
    ENCRYPTED_AND_SIGNED = 3


@dataclass(frozen=True, slots=True)
class ContactCard:
    """One serialized vCard fragment belonging to a contact."""

    type: CardType
    data: str
    signature: str | None = None


@dataclass(kw_only=True)
class ContactRecord:
    """Mutable contact entity owned by a record store."""

    id: ContactID | None = None
    name: str = ""
    emails: list[str] = field(default_factory=list)
    cards: list[ContactCard] = field(default_factory=list)
    # optimistic-concurrency token; stores that track versions reject stale updates
    version: int | None = None

    def with_version(self, version: int | None) -> ContactRecord:
        return replace(self, version=version)

    def normalized_emails(self) -> tuple[str, ...]:
        return tuple(email.strip().lower() for email in self.emails if email.strip())
