"""Public domain model surface."""

from __future__ import annotations

from contactmerge.domain.model.contact import CardType, ContactCard, ContactID, ContactRecord

__all__ = [
    "CardType",
    "ContactCard",
    "ContactID",
    "ContactRecord",
]
