"""Translate between contacts API payloads and domain records."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from contactmerge.domain.model import CardType, ContactCard, ContactRecord

from .schema import CardPayload, ContactEmailPayload, ContactPayload

if TYPE_CHECKING:
    from collections.abc import Mapping


def parse_contact(payload: ContactPayload | Mapping[str, object]) -> ContactRecord:
    model = (
        payload if isinstance(payload, ContactPayload) else ContactPayload.model_validate(payload)
    )
    return ContactRecord(
        id=model.id,
        name=model.name,
        emails=[entry.email for entry in model.contact_emails],
        cards=[
            ContactCard(type=CardType(card.type), data=card.data, signature=card.signature)
            for card in model.cards
        ],
        version=model.version,
    )


def contact_payload(record: ContactRecord) -> ContactPayload:
    return ContactPayload(
        id=record.id,
        name=record.name,
        contact_emails=[ContactEmailPayload(email=email) for email in record.emails],
        cards=[
            CardPayload(type=int(card.type), data=card.data, signature=card.signature)
            for card in record.cards
        ],
        version=record.version,
    )


def serialize_contact(record: ContactRecord) -> dict[str, Any]:
    """Request body for a single contact; identifiers travel in the URL."""

    return contact_payload(record).model_dump(by_alias=True, exclude={"id"}, exclude_none=True)
