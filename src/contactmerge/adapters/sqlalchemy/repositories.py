"""Repository implementations backed by SQLAlchemy sessions."""

from __future__ import annotations

from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any

from sqlalchemy import delete, func, insert, select, update

from contactmerge.domain.model import CardType, ContactCard, ContactRecord

from .tables import ContactEventAction, contact_event_table, contact_table

if TYPE_CHECKING:
    from collections.abc import Sequence

    from sqlalchemy import Row
    from sqlalchemy.orm import Session

    from contactmerge.domain.model import ContactID


def _serialize_cards(cards: Sequence[ContactCard]) -> list[dict[str, Any]]:
    return [
        {"type": int(card.type), "data": card.data, "signature": card.signature} for card in cards
    ]


def _deserialize_cards(raw: Sequence[dict[str, Any]]) -> list[ContactCard]:
    return [
        ContactCard(type=CardType(item["type"]), data=item["data"], signature=item.get("signature"))
        for item in raw
    ]


def _row_to_record(row: Row[Any]) -> ContactRecord:
    return ContactRecord(
        id=row.id,
        name=row.name,
        emails=list(row.emails),
        cards=_deserialize_cards(row.cards),
        version=row.version,
    )


class SqlAlchemyContactRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def get(self, identifier: ContactID) -> ContactRecord | None:
        stmt = select(contact_table).where(contact_table.c.id == identifier)
        row = self.session.execute(stmt).one_or_none()
        return _row_to_record(row) if row is not None else None

    def list_all(self) -> list[ContactRecord]:
        stmt = select(contact_table).order_by(contact_table.c.id)
        return [_row_to_record(row) for row in self.session.execute(stmt)]

    def count(self) -> int:
        stmt = select(func.count()).select_from(contact_table)
        return int(self.session.execute(stmt).scalar_one())

    def add(self, record: ContactRecord) -> ContactRecord:
        if record.id is None:
            raise ValueError("Contact must have an ID before it is stored")
        version = record.version or 1
        self.session.execute(
            insert(contact_table).values(
                id=record.id,
                name=record.name,
                emails=list(record.emails),
                cards=_serialize_cards(record.cards),
                version=version,
                modified_at=datetime.now(tz=UTC),
            )
        )
        return record.with_version(version)

    def replace(self, record: ContactRecord, *, version: int) -> ContactRecord:
        self.session.execute(
            update(contact_table)
            .where(contact_table.c.id == record.id)
            .values(
                name=record.name,
                emails=list(record.emails),
                cards=_serialize_cards(record.cards),
                version=version,
                modified_at=datetime.now(tz=UTC),
            )
        )
        return record.with_version(version)

    def delete(self, identifier: ContactID) -> bool:
        result = self.session.execute(delete(contact_table).where(contact_table.c.id == identifier))
        return bool(result.rowcount)

    def delete_all(self) -> int:
        result = self.session.execute(delete(contact_table))
        return int(result.rowcount or 0)


class SqlAlchemyContactEventRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def append(self, action: ContactEventAction, contact_id: ContactID | None = None) -> None:
        self.session.execute(
            insert(contact_event_table).values(
                contact_id=contact_id,
                action=action,
                created_at=datetime.now(tz=UTC),
            )
        )

    def since(self, event_id: int, *, limit: int) -> list[Row[Any]]:
        stmt = (
            select(contact_event_table)
            .where(contact_event_table.c.id > event_id)
            .order_by(contact_event_table.c.id)
            .limit(limit)
        )
        return list(self.session.execute(stmt))

    def latest_id(self) -> int:
        stmt = select(func.max(contact_event_table.c.id))
        return int(self.session.execute(stmt).scalar_one_or_none() or 0)
