"""Per-session contact state shared by reference between collaborators."""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable

    from contactmerge.domain.model import ContactID, ContactRecord


@dataclass(slots=True)
class ContactSession:
    """Contact cache and email index scoped to one session."""

    contacts: dict[ContactID, ContactRecord] = field(default_factory=dict)
    emails: defaultdict[str, set[ContactID]] = field(default_factory=lambda: defaultdict(set))

    def remember(self, record: ContactRecord) -> None:
        if record.id is None:
            return
        self.forget((record.id,))
        self.contacts[record.id] = record
        for email in record.normalized_emails():
            self.emails[email].add(record.id)

    def forget(self, identifiers: Iterable[ContactID]) -> None:
        for identifier in identifiers:
            previous = self.contacts.pop(identifier, None)
            if previous is None:
                continue
            for email in previous.normalized_emails():
                owners = self.emails.get(email)
                if owners is None:
                    continue
                owners.discard(identifier)
                if not owners:
                    del self.emails[email]

    def contacts_for_email(self, email: str) -> tuple[ContactRecord, ...]:
        owners = self.emails.get(email.strip().lower(), set())
        return tuple(self.contacts[owner] for owner in sorted(owners))

    def clear(self) -> None:
        self.contacts.clear()
        self.emails.clear()
