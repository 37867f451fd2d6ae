"""Load merge requests and contact lists from JSON documents.

Contacts use the same field names as the contacts API::

    {
      "groups": {
        "alice": {
          "canonical": {"ID": "c1", "Name": "Alice", "Cards": []},
          "duplicates": ["c2", "c3"]
        }
      }
    }
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from pydantic import BaseModel, ConfigDict, Field

from contactmerge.adapters.contacts_api.schema import ContactPayload
from contactmerge.adapters.contacts_api.translator import parse_contact
from contactmerge.domain.merge import MergeGroup

if TYPE_CHECKING:
    from pathlib import Path

    from contactmerge.domain.merge import MergeRequest
    from contactmerge.domain.model import ContactRecord


class _Document(BaseModel):
    model_config = ConfigDict(extra="forbid")


class MergeGroupDocument(_Document):
    canonical: ContactPayload
    duplicates: list[str] = Field(default_factory=list)


class MergeRequestDocument(_Document):
    groups: dict[str, MergeGroupDocument]


class ContactsDocument(_Document):
    contacts: list[ContactPayload]


def parse_merge_request(raw: str | bytes) -> MergeRequest:
    document = MergeRequestDocument.model_validate_json(raw)
    return {
        key: MergeGroup(
            canonical=parse_contact(group.canonical),
            duplicates=tuple(group.duplicates),
        )
        for key, group in document.groups.items()
    }


def parse_contacts(raw: str | bytes) -> list[ContactRecord]:
    document = ContactsDocument.model_validate_json(raw)
    return [parse_contact(payload) for payload in document.contacts]


def load_merge_request(path: Path) -> MergeRequest:
    return parse_merge_request(path.read_bytes())


def load_contacts(path: Path) -> list[ContactRecord]:
    return parse_contacts(path.read_bytes())
