"""Public interface for the contacts API adapter."""

from __future__ import annotations

from .client import ContactsAPIError, HttpRecordStore, build_resilience_config
from .events import HttpEventSynchronizer
from .schema import ContactPayload
from .translator import contact_payload, parse_contact, serialize_contact

__all__ = [
    "ContactPayload",
    "ContactsAPIError",
    "HttpEventSynchronizer",
    "HttpRecordStore",
    "build_resilience_config",
    "contact_payload",
    "parse_contact",
    "serialize_contact",
]
