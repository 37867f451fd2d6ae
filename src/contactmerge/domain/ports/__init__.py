"""Domain port definitions for adapters."""

from __future__ import annotations

from .notifications import ContactsListener, CreateMode, MergeListener, NullListener, notify
from .persistence import (
    CreateResult,
    CreationError,
    RecordStore,
    RecordUpdateError,
    RemovalError,
    RemovalResult,
    UpdateErrorKind,
)
from .synchronization import EventSynchronizer

__all__ = [
    "ContactsListener",
    "CreateMode",
    "CreateResult",
    "CreationError",
    "EventSynchronizer",
    "MergeListener",
    "NullListener",
    "RecordStore",
    "RecordUpdateError",
    "RemovalError",
    "RemovalResult",
    "UpdateErrorKind",
    "notify",
]
