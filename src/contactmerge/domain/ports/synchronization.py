"""Port for the event log that keeps local state in step with the store."""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class EventSynchronizer(Protocol):
    """Pull pending store events; raises when synchronisation fails."""

    async def sync(self) -> None: ...


__all__ = ["EventSynchronizer"]
