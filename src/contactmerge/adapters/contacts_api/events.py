"""Event-log synchronisation against the contacts API."""

from __future__ import annotations

from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING, Final

from .client import parse_api_response
from .schema import ContactEvent, EventAction, EventsResponse, LatestEventResponse
from .translator import parse_contact

if TYPE_CHECKING:
    from contactmerge.adapters.http_resilience import ResilientClient
    from contactmerge.domain.session import ContactSession

log = getLogger(__name__)

_MAX_EVENT_PAGES: Final[int] = 50


@dataclass(slots=True)
class HttpEventSynchronizer:
    """Replays contact events newer than the last seen event ID into a session.

    The first call only anchors the cursor at the latest event; later calls
    page through ``events/{id}`` while the API reports more pending events.
    """

    client: ResilientClient
    session: ContactSession | None = None
    last_event_id: str | None = None
    applied: int = field(default=0, init=False)

    async def sync(self) -> None:
        if self.last_event_id is None:
            response = await self.client.get("events/latest")
            latest = parse_api_response(response, LatestEventResponse)
            self.last_event_id = latest.event_id
            log.debug("Anchored event cursor at %s", latest.event_id)
            return

        for _ in range(_MAX_EVENT_PAGES):
            response = await self.client.get(f"events/{self.last_event_id}")
            page = parse_api_response(response, EventsResponse)
            for event in page.contacts:
                self._apply(event)
            self.last_event_id = page.event_id
            if not page.more:
                return
        log.warning("Stopped after %d event pages; more events are pending", _MAX_EVENT_PAGES)

    def _apply(self, event: ContactEvent) -> None:
        self.applied += 1
        if self.session is None:
            return
        if event.action == EventAction.DELETE:
            self.session.forget((event.id,))
            return
        if event.contact is not None:
            self.session.remember(parse_contact(event.contact))
