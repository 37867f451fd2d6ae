from __future__ import annotations

import asyncio

import httpx
import pytest

from contactmerge.adapters.contacts_api import ContactsAPIError, HttpEventSynchronizer
from contactmerge.adapters.http_resilience import ResilienceConfig, ResilientClient, RetryPolicy
from contactmerge.domain.session import ContactSession
from tests.support.contacts import make_contact


def _client(pages: dict[str, dict[str, object]], seen: list[str]) -> ResilientClient:
    def handler(request: httpx.Request) -> httpx.Response:
        path = request.url.path.removeprefix("/api/")
        seen.append(path)
        return httpx.Response(200, json=pages[path])

    config = ResilienceConfig(
        name="contacts-api-test",
        base_url="https://contacts.test/api/",
        retry=RetryPolicy(total=0),
    )
    return ResilientClient(config, transport=httpx.MockTransport(handler))


def test_first_sync_only_anchors_cursor() -> None:
    seen: list[str] = []
    session = ContactSession()
    client = _client({"events/latest": {"Code": 1000, "EventID": "ev-10"}}, seen)
    synchronizer = HttpEventSynchronizer(client=client, session=session)

    asyncio.run(synchronizer.sync())

    assert synchronizer.last_event_id == "ev-10"
    assert synchronizer.applied == 0
    assert seen == ["events/latest"]


def test_sync_pages_through_pending_events() -> None:
    seen: list[str] = []
    session = ContactSession()
    session.remember(make_contact("GONE", emails=["gone@example.com"]))
    pages: dict[str, dict[str, object]] = {
        "events/ev-10": {
            "Code": 1000,
            "EventID": "ev-11",
            "More": 1,
            "Contacts": [
                {
                    "ID": "A",
                    "Action": 2,
                    "Contact": {
                        "ID": "A",
                        "Name": "Alice",
                        "ContactEmails": [{"Email": "alice@example.com"}],
                        "Cards": [],
                    },
                },
            ],
        },
        "events/ev-11": {
            "Code": 1000,
            "EventID": "ev-12",
            "More": 0,
            "Contacts": [{"ID": "GONE", "Action": 0}],
        },
    }
    synchronizer = HttpEventSynchronizer(
        client=_client(pages, seen), session=session, last_event_id="ev-10"
    )

    asyncio.run(synchronizer.sync())

    assert seen == ["events/ev-10", "events/ev-11"]
    assert synchronizer.last_event_id == "ev-12"
    assert synchronizer.applied == 2
    assert set(session.contacts) == {"A"}
    assert session.contacts_for_email("alice@example.com")[0].name == "Alice"
    assert "gone@example.com" not in session.emails


def test_sync_without_session_still_advances_cursor() -> None:
    seen: list[str] = []
    pages: dict[str, dict[str, object]] = {
        "events/ev-1": {"Code": 1000, "EventID": "ev-2", "Contacts": [{"ID": "X", "Action": 0}]},
    }
    synchronizer = HttpEventSynchronizer(client=_client(pages, seen), last_event_id="ev-1")

    asyncio.run(synchronizer.sync())

    assert synchronizer.last_event_id == "ev-2"
    assert synchronizer.applied == 1


def test_sync_raises_on_application_error() -> None:
    seen: list[str] = []
    client = _client({"events/latest": {"Code": 2000, "Error": "Session expired"}}, seen)
    synchronizer = HttpEventSynchronizer(client=client)

    with pytest.raises(ContactsAPIError, match="Session expired"):
        asyncio.run(synchronizer.sync())

    assert synchronizer.last_event_id is None
