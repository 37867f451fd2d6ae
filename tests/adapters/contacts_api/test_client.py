from __future__ import annotations

import asyncio
import json
from collections.abc import Callable  # noqa: TC003

import httpx
import pytest

from contactmerge.adapters.contacts_api import (
    ContactsAPIError,
    HttpRecordStore,
    build_resilience_config,
    serialize_contact,
)
from contactmerge.adapters.http_resilience import ResilienceConfig, ResilientClient, RetryPolicy
from contactmerge.config import ContactsApiConfig
from contactmerge.domain.ports.persistence import RecordUpdateError, UpdateErrorKind
from tests.support.contacts import make_contact

API_CONFIG = ContactsApiConfig(base_url="https://contacts.test/api/", token="secret")

type Handler = Callable[[httpx.Request], httpx.Response]


def _store(handler: Handler, requests: list[httpx.Request] | None = None) -> HttpRecordStore:
    def recording(request: httpx.Request) -> httpx.Response:
        if requests is not None:
            requests.append(request)
        return handler(request)

    def factory(resilience: ResilienceConfig) -> ResilientClient:
        config = ResilienceConfig(
            name=resilience.name,
            base_url=resilience.base_url,
            retry=RetryPolicy(total=0),
            default_headers=resilience.default_headers,
        )
        return ResilientClient(config, transport=httpx.MockTransport(recording))

    return HttpRecordStore(config=API_CONFIG, client_factory=factory)


def _contact_json(identifier: str, *, name: str = "Alice", version: int = 2) -> dict[str, object]:
    return {
        "ID": identifier,
        "Name": name,
        "ContactEmails": [{"Email": "alice@example.com"}],
        "Cards": [{"Type": 0, "Data": "BEGIN:VCARD\nEND:VCARD"}],
        "Version": version,
    }


def test_build_resilience_config_sets_auth_header() -> None:
    resilience = build_resilience_config(API_CONFIG)

    assert resilience.base_url == "https://contacts.test/api/"
    assert resilience.default_headers is not None
    assert resilience.default_headers["Authorization"] == "Bearer secret"
    assert resilience.ratelimit is not None


def test_serialize_contact_omits_identifier() -> None:
    body = serialize_contact(make_contact("C1", emails=["a@example.com"]))

    assert "ID" not in body
    assert body["ContactEmails"] == [{"Email": "a@example.com"}]
    assert body["Cards"][0]["Type"] == 0


def test_update_puts_contact_and_parses_response() -> None:
    requests: list[httpx.Request] = []
    store = _store(
        lambda _: httpx.Response(200, json={"Code": 1000, "Contact": _contact_json("C1")}),
        requests,
    )

    updated = asyncio.run(store.update(make_contact("C1", name="Alice")))

    assert updated.id == "C1"
    assert updated.version == 2
    assert updated.emails == ["alice@example.com"]
    (request,) = requests
    assert request.method == "PUT"
    assert request.url.path == "/api/contacts/C1"
    assert request.headers["Authorization"] == "Bearer secret"
    assert json.loads(request.content)["Name"] == "Alice"


@pytest.mark.parametrize(
    ("response", "kind"),
    [
        (httpx.Response(409, json={"Code": 2500, "Error": "Contact is stale"}), "conflict"),
        (httpx.Response(422, json={"Code": 2001, "Error": "Invalid card"}), "conflict"),
        (httpx.Response(200, json={"Code": 2500, "Error": "Contact is stale"}), "conflict"),
        (httpx.Response(404, json={"Code": 2501, "Error": "No such contact"}), "not_found"),
        (httpx.Response(400, text="bad request"), "rejected"),
    ],
)
def test_update_maps_failures_to_error_kinds(response: httpx.Response, kind: str) -> None:
    store = _store(lambda _: response)

    with pytest.raises(RecordUpdateError) as excinfo:
        asyncio.run(store.update(make_contact("C1")))

    assert excinfo.value.kind is UpdateErrorKind(kind)


def test_update_transport_failure_is_not_a_conflict() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    store = _store(handler)

    with pytest.raises(RecordUpdateError) as excinfo:
        asyncio.run(store.update(make_contact("C1")))

    assert excinfo.value.kind is UpdateErrorKind.TRANSPORT
    assert "connection refused" in str(excinfo.value)


def test_remove_splits_per_item_responses() -> None:
    requests: list[httpx.Request] = []
    payload = {
        "Code": 1001,
        "Responses": [
            {"ID": "A1", "Response": {"Code": 1000}},
            {"ID": "A2", "Response": {"Code": 2501, "Error": "Contact A2 not found"}},
        ],
    }
    store = _store(lambda _: httpx.Response(200, json=payload), requests)

    result = asyncio.run(store.remove(["A1", "A2"]))

    assert result.removed == ("A1",)
    assert result.error_messages == ("Contact A2 not found",)
    (request,) = requests
    assert request.method == "PUT"
    assert request.url.path == "/api/contacts/delete"
    assert json.loads(request.content) == {"IDs": ["A1", "A2"]}


def test_remove_nothing_skips_the_request() -> None:
    requests: list[httpx.Request] = []
    store = _store(lambda _: httpx.Response(500), requests)

    result = asyncio.run(store.remove([]))

    assert result.removed == ()
    assert requests == []


def test_remove_raises_on_application_error() -> None:
    store = _store(lambda _: httpx.Response(200, json={"Code": 2000, "Error": "Locked"}))

    with pytest.raises(ContactsAPIError, match="Locked") as excinfo:
        asyncio.run(store.remove(["A1"]))

    assert excinfo.value.code == 2000


def test_clear_deletes_collection() -> None:
    requests: list[httpx.Request] = []
    store = _store(lambda _: httpx.Response(200, json={"Code": 1000}), requests)

    asyncio.run(store.clear())

    assert [(request.method, request.url.path) for request in requests] == [
        ("DELETE", "/api/contacts")
    ]


def test_add_collects_created_contacts_and_errors() -> None:
    requests: list[httpx.Request] = []
    payload = {
        "Code": 1001,
        "Responses": [
            {"Index": 0, "Response": {"Code": 1000, "Contact": _contact_json("N1", version=1)}},
            {"Index": 1, "Response": {"Code": 2002, "Error": "Invalid email"}},
        ],
    }
    store = _store(lambda _: httpx.Response(200, json=payload), requests)

    result = asyncio.run(store.add([make_contact(None), make_contact(None, emails=["nope"])]))

    assert [record.id for record in result.created] == ["N1"]
    assert [(error.index, error.message) for error in result.errors] == [(1, "Invalid email")]
    assert result.total == 2
    body = json.loads(requests[0].content)
    assert body["Overwrite"] == 0
    assert len(body["Contacts"]) == 2


def test_aclose_releases_client() -> None:
    store = _store(lambda _: httpx.Response(200, json={"Code": 1000}))
    first = store.client

    asyncio.run(store.aclose())

    assert store.client is not first
