"""HTTP record store backed by the remote contacts API."""

from __future__ import annotations

from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING, Final

import httpx
from pydantic import ValidationError

from contactmerge.adapters.http_resilience import RateLimit, ResilienceConfig, ResilientClient
from contactmerge.config.contacts_api import ContactsApiConfig
from contactmerge.domain.ports.persistence import (
    CreateResult,
    CreationError,
    RecordStore,
    RecordUpdateError,
    RemovalError,
    RemovalResult,
    UpdateErrorKind,
)

from .schema import (
    SUCCESS_CODE,
    ApiResponse,
    CreateContactsResponse,
    DeleteContactsResponse,
    UpdateContactResponse,
)
from .translator import parse_contact, serialize_contact

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence

    from contactmerge.domain.model import ContactID, ContactRecord

log = getLogger(__name__)

_DEFAULT_TIMEOUT_SECONDS: Final[float] = 30.0
_CONFLICT_STATUSES: Final[frozenset[int]] = frozenset({409, 422})


class ContactsAPIError(RuntimeError):
    """Raised when the contacts API returns an application-level error."""

    def __init__(self, message: str, *, code: int | None = None) -> None:
        super().__init__(message)
        self.code = code


def build_resilience_config(config: ContactsApiConfig) -> ResilienceConfig:
    return ResilienceConfig(
        name="contacts-api",
        base_url=config.base_url,
        timeout_seconds=_DEFAULT_TIMEOUT_SECONDS,
        ratelimit=RateLimit(max_calls=10, per_seconds=1.0),
        default_headers={
            "Authorization": f"Bearer {config.token}",
            "Accept": "application/json",
        },
    )


def _default_client_factory(config: ResilienceConfig) -> ResilientClient:
    return ResilientClient(config)


def _error_message(response: httpx.Response) -> str:
    try:
        payload = ApiResponse.model_validate(response.json())
    except (ValueError, ValidationError):
        return f"HTTP {response.status_code}"
    return payload.error or f"HTTP {response.status_code}"


def parse_api_response[TResponse: ApiResponse](
    response: httpx.Response, model: type[TResponse]
) -> TResponse:
    response.raise_for_status()
    try:
        body = response.json()
        status = ApiResponse.model_validate(body)
    except (ValueError, ValidationError) as exc:
        raise ContactsAPIError("Unexpected contacts API response payload") from exc
    # error envelopes omit the endpoint-specific fields
    if not status.ok:
        log.error("Contacts API error %s: %s", status.code, status.error)
        raise ContactsAPIError(status.error or "Contacts API request failed", code=status.code)
    try:
        return model.model_validate(body)
    except ValidationError as exc:
        raise ContactsAPIError("Unexpected contacts API response payload") from exc


@dataclass(slots=True)
class HttpRecordStore:
    """Record store talking to ``/contacts`` endpoints.

    A single ``ResilientClient`` is opened lazily and shared by every call so
    concurrent merge groups reuse the same connection pool and rate limiter.
    """

    config: ContactsApiConfig = field(default_factory=ContactsApiConfig.from_environment)
    resilience: ResilienceConfig | None = None
    client_factory: Callable[[ResilienceConfig], ResilientClient] = field(
        default=_default_client_factory
    )
    _client: ResilientClient | None = field(default=None, init=False)

    @property
    def client(self) -> ResilientClient:
        if self._client is None:
            resilience = self.resilience or build_resilience_config(self.config)
            self._client = self.client_factory(resilience)
        return self._client

    async def aclose(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def update(self, record: ContactRecord) -> ContactRecord:
        if record.id is None:
            raise RecordUpdateError(
                "Cannot update a contact without an ID", kind=UpdateErrorKind.REJECTED
            )

        try:
            response = await self.client.put(
                f"contacts/{record.id}", json=serialize_contact(record)
            )
        except httpx.HTTPError as exc:
            message = str(exc) or type(exc).__name__
            raise RecordUpdateError(message, kind=UpdateErrorKind.TRANSPORT) from exc

        if response.status_code in _CONFLICT_STATUSES:
            raise RecordUpdateError(_error_message(response), kind=UpdateErrorKind.CONFLICT)
        if response.status_code == httpx.codes.NOT_FOUND:
            raise RecordUpdateError(_error_message(response), kind=UpdateErrorKind.NOT_FOUND)
        if response.is_error:
            raise RecordUpdateError(_error_message(response), kind=UpdateErrorKind.REJECTED)

        try:
            payload = UpdateContactResponse.model_validate(response.json())
        except (ValueError, ValidationError) as exc:
            raise RecordUpdateError(
                "Unexpected contacts API response payload", kind=UpdateErrorKind.REJECTED
            ) from exc

        # the API refuses edits on contacts changed since they were read
        if payload.code != SUCCESS_CODE:
            raise RecordUpdateError(
                payload.error or f"Contact {record.id} could not be updated",
                kind=UpdateErrorKind.CONFLICT,
            )
        if payload.contact is None:
            return record
        return parse_contact(payload.contact)

    async def remove(self, identifiers: Sequence[ContactID]) -> RemovalResult:
        if not identifiers:
            return RemovalResult()

        response = await self.client.put("contacts/delete", json={"IDs": list(identifiers)})
        payload = parse_api_response(response, DeleteContactsResponse)

        removed: list[ContactID] = []
        errors: list[RemovalError] = []
        for item in payload.responses:
            if item.response.code == SUCCESS_CODE:
                removed.append(item.id)
            else:
                message = item.response.error or f"Contact {item.id} could not be deleted"
                errors.append(RemovalError(id=item.id, message=message))
        return RemovalResult(removed=tuple(removed), errors=tuple(errors))

    async def clear(self) -> None:
        response = await self.client.delete("contacts")
        parse_api_response(response, ApiResponse)

    async def add(self, records: Sequence[ContactRecord]) -> CreateResult:
        if not records:
            return CreateResult()

        body = {
            "Contacts": [serialize_contact(record) for record in records],
            "Overwrite": 0,
            "Labels": 0,
        }
        response = await self.client.post("contacts", json=body)
        payload = parse_api_response(response, CreateContactsResponse)

        created: list[ContactRecord] = []
        errors: list[CreationError] = []
        for item in payload.responses:
            contact = item.response.contact
            if item.response.code == SUCCESS_CODE and contact is not None:
                created.append(parse_contact(contact))
            else:
                message = item.response.error or f"Contact #{item.index} could not be created"
                errors.append(CreationError(index=item.index, message=message))
        return CreateResult(created=tuple(created), errors=tuple(errors), total=len(records))


if TYPE_CHECKING:
    _store_check: RecordStore = HttpRecordStore()
