"""Pydantic models describing the contacts API payloads."""

from __future__ import annotations

from enum import IntEnum
from typing import Final

from pydantic import BaseModel, ConfigDict, Field, field_validator

SUCCESS_CODE: Final[int] = 1000
MULTI_STATUS_CODE: Final[int] = 1001


class ContactsApiBaseModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class CardPayload(ContactsApiBaseModel):
    type: int = Field(alias="Type")
    data: str = Field(alias="Data")
    signature: str | None = Field(default=None, alias="Signature")


class ContactEmailPayload(ContactsApiBaseModel):
    email: str = Field(alias="Email")


class ContactPayload(ContactsApiBaseModel):
    id: str | None = Field(default=None, alias="ID")
    name: str = Field(default="", alias="Name")
    contact_emails: list[ContactEmailPayload] = Field(default_factory=list, alias="ContactEmails")
    cards: list[CardPayload] = Field(default_factory=list, alias="Cards")
    version: int | None = Field(default=None, alias="Version")

    @field_validator("name", mode="before")
    @classmethod
    def _none_to_blank(cls, value: object) -> object:
        return "" if value is None else value


class ApiResponse(ContactsApiBaseModel):
    code: int = Field(alias="Code")
    error: str | None = Field(default=None, alias="Error")

    @property
    def ok(self) -> bool:
        return self.code in {SUCCESS_CODE, MULTI_STATUS_CODE}


class UpdateContactResponse(ApiResponse):
    contact: ContactPayload | None = Field(default=None, alias="Contact")


class ItemResponse(ApiResponse):
    contact: ContactPayload | None = Field(default=None, alias="Contact")


class DeleteItem(ContactsApiBaseModel):
    id: str = Field(alias="ID")
    response: ItemResponse = Field(alias="Response")


class DeleteContactsResponse(ApiResponse):
    responses: list[DeleteItem] = Field(default_factory=list, alias="Responses")


class CreateItem(ContactsApiBaseModel):
    index: int = Field(alias="Index")
    response: ItemResponse = Field(alias="Response")


class CreateContactsResponse(ApiResponse):
    responses: list[CreateItem] = Field(default_factory=list, alias="Responses")


class LatestEventResponse(ApiResponse):
    event_id: str = Field(alias="EventID")


class EventAction(IntEnum):
    DELETE = 0
    CREATE = 1
    UPDATE = 2


class ContactEvent(ContactsApiBaseModel):
    id: str = Field(alias="ID")
    action: EventAction = Field(alias="Action")
    contact: ContactPayload | None = Field(default=None, alias="Contact")


class EventsResponse(ApiResponse):
    event_id: str = Field(alias="EventID")
    more: bool = Field(default=False, alias="More")
    contacts: list[ContactEvent] = Field(default_factory=list, alias="Contacts")

    @field_validator("more", mode="before")
    @classmethod
    def _int_to_bool(cls, value: object) -> object:
        if isinstance(value, int):
            return bool(value)
        return value
