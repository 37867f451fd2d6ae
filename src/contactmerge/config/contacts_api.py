"""Contacts API configuration."""

from __future__ import annotations

from dataclasses import dataclass

from .env import require_env_vars

CONTACTS_API_URL_ENV = "CONTACTS_API_URL"
CONTACTS_API_TOKEN_ENV = "CONTACTS_API_TOKEN"  # noqa: S105


@dataclass(frozen=True, slots=True)
class ContactsApiConfig:
    """Holds the base URL and bearer token of the remote contacts API."""

    base_url: str
    token: str

    @classmethod
    def from_environment(cls) -> ContactsApiConfig:
        values = require_env_vars((CONTACTS_API_URL_ENV, CONTACTS_API_TOKEN_ENV))
        return cls(
            base_url=values[CONTACTS_API_URL_ENV].rstrip("/") + "/",
            token=values[CONTACTS_API_TOKEN_ENV],
        )


def get_contacts_api_config() -> ContactsApiConfig:
    return ContactsApiConfig.from_environment()
