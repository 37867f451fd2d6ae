from __future__ import annotations

from pathlib import Path  # noqa: TC003

import pytest

from contactmerge.config import (
    Backend,
    ConfigurationError,
    ContactsApiConfig,
    MissingConfigurationError,
    get_backend,
    get_database_config,
    get_storage_config,
    require_env_var,
    require_env_vars,
)
from contactmerge.config.storage import DEFAULT_DB_FILENAME


def test_require_env_vars_returns_values(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("EXAMPLE_VAR", " value ")

    result = require_env_vars(["EXAMPLE_VAR"])

    assert result["EXAMPLE_VAR"] == "value"


def test_require_env_vars_lists_every_missing_name(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("MISSING_B", raising=False)
    monkeypatch.delenv("MISSING_A", raising=False)

    with pytest.raises(MissingConfigurationError) as exc:
        require_env_vars(["MISSING_B", "MISSING_A"])

    assert "MISSING_A, MISSING_B" in str(exc.value)


def test_require_env_var_handles_blank_values(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("EXAMPLE_VAR", "   ")

    with pytest.raises(MissingConfigurationError):
        require_env_var("EXAMPLE_VAR")


def test_contacts_api_config_normalizes_base_url(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("CONTACTS_API_URL", "https://contacts.test/api")
    monkeypatch.setenv("CONTACTS_API_TOKEN", "secret")

    config = ContactsApiConfig.from_environment()

    assert config == ContactsApiConfig(base_url="https://contacts.test/api/", token="secret")


def test_contacts_api_config_requires_token(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("CONTACTS_API_URL", "https://contacts.test/api")
    monkeypatch.delenv("CONTACTS_API_TOKEN", raising=False)

    with pytest.raises(MissingConfigurationError, match="CONTACTS_API_TOKEN"):
        ContactsApiConfig.from_environment()


def test_storage_prefers_explicit_data_dir(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path
) -> None:
    custom = tmp_path / "custom-data"
    monkeypatch.setenv("CONTACTMERGE_DATA_DIR", str(custom))

    assert get_storage_config().resolve_data_dir() == custom.resolve()


def test_database_uri_uses_env_override(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("DATABASE_URI", "sqlite:///override.db")

    assert get_database_config().uri == "sqlite:///override.db"


def test_database_uri_creates_data_dir(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.delenv("DATABASE_URI", raising=False)
    monkeypatch.setenv("CONTACTMERGE_DATA_DIR", str(tmp_path / "data-dir"))

    uri = get_database_config().uri

    expected_path = (tmp_path / "data-dir" / DEFAULT_DB_FILENAME).resolve()
    assert uri == f"sqlite+pysqlite:///{expected_path}"
    assert expected_path.parent.exists()


def test_backend_defaults_to_sqlite(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("CONTACTMERGE_BACKEND", raising=False)

    assert get_backend() is Backend.SQLITE


def test_backend_reads_environment_and_explicit_value(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("CONTACTMERGE_BACKEND", " HTTP ")

    assert get_backend() is Backend.HTTP
    assert get_backend("sqlite") is Backend.SQLITE


def test_unknown_backend_is_a_configuration_error() -> None:
    with pytest.raises(ConfigurationError, match="expected one of: sqlite, http"):
        get_backend("ldap")


def test_require_env_vars_reports_blank_and_unset_together(
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    monkeypatch.setenv("CONTACTS_API_URL", "  ")
    monkeypatch.delenv("CONTACTS_API_TOKEN", raising=False)

    with pytest.raises(MissingConfigurationError) as exc:
        require_env_vars(("CONTACTS_API_TOKEN", "CONTACTS_API_URL"))

    assert str(exc.value) == "Missing configuration for: CONTACTS_API_TOKEN, CONTACTS_API_URL"
