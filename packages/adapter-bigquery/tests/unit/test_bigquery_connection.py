import logging
from unittest.mock import MagicMock

import pytest
from google.api_core import exceptions as google_exceptions

from orm_adapter_sdk import ConfigurationError, NoDatabaseError, StatementInvalid, establish_connection
from orm_bigquery import BigQueryAdapter, Connected, Disconnected, bigquery_connection, database_exists
from orm_bigquery.config import BIGQUERY_SCOPE


def test_connect_is_lazy_and_idempotent(adapter, fake_client):
    # Validates lazy connection because constructing an adapter must not contact the service.
    # Arrange
    assert isinstance(adapter.state, Disconnected)

    # Act
    first = adapter.raw_connection
    second = adapter.connect()

    # Assert
    assert first is second is fake_client
    assert len(fake_client.created) == 1
    assert isinstance(adapter.state, Connected)
    assert adapter.active()


def test_client_uses_key_file_project_and_scope(adapter, fake_client):
    adapter.connect()

    kwargs = fake_client.created[0]
    assert kwargs["project"] == "test-project"
    assert kwargs["location"] is None
    assert kwargs["credentials"].scopes == [BIGQUERY_SCOPE]


def test_project_and_location_overrides(config, fake_client):
    config.update(project="billing-project", location="EU")

    bigquery_connection(config).connect()

    assert fake_client.created[0]["project"] == "billing-project"
    assert fake_client.created[0]["location"] == "EU"


def test_malformed_credentials_raise_on_connect(config, fake_client):
    config["service_account_credentials"] = "{oops"
    adapter = bigquery_connection(config)

    with pytest.raises(ConfigurationError):
        adapter.connect()
    assert not adapter.active()


def test_incomplete_service_account_key_is_a_configuration_error(config, monkeypatch):
    # Validates incomplete keys because credential problems belong to the configuration taxonomy.
    # Arrange
    config["service_account_credentials"] = '{"type": "service_account"}'
    client_factory = MagicMock()
    monkeypatch.setattr("orm_bigquery.adapter.bigquery.Client", client_factory)
    adapter = bigquery_connection(config)

    # Act
    with pytest.raises(ConfigurationError, match="Invalid service account credentials") as excinfo:
        adapter.database_exists()

    # Assert
    assert excinfo.value.__cause__ is not None
    client_factory.assert_not_called()
    assert not adapter.active()


def test_disconnect_closes_client(adapter, fake_client):
    adapter.connect()

    adapter.disconnect()
    adapter.disconnect()

    assert fake_client.closed
    assert not adapter.active()
    assert isinstance(adapter.state, Disconnected)


def test_reconnect_clears_statement_pool(adapter, fake_client):
    # Arrange
    adapter.connect()
    adapter.statements["SELECT 1"] = object()

    # Act
    adapter.reconnect()

    # Assert
    assert len(adapter.statements) == 0
    assert len(fake_client.created) == 2
    assert adapter.active()


def test_statement_limit_is_configurable(config, fake_client):
    config["statement_limit"] = 5

    adapter = bigquery_connection(config)

    assert adapter.statements.statement_limit == 5


def test_debug_flag_toggles_vendor_loggers(config, fake_client):
    bigquery_connection({**config, "debug": True})
    assert logging.getLogger("google").level == logging.DEBUG
    assert logging.getLogger("urllib3").level == logging.DEBUG

    bigquery_connection(config)
    assert logging.getLogger("google").level == logging.CRITICAL


def test_database_exists(adapter, fake_client):
    assert adapter.database_exists()

    fake_client.datasets.clear()

    assert not adapter.database_exists()


def test_module_level_database_exists_accepts_database_alias(config, fake_client):
    # Arrange
    config.pop("dataset")
    config["database"] = "adapter_test"

    # Act
    exists = database_exists(config)

    # Assert
    assert exists
    assert fake_client.closed


def test_missing_dataset_translates_to_no_database_error(adapter, fake_client):
    # Arrange
    vendor_error = google_exceptions.NotFound(
        "Not found: Dataset test-project:missing was not found in location US"
    )
    fake_client.respond("missing.users", error=vendor_error)

    # Act
    with pytest.raises(NoDatabaseError) as excinfo:
        adapter.execute("SELECT * FROM missing.users")

    # Assert
    assert str(excinfo.value).startswith("NotFound: Not found: Dataset test-project:missing")
    assert excinfo.value.__cause__ is vendor_error
    assert excinfo.value.sql == "SELECT * FROM missing.users"


def test_other_vendor_errors_translate_to_statement_invalid(adapter):
    error = adapter.translate_exception(google_exceptions.Forbidden("Access Denied: Table users"), sql="SELECT 1")

    assert type(error) is StatementInvalid
    assert str(error) == "Forbidden: Access Denied: Table users"


def test_establish_connection_resolves_bigquery(config, fake_client, monkeypatch):
    monkeypatch.setattr("orm_adapter_sdk.connection.discover_adapters", lambda: {"bigquery": BigQueryAdapter})

    adapter = establish_connection(config)

    assert isinstance(adapter, BigQueryAdapter)
    assert adapter.config.dataset == "adapter_test"


def test_database_exists_translates_other_vendor_errors(adapter, fake_client, monkeypatch):
    # Arrange
    vendor_error = google_exceptions.Forbidden("Access Denied: Dataset test-project:adapter_test")

    def _forbidden(dataset_ref):
        raise vendor_error

    monkeypatch.setattr(fake_client, "get_dataset", _forbidden)

    # Act
    with pytest.raises(StatementInvalid) as excinfo:
        adapter.database_exists()

    # Assert
    assert str(excinfo.value) == "Forbidden: Access Denied: Dataset test-project:adapter_test"
    assert excinfo.value.__cause__ is vendor_error
