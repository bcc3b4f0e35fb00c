from unittest.mock import MagicMock

import pytest
from typer.testing import CliRunner

from orm_adapter_sdk import ConfigurationError, StatementInvalid
from orm_bigquery import BigQueryAdapter
from orm_bigquery_cli.commands.doctor import doctor_command
from orm_bigquery_cli.main import app

runner = CliRunner()


@pytest.fixture
def mock_adapter(monkeypatch):
    adapter = MagicMock()
    adapter.config.dataset = "analytics"
    monkeypatch.setattr("orm_bigquery_cli.main.connection_from_env", lambda: adapter)
    return adapter


def test_adapters_lists_installed(monkeypatch):
    monkeypatch.setattr(
        "orm_bigquery_cli.commands.info.discover_adapters",
        lambda: {"bigquery": BigQueryAdapter},
    )

    result = runner.invoke(app, ["adapters"])

    assert result.exit_code == 0
    assert "bigquery" in result.output


def test_adapters_none_installed(monkeypatch):
    monkeypatch.setattr("orm_bigquery_cli.commands.info.discover_adapters", lambda: {})

    result = runner.invoke(app, ["adapters"])

    assert result.exit_code == 0
    assert "No adapters found" in result.output


def test_tables(mock_adapter):
    # Arrange
    mock_adapter.tables.return_value = ["users", "posts"]

    # Act
    result = runner.invoke(app, ["tables"])

    # Assert
    assert result.exit_code == 0
    assert "users" in result.output
    assert "posts" in result.output
    mock_adapter.disconnect.assert_called_once()


def test_tables_empty_dataset(mock_adapter):
    mock_adapter.tables.return_value = []

    result = runner.invoke(app, ["tables"])

    assert result.exit_code == 0
    assert "No tables in dataset analytics" in result.output


def test_columns(mock_adapter):
    column = MagicMock(type="string", sql_type="STRING", null=True)
    column.name = "name"
    mock_adapter.columns.return_value = [column]

    result = runner.invoke(app, ["columns", "users"])

    assert result.exit_code == 0
    mock_adapter.columns.assert_called_once_with("users")
    assert "STRING" in result.output


def test_configuration_error_exits_with_status_1(monkeypatch):
    # Validates the exit status because scripts branch on it.
    # Arrange
    def _fail():
        raise ConfigurationError("No dataset is specified. Missing argument: dataset.")

    monkeypatch.setattr("orm_bigquery_cli.main.connection_from_env", _fail)

    # Act
    result = runner.invoke(app, ["tables"])

    # Assert
    assert result.exit_code == 1
    assert "Missing argument: dataset" in result.output


def test_statement_error_disconnects(mock_adapter):
    mock_adapter.tables.side_effect = StatementInvalid("Forbidden: Access Denied")

    result = runner.invoke(app, ["tables"])

    assert result.exit_code == 1
    assert "Access Denied" in result.output
    mock_adapter.disconnect.assert_called_once()


def test_schema_dump_to_file(mock_adapter, tmp_path):
    # Arrange
    dumper = MagicMock()
    dumper.dump.side_effect = lambda stream: stream.write("tables: {}\n")
    mock_adapter.create_schema_dumper.return_value = dumper
    output = tmp_path / "schema.yml"

    # Act
    result = runner.invoke(app, ["schema-dump", "--output", str(output), "--ignore", "schema_migrations"])

    # Assert
    assert result.exit_code == 0
    assert output.read_text(encoding="utf-8") == "tables: {}\n"
    mock_adapter.create_schema_dumper.assert_called_once_with({"ignore_tables": ["schema_migrations"]})


def test_doctor_failure_exits_with_status_1(monkeypatch):
    monkeypatch.setattr("orm_bigquery_cli.main.doctor_command", lambda: False)

    result = runner.invoke(app, ["doctor"])

    assert result.exit_code == 1


def test_doctor_reports_missing_settings(monkeypatch, capsys):
    settings = MagicMock(dataset=None, service_account_credentials=None)
    monkeypatch.setattr("orm_bigquery_cli.commands.doctor.load_settings", lambda: settings)

    assert doctor_command() is False
    assert "BIGQUERY_DATASET is not set" in capsys.readouterr().err


def test_doctor_reports_missing_dataset(monkeypatch, capsys):
    # Arrange
    settings = MagicMock(dataset="analytics", service_account_credentials="{}")
    adapter = MagicMock()
    adapter.config.dataset = "analytics"
    adapter.database_exists.return_value = False
    monkeypatch.setattr("orm_bigquery_cli.commands.doctor.load_settings", lambda: settings)
    monkeypatch.setattr("orm_bigquery_cli.commands.doctor.connection_from_env", lambda: adapter)

    # Act
    ok = doctor_command()

    # Assert
    assert ok is False
    assert "Dataset analytics does not exist" in capsys.readouterr().err
    adapter.disconnect.assert_called_once()


def test_doctor_success(monkeypatch, capsys):
    settings = MagicMock(dataset="analytics", service_account_credentials="{}")
    adapter = MagicMock()
    adapter.config.dataset = "analytics"
    adapter.database_exists.return_value = True
    adapter.supports.return_value = False
    monkeypatch.setattr("orm_bigquery_cli.commands.doctor.load_settings", lambda: settings)
    monkeypatch.setattr("orm_bigquery_cli.commands.doctor.connection_from_env", lambda: adapter)

    assert doctor_command() is True
    assert "Dataset found" in capsys.readouterr().out


def test_schema_dump_to_stdout(mock_adapter):
    dumper = MagicMock()
    dumper.dump.side_effect = lambda stream: stream.write("version: '1'\n")
    mock_adapter.create_schema_dumper.return_value = dumper

    result = runner.invoke(app, ["schema-dump"])

    assert result.exit_code == 0
    assert "version: '1'" in result.output
    mock_adapter.create_schema_dumper.assert_called_once_with({"ignore_tables": []})


def test_doctor_reports_unparsable_settings(monkeypatch, capsys):
    def _invalid():
        raise ConfigurationError("Invalid BigQuery settings: BIGQUERY_TIMEOUT Input should be a valid number")

    monkeypatch.setattr("orm_bigquery_cli.commands.doctor.load_settings", _invalid)

    assert doctor_command() is False
    assert "BIGQUERY_TIMEOUT" in capsys.readouterr().err
