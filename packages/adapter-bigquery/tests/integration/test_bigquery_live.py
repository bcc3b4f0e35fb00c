import os

import pytest

from orm_bigquery import bigquery_connection

pytestmark = [
    pytest.mark.live,
    pytest.mark.skipif(
        not (os.getenv("GOOGLE_CREDENTIALS") and os.getenv("BIGQUERY_DATASET")),
        reason="GOOGLE_CREDENTIALS and BIGQUERY_DATASET are required for live BigQuery tests",
    ),
]

SEMANTIC_ROUND_TRIP = {
    "string": "string",
    "text": "string",
    "integer": "integer",
    "bigint": "integer",
    "float": "float",
    "decimal": "decimal",
    "datetime": "datetime",
    "timestamp": "datetime",
    "time": "time",
    "date": "date",
    "binary": "binary",
    "boolean": "boolean",
    "json": "json",
}


@pytest.fixture
def live_adapter():
    adapter = bigquery_connection(
        {
            "adapter": "bigquery",
            "dataset": os.environ["BIGQUERY_DATASET"],
            "service_account_credentials": os.environ["GOOGLE_CREDENTIALS"],
            "timeout": 60,
        }
    )
    yield adapter
    adapter.disconnect()


@pytest.fixture
def scratch_table(live_adapter):
    name = "orm_adapter_live_check"
    with live_adapter.create_table(name, force=True) as t:
        t.string("name")
        t.integer("age")
        t.boolean("active")
    yield name
    live_adapter.drop_table(name, if_exists=True)


@pytest.fixture
def type_table(live_adapter):
    name = "orm_adapter_live_types"
    with live_adapter.create_table(name, force=True) as t:
        for semantic_type in live_adapter.NATIVE_DATABASE_TYPES:
            t.column(f"{semantic_type}_col", semantic_type)
    yield name
    live_adapter.drop_table(name, if_exists=True)


def test_dataset_exists(live_adapter):
    assert live_adapter.database_exists()


def test_select_literal(live_adapter):
    assert live_adapter.select_value("SELECT 1") == 1


def test_insert_and_read_back(live_adapter, scratch_table):
    # Arrange
    live_adapter.execute(f"INSERT INTO {scratch_table} (name, age, active) VALUES ('Ada', 36, TRUE)")

    # Act
    result = live_adapter.exec_query(f"SELECT name, age, active FROM {scratch_table}")

    # Assert
    assert result.to_row_dicts() == [{"name": "Ada", "age": 36, "active": True}]


def test_columns_round_trip(live_adapter, type_table):
    columns = {c.name: c.type for c in live_adapter.columns(type_table)}

    assert columns == {f"{semantic}_col": expected for semantic, expected in SEMANTIC_ROUND_TRIP.items()}


def test_dry_run_reports_invalid_sql(live_adapter):
    result = live_adapter.dry_run("SELEC 1")

    assert not result.is_valid
    assert result.error_message
