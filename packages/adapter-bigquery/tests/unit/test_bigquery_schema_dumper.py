import io

import yaml


def _stub_dataset(fake_client):
    fake_client.respond("INFORMATION_SCHEMA.TABLES", rows=[{"table_name": "users"}, {"table_name": "posts"}, {"table_name": "schema_migrations"}])
    fake_client.respond(
        "COLUMNS WHERE table_name = 'users'",
        rows=[
            {"column_name": "id", "data_type": "INT64", "is_nullable": "NO"},
            {"column_name": "name", "data_type": "STRING(40)", "is_nullable": "YES"},
        ],
    )
    fake_client.respond(
        "COLUMNS WHERE table_name = 'posts'",
        rows=[
            {"column_name": "id", "data_type": "INT64", "is_nullable": "NO"},
            {"column_name": "user_id", "data_type": "INT64", "is_nullable": "YES"},
        ],
    )
    fake_client.respond(
        "tc.table_name = 'posts'",
        rows=[
            {
                "constraint_name": "fk_rails_0123456789",
                "column_name": "user_id",
                "to_table": "users",
                "primary_key": "id",
            }
        ],
    )


def test_dump_schema(adapter, fake_client):
    # Validates the dumped document because schema snapshots are diffed between deploys.
    # Arrange
    _stub_dataset(fake_client)
    dumper = adapter.create_schema_dumper({"version": "20240101000000", "ignore_tables": ["schema_migrations"]})

    # Act
    document = yaml.safe_load(dumper.dump(io.StringIO()).getvalue())

    # Assert
    assert document == {
        "version": "20240101000000",
        "adapter": "BigQuery",
        "tables": {
            "posts": {
                "columns": [
                    {"name": "id", "type": "integer", "sql_type": "INT64", "null": False},
                    {"name": "user_id", "type": "integer", "sql_type": "INT64", "null": True},
                ],
                "foreign_keys": [
                    {
                        "to_table": "users",
                        "column": "user_id",
                        "primary_key": "id",
                        "name": "fk_rails_0123456789",
                    }
                ],
            },
            "users": {
                "columns": [
                    {"name": "id", "type": "integer", "sql_type": "INT64", "null": False},
                    {"name": "name", "type": "string", "sql_type": "STRING(40)", "null": True, "limit": 40},
                ],
            },
        },
    }


def test_dump_has_no_views_section(adapter, fake_client):
    dumper = adapter.create_schema_dumper({"version": "1"})

    document = dumper.document()

    assert list(document) == ["version", "adapter", "tables"]
    assert document["tables"] == {}
    assert not any("table_type = 'VIEW'" in sql for sql in fake_client.queries)


def test_default_version_is_a_timestamp(adapter):
    dumper = adapter.create_schema_dumper()

    assert len(dumper.version) == 14
    assert dumper.version.isdigit()
