from typing import List, Optional

from orm_adapter_sdk import (
    AddColumnDefinition,
    ColumnDefinition,
    ForeignKeyDefinition,
    SchemaCreation,
    TableDefinition,
    UnsupportedOperationError,
)

COLUMN_DEFAULTS_UNSUPPORTED = "Column default values are not supported in BigQuery."


class BigQueryTableDefinition(TableDefinition):
    def primary_keys(self) -> Optional[List[str]]:
        return None


class BigQuerySchemaCreation(SchemaCreation):
    """GoogleSQL DDL rendering."""

    def visit_AddColumnDefinition(self, o: AddColumnDefinition) -> str:
        sql = "ADD COLUMN "
        if o.if_not_exists:
            sql += "IF NOT EXISTS "
        return sql + self.accept(o.column)

    def visit_ForeignKeyDefinition(self, o: ForeignKeyDefinition) -> str:
        sql = ""
        if o.name:
            sql += f"CONSTRAINT {self.quote_column_name(o.name)} "
        return sql + (
            f"FOREIGN KEY ({self.quote_column_name(o.column)}) "
            f"REFERENCES {self.quote_table_name(o.to_table)}({self.quote_column_name(o.primary_key)}) "
            "NOT ENFORCED"
        )

    def add_column_options(self, sql: str, column: ColumnDefinition) -> str:
        if column.has_default:
            raise UnsupportedOperationError(COLUMN_DEFAULTS_UNSUPPORTED)
        if column.null is False:
            sql += " NOT NULL"
        if column.comment:
            sql += f" OPTIONS(description={self._adapter.quote(column.comment)})"
        return sql

    def table_options(self, o: TableDefinition) -> str:
        if o.comment:
            return f" OPTIONS(description={self._adapter.quote(o.comment)})"
        return ""
