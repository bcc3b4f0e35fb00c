from typing import Any, List

from .capabilities import AdapterCapability
from .definitions import AddColumnDefinition, AlterTable, ColumnDefinition, TableDefinition
from .models import ForeignKeyDefinition


class SchemaCreation:
    """Renders DDL definition objects into SQL text.

    Dispatches on the definition's class name, ``visit_<ClassName>``, so a
    dialect subclass overrides only the clauses it renders differently.
    """

    def __init__(self, adapter):
        self._adapter = adapter

    def accept(self, o: Any) -> str:
        method = getattr(self, f"visit_{type(o).__name__}", None)
        if method is None:
            raise TypeError(f"Cannot render {type(o).__name__} as SQL")
        return method(o)

    def visit_TableDefinition(self, o: TableDefinition) -> str:
        create_sql = "CREATE TABLE "
        if o.if_not_exists:
            create_sql += "IF NOT EXISTS "
        create_sql += self.quote_table_name(o.name)

        statements = [self.accept(column) for column in o.columns.values()]
        statements += [self.accept(fk) for fk in o.foreign_keys]
        if statements:
            create_sql += f" ({', '.join(statements)})"

        return create_sql + self.table_options(o)

    def visit_ColumnDefinition(self, o: ColumnDefinition) -> str:
        sql_type = self._adapter.type_to_sql(o.type, limit=o.limit, precision=o.precision, scale=o.scale)
        column_sql = f"{self.quote_column_name(o.name)} {sql_type}"
        return self.add_column_options(column_sql, o)

    def visit_AddColumnDefinition(self, o: AddColumnDefinition) -> str:
        return f"ADD {self.accept(o.column)}"

    def visit_ForeignKeyDefinition(self, o: ForeignKeyDefinition) -> str:
        sql = ""
        if o.name:
            sql += f"CONSTRAINT {self.quote_column_name(o.name)} "
        sql += (
            f"FOREIGN KEY ({self.quote_column_name(o.column)}) "
            f"REFERENCES {self.quote_table_name(o.to_table)}({self.quote_column_name(o.primary_key)})"
        )
        if o.on_delete:
            sql += f" ON DELETE {self.action_sql(o.on_delete)}"
        if o.on_update:
            sql += f" ON UPDATE {self.action_sql(o.on_update)}"
        return sql

    def visit_AlterTable(self, o: AlterTable) -> str:
        clauses: List[str] = [self.accept(add) for add in o.adds]
        clauses += [f"ADD {self.accept(fk)}" for fk in o.foreign_key_adds]
        clauses += [f"DROP CONSTRAINT {self.quote_column_name(name)}" for name in o.foreign_key_drops]
        return f"ALTER TABLE {self.quote_table_name(o.name)} {', '.join(clauses)}"

    def add_column_options(self, sql: str, column: ColumnDefinition) -> str:
        if column.has_default:
            sql += f" DEFAULT {self._adapter.quote(column.default)}"
        if column.null is False:
            sql += " NOT NULL"
        if column.primary_key and self._adapter.supports(AdapterCapability.PRIMARY_KEYS):
            sql += " PRIMARY KEY"
        return sql

    def table_options(self, o: TableDefinition) -> str:
        return ""

    def action_sql(self, action: str) -> str:
        actions = {
            "cascade": "CASCADE",
            "nullify": "SET NULL",
            "restrict": "RESTRICT",
        }
        if action not in actions:
            raise ValueError(f"'{action}' is not supported for on_update or on_delete.")
        return actions[action]

    def quote_column_name(self, name: str) -> str:
        return self._adapter.quote_column_name(name)

    def quote_table_name(self, name: str) -> str:
        return self._adapter.quote_table_name(name)
