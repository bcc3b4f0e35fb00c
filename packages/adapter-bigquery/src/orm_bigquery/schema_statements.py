from typing import Any, Dict, List, Optional

from orm_adapter_sdk import (
    AddColumnDefinition,
    AlterTable,
    Column,
    ForeignKeyDefinition,
    UnsupportedOperationError,
)
from orm_adapter_sdk.logger import get_logger
from orm_adapter_sdk.naming import (
    foreign_key_column_for,
    foreign_key_name,
    table_for_foreign_key_column,
)

from .schema_creation import (
    COLUMN_DEFAULTS_UNSUPPORTED,
    BigQuerySchemaCreation,
    BigQueryTableDefinition,
)
from .schema_dumper import BigQuerySchemaDumper

logger = get_logger(__name__)

NON_NULL_COLUMNS_UNSUPPORTED = "Adding a non-null column is not supported in BigQuery."
NON_NULL_CONSTRAINT_UNSUPPORTED = "Adding a non-null constraint is not supported in BigQuery."
RENAME_COLUMN_UNSUPPORTED = "Renaming a column is not supported in BigQuery."
CHECK_CONSTRAINTS_UNSUPPORTED = "Check constraints are not supported in BigQuery."
INDEX_LENGTH_UNSUPPORTED = "Index lengths are not supported in BigQuery."

FOREIGN_KEYS_SQL = """\
SELECT tc.constraint_name, kcu.column_name, ccu.table_name AS to_table, ccu.column_name AS primary_key
FROM {schema}.TABLE_CONSTRAINTS AS tc
JOIN {schema}.KEY_COLUMN_USAGE AS kcu
  ON tc.constraint_name = kcu.constraint_name AND tc.table_name = kcu.table_name
JOIN {schema}.CONSTRAINT_COLUMN_USAGE AS ccu
  ON tc.constraint_name = ccu.constraint_name
WHERE tc.constraint_type = 'FOREIGN KEY' AND tc.table_name = {table}
ORDER BY tc.constraint_name, kcu.ordinal_position"""


class BigQuerySchemaStatements:
    """DDL and INFORMATION_SCHEMA introspection for one dataset.

    Each semantic change is one statement, run through ``execute``.
    """

    # -- introspection -----------------------------------------------------

    def information_schema(self) -> str:
        return f"{self.quote_table_name(self.config.dataset)}.INFORMATION_SCHEMA"

    def data_source_sql(self, name: Optional[str] = None, type: Optional[str] = None) -> str:
        scope = self.quoted_scope(name, type)
        sql = f"SELECT table_name FROM {self.information_schema()}.TABLES"
        conditions = []
        if "name" in scope:
            conditions.append(f"table_name = {scope['name']}")
        if "type" in scope:
            conditions.append(f"table_type = {scope['type']}")
        if conditions:
            sql += " WHERE " + " AND ".join(conditions)
        return sql

    def quoted_scope(self, name: Optional[str] = None, type: Optional[str] = None) -> Dict[str, str]:
        scope = {}
        if name is not None:
            scope["name"] = self.quote(str(name))
        if type is not None:
            scope["type"] = self.quote(str(type))
        return scope

    def column_definitions(self, table_name: str) -> List[Dict[str, Any]]:
        sql = (
            f"SELECT * FROM {self.information_schema()}.COLUMNS "
            f"WHERE table_name = {self.quote(str(table_name))} ORDER BY ordinal_position"
        )
        return self.execute(sql, "SCHEMA")

    def columns(self, table_name: str) -> List[Column]:
        return [self.new_column_from_field(table_name, field) for field in self.column_definitions(table_name)]

    def new_column_from_field(self, table_name: str, field: Dict[str, Any]) -> Column:
        return Column(
            name=field["column_name"],
            default=None,
            sql_type_metadata=self.fetch_type_metadata(field["data_type"]),
            null=field.get("is_nullable") == "YES",
        )

    def indexes(self, table_name: str) -> List[Any]:
        return []

    def primary_keys(self, table_name: str) -> List[str]:
        return []

    def foreign_keys(self, table_name: str) -> List[ForeignKeyDefinition]:
        sql = FOREIGN_KEYS_SQL.format(schema=self.information_schema(), table=self.quote(str(table_name)))
        return [
            ForeignKeyDefinition(
                from_table=str(table_name),
                to_table=row["to_table"],
                column=row["column_name"],
                primary_key=row["primary_key"],
                name=row["constraint_name"],
            )
            for row in self.execute(sql, "SCHEMA")
        ]

    def check_constraints(self, table_name: str) -> List[Any]:
        raise UnsupportedOperationError(CHECK_CONSTRAINTS_UNSUPPORTED)

    # -- DDL ---------------------------------------------------------------

    @property
    def schema_creation(self) -> BigQuerySchemaCreation:
        return BigQuerySchemaCreation(self)

    def create_table_definition(self, name: str, **options: Any) -> BigQueryTableDefinition:
        return BigQueryTableDefinition(name, **options)

    def create_schema_dumper(self, options: Optional[Dict[str, Any]] = None) -> BigQuerySchemaDumper:
        return BigQuerySchemaDumper.create(self, options)

    def add_column(self, table_name: str, column_name: str, type: str, if_not_exists: bool = False, **options: Any) -> None:
        if options.get("null") is False:
            raise UnsupportedOperationError(NON_NULL_COLUMNS_UNSUPPORTED)
        if "default" in options:
            raise UnsupportedOperationError(COLUMN_DEFAULTS_UNSUPPORTED)
        if options.get("null") is None:
            options.pop("null", None)

        definition = self.create_table_definition(table_name).new_column_definition(column_name, type, **options)
        alter = AlterTable(table_name, adds=[AddColumnDefinition(definition, if_not_exists=if_not_exists)])
        self.execute(self.schema_creation.accept(alter))

    def remove_column(self, table_name: str, column_name: str, type: Optional[str] = None, if_exists: bool = False, **options: Any) -> None:
        sql = f"ALTER TABLE {self.quote_table_name(table_name)} DROP COLUMN "
        if if_exists:
            sql += "IF EXISTS "
        self.execute(sql + self.quote_column_name(column_name))

    def rename_table(self, table_name: str, new_name: str) -> None:
        self.execute(f"ALTER TABLE {self.quote_table_name(table_name)} RENAME TO {self.quote_column_name(new_name)}")

    def rename_column(self, table_name: str, column_name: str, new_column_name: str) -> None:
        raise UnsupportedOperationError(RENAME_COLUMN_UNSUPPORTED)

    def change_column(self, table_name: str, column_name: str, type: str, **options: Any) -> None:
        if options.get("null") is False:
            raise UnsupportedOperationError(NON_NULL_CONSTRAINT_UNSUPPORTED)
        if "default" in options:
            raise UnsupportedOperationError(COLUMN_DEFAULTS_UNSUPPORTED)

        sql_type = self.type_to_sql(
            type, limit=options.get("limit"), precision=options.get("precision"), scale=options.get("scale")
        )
        self.execute(
            f"ALTER TABLE {self.quote_table_name(table_name)} "
            f"ALTER COLUMN {self.quote_column_name(column_name)} SET DATA TYPE {sql_type}"
        )
        if options.get("null") is True:
            self.change_column_null(table_name, column_name, True)
        if "comment" in options:
            self.change_column_comment(table_name, column_name, options["comment"])

    def change_column_null(self, table_name: str, column_name: str, null: bool, default: Any = None) -> None:
        if not null:
            raise UnsupportedOperationError(NON_NULL_CONSTRAINT_UNSUPPORTED)
        if default is not None:
            raise UnsupportedOperationError(COLUMN_DEFAULTS_UNSUPPORTED)
        self.execute(
            f"ALTER TABLE {self.quote_table_name(table_name)} "
            f"ALTER COLUMN {self.quote_column_name(column_name)} DROP NOT NULL"
        )

    def change_column_default(self, table_name: str, column_name: str, default: Any) -> None:
        raise UnsupportedOperationError(COLUMN_DEFAULTS_UNSUPPORTED)

    def change_column_comment(self, table_name: str, column_name: str, comment: Optional[str]) -> None:
        self.execute(
            f"ALTER TABLE {self.quote_table_name(table_name)} "
            f"ALTER COLUMN {self.quote_column_name(column_name)} SET OPTIONS (description = {self.quote(comment)})"
        )

    def change_table_comment(self, table_name: str, comment: Optional[str]) -> None:
        self.execute(
            f"ALTER TABLE {self.quote_table_name(table_name)} SET OPTIONS (description = {self.quote(comment)})"
        )

    def add_index(self, table_name: str, column_name: Any, **options: Any) -> None:
        logger.warning(f"BigQuery has no indexes; ignoring add_index on {table_name} ({column_name})")

    def remove_index(self, table_name: str, column_name: Any = None, **options: Any) -> None:
        logger.warning(f"BigQuery has no indexes; ignoring remove_index on {table_name}")

    def validate_index_length(self, table_name: str, new_name: str, internal: bool = False) -> None:
        raise UnsupportedOperationError(INDEX_LENGTH_UNSUPPORTED)

    def add_foreign_key(
        self,
        from_table: str,
        to_table: str,
        column: Optional[str] = None,
        primary_key: str = "id",
        name: Optional[str] = None,
        **options: Any,
    ) -> None:
        column = column or foreign_key_column_for(to_table)
        definition = ForeignKeyDefinition(
            from_table=str(from_table),
            to_table=str(to_table),
            column=column,
            primary_key=primary_key,
            name=name or foreign_key_name(from_table, column),
        )
        alter = AlterTable(from_table, foreign_key_adds=[definition])
        self.execute(self.schema_creation.accept(alter))

    def remove_foreign_key(
        self,
        from_table: str,
        to_table: Optional[str] = None,
        if_exists: bool = False,
        **options: Any,
    ) -> None:
        options.pop("validate", None)
        target = to_table
        if target is None and options.get("column"):
            target = table_for_foreign_key_column(options["column"])

        fk = self.foreign_key_for(from_table, target, **options) if target or options else None
        if fk is None:
            if if_exists:
                return
            raise ValueError(f"Table '{from_table}' has no foreign key for {to_table or options}")

        alter = AlterTable(from_table, foreign_key_drops=[fk.name])
        self.execute(self.schema_creation.accept(alter))

    def add_check_constraint(self, table_name: str, expression: str, **options: Any) -> None:
        raise UnsupportedOperationError(CHECK_CONSTRAINTS_UNSUPPORTED)

    def remove_check_constraint(self, table_name: str, expression: Optional[str] = None, **options: Any) -> None:
        raise UnsupportedOperationError(CHECK_CONSTRAINTS_UNSUPPORTED)
