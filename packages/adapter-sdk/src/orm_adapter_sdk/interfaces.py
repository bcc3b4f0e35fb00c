import logging
import re
import time
from abc import ABC, abstractmethod
from contextlib import contextmanager
from typing import Any, Dict, Iterator, List, Mapping, Optional, Pattern, Sequence

from sqlalchemy.types import TypeEngine

from .capabilities import AdapterCapability, CapabilitySet
from .definitions import TableDefinition
from .errors import AdapterError, ReadOnlyError, StatementInvalid
from .logger import SQL_LOGGER_NAME, get_logger
from .models import Column, ForeignKeyDefinition, QueryPlan, QueryResult, SqlTypeMetadata
from .quoting import Quoting
from .schema_creation import SchemaCreation
from .schema_dumper import SchemaDumper
from .statement_pool import StatementPool
from .type_map import TypeMap, initialize_default_type_map, semantic_type

COMMENT_REGEX = r"--.*\n|/\*(?:[^*]|\*[^/])*\*/"
DEFAULT_READ_KEYWORDS = ("begin", "commit", "explain", "release", "rollback", "savepoint", "select", "with")


def build_read_query_regexp(*keywords: str) -> Pattern:
    """Matches statements whose first keyword, after parens/whitespace/comments, is a read."""
    keywords = keywords or DEFAULT_READ_KEYWORDS
    alternation = "|".join(re.escape(k) for k in keywords)
    return re.compile(rf"\A(?:[(\s]|{COMMENT_REGEX})*(?:{alternation})", re.IGNORECASE)


class ConnectionAdapter(Quoting, ABC):
    """Canonical interface every connection adapter must implement.

    Concrete helpers (select_*, insert/update/delete, tables/views, create_table,
    the log hook, read-only enforcement) are written against the abstract
    primitives, so an adapter implements those and inherits the rest.
    """

    TABLE_TYPE = "BASE TABLE"
    VIEW_TYPE = "VIEW"

    def __init__(
        self,
        *,
        readonly: bool = False,
        statement_limit: Optional[int] = None,
        logger: Optional[logging.Logger] = None,
    ):
        self._readonly = readonly
        self._preventing_writes = False
        self._type_map: Optional[TypeMap] = None
        self.statements = self.build_statement_pool(statement_limit)
        self.logger = logger or get_logger(SQL_LOGGER_NAME)

    # -- identity & capabilities -------------------------------------------

    @classmethod
    @abstractmethod
    def from_config(cls, config: Mapping[str, Any]) -> "ConnectionAdapter":
        """Validate a raw config mapping and build an adapter from it."""
        pass

    @abstractmethod
    def adapter_name(self) -> str:
        """Display name of the engine (e.g. 'BigQuery')."""
        pass

    @abstractmethod
    def capabilities(self) -> CapabilitySet:
        """Return the constant capability matrix of this engine."""
        pass

    def supports(self, capability: AdapterCapability) -> bool:
        return self.capabilities().supports(capability)

    @abstractmethod
    def native_database_types(self) -> Dict[str, Dict[str, Any]]:
        """Map of semantic type name -> {'name': native type}."""
        pass

    # -- connection lifecycle ----------------------------------------------

    @abstractmethod
    def connect(self) -> Any:
        """Initialize the vendor client. Idempotent."""
        pass

    @abstractmethod
    def disconnect(self) -> None:
        pass

    @abstractmethod
    def active(self) -> bool:
        """Whether a live client is held."""
        pass

    @property
    @abstractmethod
    def raw_connection(self) -> Any:
        """The vendor client, connecting lazily."""
        pass

    def reconnect(self) -> None:
        self.disconnect()
        self.clear_cache()
        self.connect()

    def build_statement_pool(self, statement_limit: Optional[int] = None) -> StatementPool:
        return StatementPool(statement_limit)

    def clear_cache(self) -> None:
        self.statements.clear()

    # -- logging & error translation ---------------------------------------

    @contextmanager
    def log(self, sql: str, name: Optional[str] = "SQL", binds: Sequence[Any] = ()) -> Iterator[None]:
        """Wraps one remote call: times it, logs it, translates its errors."""
        extra = {"sql": sql, "statement_name": name, "binds": list(binds)}
        start = time.perf_counter()
        try:
            yield
        except AdapterError:
            extra["duration_ms"] = (time.perf_counter() - start) * 1000
            self.logger.error(f"{name or 'SQL'} failed: {sql}", extra=extra)
            raise
        except Exception as exc:
            extra["duration_ms"] = (time.perf_counter() - start) * 1000
            self.logger.error(f"{name or 'SQL'} failed: {sql}", extra=extra)
            raise self.translate_exception(exc, sql=sql, binds=binds) from exc
        extra["duration_ms"] = (time.perf_counter() - start) * 1000
        self.logger.debug(f"{name or 'SQL'} ({extra['duration_ms']:.1f}ms) {sql}", extra=extra)

    @abstractmethod
    def translate_exception(self, exc: Exception, sql: Optional[str] = None, binds: Sequence[Any] = ()) -> StatementInvalid:
        """Convert a vendor error into the contract's error taxonomy."""
        pass

    # -- read-only enforcement ---------------------------------------------

    @property
    def preventing_writes(self) -> bool:
        return self._readonly or self._preventing_writes

    @contextmanager
    def while_preventing_writes(self, enabled: bool = True) -> Iterator[None]:
        original = self._preventing_writes
        self._preventing_writes = enabled
        try:
            yield
        finally:
            self._preventing_writes = original

    @abstractmethod
    def write_query(self, sql: str) -> bool:
        """Whether the statement would mutate data or schema."""
        pass

    def check_if_write_query(self, sql: str) -> None:
        if self.preventing_writes and self.write_query(sql):
            raise ReadOnlyError(f"Write query attempted while in readonly mode: {sql}")

    # -- statement execution -----------------------------------------------

    @abstractmethod
    def execute(self, sql: str, name: Optional[str] = None) -> List[Dict[str, Any]]:
        """Run a statement and return rows as string-keyed dicts."""
        pass

    @abstractmethod
    def exec_query(
        self, sql: str, name: Optional[str] = "SQL", binds: Sequence[Any] = (), prepare: bool = False
    ) -> QueryResult:
        """Run a statement and return a columnar result."""
        pass

    def select_all(self, sql: str, name: Optional[str] = None, binds: Sequence[Any] = ()) -> QueryResult:
        return self.exec_query(sql, name, binds)

    def select_rows(self, sql: str, name: Optional[str] = None, binds: Sequence[Any] = ()) -> List[List[Any]]:
        return self.select_all(sql, name, binds).rows

    def select_value(self, sql: str, name: Optional[str] = None, binds: Sequence[Any] = ()) -> Any:
        row = self.select_all(sql, name, binds).first()
        return row[0] if row else None

    def select_values(self, sql: str, name: Optional[str] = None, binds: Sequence[Any] = ()) -> List[Any]:
        return [row[0] for row in self.select_rows(sql, name, binds)]

    def exec_insert(self, sql: str, name: Optional[str] = None, binds: Sequence[Any] = ()) -> QueryResult:
        return self.exec_query(sql, name, binds)

    def insert(self, sql: str, name: Optional[str] = None, binds: Sequence[Any] = ()) -> Any:
        """Runs an INSERT and returns the generated id, when the engine reports one."""
        self.exec_insert(sql, name, binds)
        return self.last_inserted_id()

    def exec_update(self, sql: str, name: Optional[str] = None, binds: Sequence[Any] = ()) -> Optional[int]:
        return self.exec_query(sql, name, binds).affected_rows

    def update(self, sql: str, name: Optional[str] = None, binds: Sequence[Any] = ()) -> Optional[int]:
        return self.exec_update(sql, name, binds)

    def exec_delete(self, sql: str, name: Optional[str] = None, binds: Sequence[Any] = ()) -> Optional[int]:
        return self.exec_query(sql, name, binds).affected_rows

    def delete(self, sql: str, name: Optional[str] = None, binds: Sequence[Any] = ()) -> Optional[int]:
        return self.exec_delete(sql, name, binds)

    @abstractmethod
    def last_inserted_id(self) -> Any:
        pass

    @abstractmethod
    def explain(self, sql: str) -> QueryPlan:
        """Return the engine's plan or statistics for a statement."""
        pass

    # -- transactions ------------------------------------------------------

    @abstractmethod
    def begin_db_transaction(self) -> None:
        pass

    @abstractmethod
    def commit_db_transaction(self) -> None:
        pass

    @abstractmethod
    def rollback_db_transaction(self) -> None:
        pass

    @contextmanager
    def transaction(self) -> Iterator["ConnectionAdapter"]:
        self.begin_db_transaction()
        try:
            yield self
        except Exception:
            self.rollback_db_transaction()
            raise
        self.commit_db_transaction()

    # -- type mapping ------------------------------------------------------

    @property
    def type_map(self) -> TypeMap:
        if self._type_map is None:
            self._type_map = TypeMap()
            self.initialize_type_map(self._type_map)
        return self._type_map

    def initialize_type_map(self, type_map: TypeMap) -> None:
        initialize_default_type_map(type_map)

    def lookup_cast_type(self, sql_type: str) -> Optional[TypeEngine]:
        return self.type_map.lookup(sql_type)

    def fetch_type_metadata(self, sql_type: str) -> SqlTypeMetadata:
        cast_type = self.lookup_cast_type(sql_type)
        return SqlTypeMetadata(
            sql_type=sql_type,
            type=semantic_type(cast_type),
            limit=getattr(cast_type, "length", None),
            precision=getattr(cast_type, "precision", None),
            scale=getattr(cast_type, "scale", None),
        )

    def type_to_sql(
        self,
        type: str,
        limit: Optional[int] = None,
        precision: Optional[int] = None,
        scale: Optional[int] = None,
    ) -> str:
        """Renders a semantic type as the engine's native column type.

        Unknown names pass through unchanged so raw SQL types can be used.
        """
        native = self.native_database_types().get(str(type))
        if native is None:
            return str(type)

        sql_type = native["name"]
        if type == "decimal":
            if precision is not None:
                sql_type += f"({precision}, {scale})" if scale is not None else f"({precision})"
            elif scale is not None:
                raise ValueError("Error adding decimal column: precision cannot be empty if scale is specified")
        elif type in ("string", "text", "binary"):
            limit = limit or native.get("limit")
            if limit:
                sql_type += f"({limit})"
        return sql_type

    # -- schema introspection ----------------------------------------------

    @abstractmethod
    def data_source_sql(self, name: Optional[str] = None, type: Optional[str] = None) -> str:
        """SQL selecting data source (table/view) names, optionally filtered."""
        pass

    def data_sources(self) -> List[str]:
        return self.select_values(self.data_source_sql(), "SCHEMA")

    def tables(self) -> List[str]:
        return self.select_values(self.data_source_sql(type=self.TABLE_TYPE), "SCHEMA")

    def views(self) -> List[str]:
        return self.select_values(self.data_source_sql(type=self.VIEW_TYPE), "SCHEMA")

    def data_source_exists(self, name: str) -> bool:
        return bool(self.select_values(self.data_source_sql(name), "SCHEMA"))

    def table_exists(self, name: str) -> bool:
        return bool(self.select_values(self.data_source_sql(name, type=self.TABLE_TYPE), "SCHEMA"))

    def view_exists(self, name: str) -> bool:
        return bool(self.select_values(self.data_source_sql(name, type=self.VIEW_TYPE), "SCHEMA"))

    @abstractmethod
    def columns(self, table_name: str) -> List[Column]:
        pass

    def column_exists(self, table_name: str, column_name: str) -> bool:
        return any(c.name == str(column_name) for c in self.columns(table_name))

    @abstractmethod
    def indexes(self, table_name: str) -> List[Any]:
        pass

    @abstractmethod
    def primary_keys(self, table_name: str) -> List[str]:
        pass

    def primary_key(self, table_name: str) -> Optional[str]:
        keys = self.primary_keys(table_name)
        return keys[0] if len(keys) == 1 else None

    @abstractmethod
    def foreign_keys(self, table_name: str) -> List[ForeignKeyDefinition]:
        pass

    def foreign_key_exists(self, from_table: str, to_table: Optional[str] = None, **options: Any) -> bool:
        return self.foreign_key_for(from_table, to_table, **options) is not None

    def foreign_key_for(self, from_table: str, to_table: Optional[str] = None, **options: Any) -> Optional[ForeignKeyDefinition]:
        for fk in self.foreign_keys(from_table):
            if to_table is not None and fk.to_table != str(to_table):
                continue
            if all(str(getattr(fk, key, None)) == str(value) for key, value in options.items()):
                return fk
        return None

    @abstractmethod
    def check_constraints(self, table_name: str) -> List[Any]:
        pass

    # -- schema statements -------------------------------------------------

    @property
    def schema_creation(self) -> SchemaCreation:
        return SchemaCreation(self)

    def create_table_definition(self, name: str, **options: Any) -> TableDefinition:
        return TableDefinition(name, **options)

    @contextmanager
    def create_table(self, table_name: str, *, force: bool = False, **options: Any) -> Iterator[TableDefinition]:
        """Yields a table definition; the CREATE TABLE runs when the block exits cleanly."""
        definition = self.create_table_definition(table_name, **options)
        yield definition

        if force:
            self.drop_table(table_name, if_exists=True)
        self.execute(self.schema_creation.accept(definition))

    def drop_table(self, table_name: str, if_exists: bool = False) -> None:
        sql = "DROP TABLE "
        if if_exists:
            sql += "IF EXISTS "
        self.execute(sql + self.quote_table_name(table_name))

    @abstractmethod
    def build_truncate_statement(self, table_name: str) -> str:
        pass

    def truncate(self, table_name: str, name: Optional[str] = None) -> None:
        self.execute(self.build_truncate_statement(table_name), name)

    def truncate_tables(self, *table_names: str) -> None:
        for table_name in table_names:
            self.truncate(table_name)

    @abstractmethod
    def add_column(self, table_name: str, column_name: str, type: str, **options: Any) -> None:
        pass

    @abstractmethod
    def remove_column(self, table_name: str, column_name: str, type: Optional[str] = None, **options: Any) -> None:
        pass

    def remove_columns(self, table_name: str, *column_names: str, **options: Any) -> None:
        if not column_names:
            raise ValueError("You must specify at least one column name. Example: remove_columns('people', 'first_name')")
        for column_name in column_names:
            self.remove_column(table_name, column_name, **options)

    @abstractmethod
    def rename_table(self, table_name: str, new_name: str) -> None:
        pass

    @abstractmethod
    def rename_column(self, table_name: str, column_name: str, new_column_name: str) -> None:
        pass

    @abstractmethod
    def change_column(self, table_name: str, column_name: str, type: str, **options: Any) -> None:
        pass

    @abstractmethod
    def change_column_null(self, table_name: str, column_name: str, null: bool, default: Any = None) -> None:
        pass

    @abstractmethod
    def change_column_default(self, table_name: str, column_name: str, default: Any) -> None:
        pass

    @abstractmethod
    def add_index(self, table_name: str, column_name: Any, **options: Any) -> None:
        pass

    @abstractmethod
    def remove_index(self, table_name: str, column_name: Any = None, **options: Any) -> None:
        pass

    @abstractmethod
    def add_foreign_key(self, from_table: str, to_table: str, **options: Any) -> None:
        pass

    @abstractmethod
    def remove_foreign_key(self, from_table: str, to_table: Optional[str] = None, **options: Any) -> None:
        pass

    @abstractmethod
    def add_check_constraint(self, table_name: str, expression: str, **options: Any) -> None:
        pass

    @abstractmethod
    def remove_check_constraint(self, table_name: str, expression: Optional[str] = None, **options: Any) -> None:
        pass

    def create_schema_dumper(self, options: Optional[Dict[str, Any]] = None) -> SchemaDumper:
        return SchemaDumper.create(self, options)
