from .capabilities import AdapterCapability, CapabilitySet
from .connection import establish_connection
from .definitions import (
    NO_DEFAULT,
    AddColumnDefinition,
    AlterTable,
    ColumnDefinition,
    TableDefinition,
)
from .errors import (
    AdapterError,
    AdapterNotFoundError,
    ConfigurationError,
    ErrorCode,
    NoDatabaseError,
    ReadOnlyError,
    StatementInvalid,
    UnsupportedOperationError,
)
from .interfaces import ConnectionAdapter, build_read_query_regexp
from .models import (
    Column,
    DryRunResult,
    ForeignKeyDefinition,
    QueryPlan,
    QueryResult,
    SqlTypeMetadata,
)
from .quoting import Quoting
from .schema_creation import SchemaCreation
from .schema_dumper import SchemaDumper
from .statement_pool import StatementPool
from .type_map import TypeMap

__all__ = [
    "AdapterCapability",
    "CapabilitySet",
    "establish_connection",
    "NO_DEFAULT",
    "AddColumnDefinition",
    "AlterTable",
    "ColumnDefinition",
    "TableDefinition",
    "AdapterError",
    "AdapterNotFoundError",
    "ConfigurationError",
    "ErrorCode",
    "NoDatabaseError",
    "ReadOnlyError",
    "StatementInvalid",
    "UnsupportedOperationError",
    "ConnectionAdapter",
    "build_read_query_regexp",
    "Column",
    "DryRunResult",
    "ForeignKeyDefinition",
    "QueryPlan",
    "QueryResult",
    "SqlTypeMetadata",
    "Quoting",
    "SchemaCreation",
    "SchemaDumper",
    "StatementPool",
    "TypeMap",
]
