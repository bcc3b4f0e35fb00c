from enum import Enum
from typing import Set

from pydantic import BaseModel, ConfigDict


class AdapterCapability(str, Enum):
    """Capability flags a connection adapter reports to its callers."""

    TRANSACTIONS = "transactions"
    SAVEPOINTS = "savepoints"
    DDL_TRANSACTIONS = "ddl_transactions"
    TRANSACTION_ISOLATION = "transaction_isolation"
    LAZY_TRANSACTIONS = "lazy_transactions"
    INDEXES = "indexes"
    PARTIAL_INDEX = "partial_index"
    EXPRESSION_INDEX = "expression_index"
    INDEX_SORT_ORDER = "index_sort_order"
    PRIMARY_KEYS = "primary_keys"
    FOREIGN_KEYS = "foreign_keys"
    CHECK_CONSTRAINTS = "check_constraints"
    VIEWS = "views"
    DATETIME_WITH_PRECISION = "datetime_with_precision"
    JSON = "json"
    COMMON_TABLE_EXPRESSIONS = "common_table_expressions"
    INSERT_ON_CONFLICT = "insert_on_conflict"
    INSERT_ON_DUPLICATE_SKIP = "insert_on_duplicate_skip"
    INSERT_ON_DUPLICATE_UPDATE = "insert_on_duplicate_update"
    INSERT_CONFLICT_TARGET = "insert_conflict_target"
    CONCURRENT_CONNECTIONS = "concurrent_connections"
    EXPLAIN = "explain"
    EXTENSIONS = "extensions"
    PREPARED_STATEMENTS = "prepared_statements"
    REQUIRES_RELOADING = "requires_reloading"
    COMMENTS = "comments"


class CapabilitySet(BaseModel):
    """Fixed matrix of what an engine supports.

    Defaults describe a conventional transactional SQL database; adapters
    override the flags their engine lacks. Callers branch on these before
    invoking the affected operations.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    transactions: bool = True
    savepoints: bool = True
    ddl_transactions: bool = True
    transaction_isolation: bool = True
    lazy_transactions: bool = False
    indexes: bool = True
    partial_index: bool = False
    expression_index: bool = False
    index_sort_order: bool = False
    primary_keys: bool = True
    foreign_keys: bool = True
    check_constraints: bool = True
    views: bool = True
    datetime_with_precision: bool = True
    json: bool = False
    common_table_expressions: bool = True
    insert_on_conflict: bool = False
    insert_on_duplicate_skip: bool = False
    insert_on_duplicate_update: bool = False
    insert_conflict_target: bool = False
    concurrent_connections: bool = True
    explain: bool = False
    extensions: bool = False
    prepared_statements: bool = True
    requires_reloading: bool = False
    comments: bool = False

    def supports(self, capability: AdapterCapability) -> bool:
        return getattr(self, AdapterCapability(capability).value)

    def enabled(self) -> Set[AdapterCapability]:
        """Returns the capabilities switched on in this set."""
        return {capability for capability in AdapterCapability if self.supports(capability)}
