from typing import List, Any, Dict, Optional
from pydantic import BaseModel, ConfigDict


class SqlTypeMetadata(BaseModel):
    model_config = ConfigDict(frozen=True)

    sql_type: str
    type: Optional[str] = None
    limit: Optional[int] = None
    precision: Optional[int] = None
    scale: Optional[int] = None


class Column(BaseModel):
    """A column as reported by schema introspection."""

    model_config = ConfigDict(frozen=True)

    name: str
    sql_type_metadata: SqlTypeMetadata
    default: Optional[Any] = None
    null: bool = True
    comment: Optional[str] = None

    @property
    def sql_type(self) -> str:
        return self.sql_type_metadata.sql_type

    @property
    def type(self) -> Optional[str]:
        return self.sql_type_metadata.type

    @property
    def limit(self) -> Optional[int]:
        return self.sql_type_metadata.limit

    @property
    def precision(self) -> Optional[int]:
        return self.sql_type_metadata.precision

    @property
    def scale(self) -> Optional[int]:
        return self.sql_type_metadata.scale


class ForeignKeyDefinition(BaseModel):
    model_config = ConfigDict(frozen=True)

    from_table: str
    to_table: str
    column: str
    primary_key: str = "id"
    name: Optional[str] = None
    on_delete: Optional[str] = None
    on_update: Optional[str] = None


class QueryResult(BaseModel):
    columns: List[str]
    rows: List[List[Any]]
    row_count: int = 0
    affected_rows: Optional[int] = None
    execution_time_ms: Optional[float] = None

    def to_row_dicts(self) -> List[Dict[str, Any]]:
        return [dict(zip(self.columns, row)) for row in self.rows]

    def first(self) -> Optional[List[Any]]:
        return self.rows[0] if self.rows else None


class DryRunResult(BaseModel):
    is_valid: bool
    error_message: Optional[str] = None
    total_bytes_processed: Optional[int] = None


class QueryPlan(BaseModel):
    plan_text: str
    format: str = "text"
    total_bytes_processed: Optional[int] = None
