from .adapter import (
    BigQueryAdapter,
    Connected,
    Disconnected,
    bigquery_connection,
    database_exists,
)
from .config import BigQueryConfig
from .statements import is_write_query

__all__ = [
    "BigQueryAdapter",
    "BigQueryConfig",
    "Connected",
    "Disconnected",
    "bigquery_connection",
    "database_exists",
    "is_write_query",
]
