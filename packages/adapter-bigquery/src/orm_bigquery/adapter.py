import dataclasses
from typing import Any, Dict, Mapping, Optional, Sequence, Union

from google.api_core import exceptions as google_exceptions
from google.auth import exceptions as auth_exceptions
from google.cloud import bigquery
from google.oauth2 import service_account
from sqlalchemy import types as sqltypes

from orm_adapter_sdk import (
    CapabilitySet,
    ConfigurationError,
    ConnectionAdapter,
    NoDatabaseError,
    StatementInvalid,
    TypeMap,
)
from orm_adapter_sdk.logger import configure_vendor_logging, get_logger
from orm_adapter_sdk.type_map import register_class_with_limit, register_decimal

from .config import BIGQUERY_SCOPE, BigQueryConfig
from .quoting import BigQueryQuoting
from .schema_statements import BigQuerySchemaStatements
from .statements import BigQueryDatabaseStatements

logger = get_logger(__name__)

VENDOR_LOGGERS = ("google", "urllib3")


@dataclasses.dataclass(frozen=True)
class Disconnected:
    pass


@dataclasses.dataclass(frozen=True)
class Connected:
    client: bigquery.Client


ConnectionState = Union[Disconnected, Connected]


class BigQueryAdapter(
    BigQueryQuoting,
    BigQuerySchemaStatements,
    BigQueryDatabaseStatements,
    ConnectionAdapter,
):
    """Connection adapter for a single BigQuery dataset."""

    ADAPTER_NAME = "BigQuery"

    NATIVE_DATABASE_TYPES: Dict[str, Dict[str, Any]] = {
        "string": {"name": "STRING"},
        "text": {"name": "STRING"},
        "integer": {"name": "INTEGER"},
        "bigint": {"name": "INT64"},
        "float": {"name": "FLOAT64"},
        "decimal": {"name": "DECIMAL"},
        "datetime": {"name": "DATETIME"},
        "timestamp": {"name": "TIMESTAMP"},
        "time": {"name": "TIME"},
        "date": {"name": "DATE"},
        "binary": {"name": "BYTES"},
        "boolean": {"name": "BOOL"},
        "json": {"name": "JSON"},
    }

    CAPABILITIES = CapabilitySet(
        transactions=False,
        savepoints=False,
        ddl_transactions=False,
        transaction_isolation=False,
        lazy_transactions=True,
        indexes=False,
        partial_index=False,
        expression_index=False,
        index_sort_order=False,
        primary_keys=False,
        foreign_keys=True,
        check_constraints=False,
        views=False,
        datetime_with_precision=False,
        json=False,
        common_table_expressions=True,
        insert_on_conflict=False,
        insert_on_duplicate_skip=False,
        insert_on_duplicate_update=False,
        insert_conflict_target=False,
        concurrent_connections=False,
        explain=True,
        extensions=False,
        prepared_statements=False,
        requires_reloading=True,
        comments=True,
    )

    def __init__(self, config: BigQueryConfig):
        super().__init__(
            readonly=config.readonly,
            statement_limit=config.statement_limit,
            logger=config.logger,
        )
        self.config = config
        self._state: ConnectionState = Disconnected()
        configure_vendor_logging(config.debug, VENDOR_LOGGERS)

    @classmethod
    def from_config(cls, config: Mapping[str, Any]) -> "BigQueryAdapter":
        return bigquery_connection(config)

    def adapter_name(self) -> str:
        return self.ADAPTER_NAME

    def encoding(self) -> str:
        return "UTF-8"

    def capabilities(self) -> CapabilitySet:
        return self.CAPABILITIES

    def native_database_types(self) -> Dict[str, Dict[str, Any]]:
        return self.NATIVE_DATABASE_TYPES

    # -- connection lifecycle ----------------------------------------------

    @property
    def state(self) -> ConnectionState:
        return self._state

    def connect(self) -> bigquery.Client:
        if isinstance(self._state, Connected):
            return self._state.client

        info = self.config.credentials_info()
        try:
            credentials = service_account.Credentials.from_service_account_info(info, scopes=[BIGQUERY_SCOPE])
        except (ValueError, auth_exceptions.MalformedError) as exc:
            raise ConfigurationError(f"Invalid service account credentials: {exc}") from exc
        client = bigquery.Client(
            project=self.config.project or info.get("project_id"),
            credentials=credentials,
            location=self.config.location,
        )
        self._state = Connected(client)
        logger.info(f"Connected to BigQuery project {client.project}, dataset {self.config.dataset}")
        return client

    @property
    def raw_connection(self) -> bigquery.Client:
        return self.connect()

    def active(self) -> bool:
        return isinstance(self._state, Connected)

    def disconnect(self) -> None:
        if isinstance(self._state, Connected):
            self._state.client.close()
            self._state = Disconnected()
            logger.info("Disconnected from BigQuery")

    @property
    def default_dataset(self) -> str:
        """The dataset as ``project.dataset``."""
        if "." in self.config.dataset:
            return self.config.dataset
        return f"{self.raw_connection.project}.{self.config.dataset}"

    def database_exists(self) -> bool:
        try:
            self.raw_connection.get_dataset(self.default_dataset)
        except google_exceptions.NotFound:
            return False
        except google_exceptions.GoogleAPICallError as exc:
            raise self.translate_exception(exc) from exc
        return True

    # -- errors ------------------------------------------------------------

    def translate_exception(self, exc: Exception, sql: Optional[str] = None, binds: Sequence[Any] = ()) -> StatementInvalid:
        vendor_message = getattr(exc, "message", None) or str(exc)
        message = f"{type(exc).__name__}: {vendor_message}"
        if vendor_message.startswith("Not found: Dataset"):
            return NoDatabaseError(message, sql=sql, binds=binds)
        return StatementInvalid(message, sql=sql, binds=binds)

    # -- types -------------------------------------------------------------

    def initialize_type_map(self, type_map: TypeMap) -> None:
        super().initialize_type_map(type_map)
        register_class_with_limit(type_map, r"^string", sqltypes.String)
        register_class_with_limit(type_map, r"^bytes", sqltypes.LargeBinary)
        type_map.register_type(r"^bool", sqltypes.Boolean())
        type_map.register_type(r"^int64$|^integer$", sqltypes.Integer())
        type_map.register_type(r"^float64$", sqltypes.Float())
        register_decimal(type_map, r"^(?:big)?numeric|^(?:big)?decimal")
        type_map.register_type(r"^datetime$|^timestamp$", sqltypes.DateTime())
        type_map.register_type(r"^json$", sqltypes.JSON())
        # Field names inside composite types must not match the scalar patterns.
        type_map.register_type(r"^(?:array|struct|range)<", lambda sql_type: None)


def bigquery_connection(config: Mapping[str, Any]) -> BigQueryAdapter:
    """Validates ``config`` and builds an adapter; nothing is sent to BigQuery."""
    return BigQueryAdapter(BigQueryConfig.from_mapping(config))


def database_exists(config: Mapping[str, Any]) -> bool:
    """Checks whether the configured dataset exists; ``database`` is accepted for ``dataset``."""
    config = dict(config)
    if not config.get("dataset") and config.get("database"):
        config["dataset"] = config["database"]
    adapter = bigquery_connection(config)
    try:
        return adapter.database_exists()
    finally:
        adapter.disconnect()
