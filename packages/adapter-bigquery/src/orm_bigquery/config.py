import json
import logging
from numbers import Number
from typing import Any, Dict, Literal, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, SecretStr, ValidationError

from orm_adapter_sdk import ConfigurationError, StatementPool

BIGQUERY_SCOPE = "https://www.googleapis.com/auth/bigquery"


class BigQueryConfig(BaseModel):
    """Validated connection settings for one BigQuery adapter.

    Attributes:
        dataset: Dataset every statement runs against (``dataset`` or ``project.dataset``).
        service_account_credentials: Service-account key file contents (JSON).
        timeout: Seconds to wait on each query, or None for the client default.
        debug: Let the Google client loggers through at DEBUG.
        readonly: Reject write statements before they reach the service.
        project: Billing project; defaults to the key file's ``project_id``.
        location: Job location (e.g. "US", "EU").
        statement_limit: Capacity of the statement pool.
        truncate_strategy: How ``truncate`` empties a table.
        logger: Sink for statement log records.
    """

    model_config = ConfigDict(frozen=True, extra="ignore", arbitrary_types_allowed=True)

    dataset: str
    service_account_credentials: SecretStr
    timeout: Optional[float] = None
    debug: bool = False
    readonly: bool = False
    project: Optional[str] = None
    location: Optional[str] = None
    statement_limit: int = StatementPool.DEFAULT_STATEMENT_LIMIT
    truncate_strategy: Literal["delete", "drop"] = "delete"
    logger: Optional[logging.Logger] = Field(default=None, exclude=True, repr=False)

    @property
    def replica(self) -> bool:
        return self.readonly

    @classmethod
    def from_mapping(cls, config: Mapping[str, Any]) -> "BigQueryConfig":
        """Validates a raw connection mapping.

        Raises:
            ConfigurationError: If the dataset or credentials are missing, or
                the timeout is not numeric.
        """
        config = {str(key): value for key, value in config.items()}

        if not _present(config.get("dataset")):
            raise ConfigurationError("No dataset is specified. Missing argument: dataset.")

        credentials = config.get("service_account_credentials")
        if isinstance(credentials, Mapping):
            credentials = json.dumps(dict(credentials))
        if isinstance(credentials, SecretStr):
            credentials = credentials.get_secret_value()
        if not _present(credentials):
            raise ConfigurationError(
                "No service account credentials specified. Missing argument: service_account_credentials."
            )
        config["service_account_credentials"] = credentials

        timeout = config.get("timeout")
        if timeout is not None and (isinstance(timeout, bool) or not isinstance(timeout, Number)):
            raise ConfigurationError(f"Invalid timeout value: {timeout!r}.")

        fields = {
            key: value for key, value in config.items()
            if key in cls.model_fields and value is not None
        }
        try:
            return cls(**fields)
        except ValidationError as exc:
            raise ConfigurationError(f"Invalid BigQuery configuration: {exc}") from exc

    def credentials_info(self) -> Dict[str, Any]:
        """Parses the service-account key.

        Raises:
            ConfigurationError: If the key is not a JSON object.
        """
        try:
            info = json.loads(self.service_account_credentials.get_secret_value())
        except json.JSONDecodeError as exc:
            raise ConfigurationError(f"Invalid service account credentials: {exc.msg}.") from exc
        if not isinstance(info, dict):
            raise ConfigurationError("Invalid service account credentials: expected a JSON object.")
        return info


def _present(value: Any) -> bool:
    if value is None:
        return False
    if isinstance(value, str):
        return bool(value.strip())
    return True
