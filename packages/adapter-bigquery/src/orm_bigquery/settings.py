from typing import Any, Dict, Optional

from dotenv import load_dotenv
from pydantic import Field, SecretStr, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from orm_adapter_sdk import ConfigurationError

from .adapter import BigQueryAdapter, bigquery_connection

# Load environment variables from .env into os.environ
load_dotenv()


class BigQuerySettings(BaseSettings):
    """BigQuery connection settings read from the environment (and `.env`)."""

    dataset: Optional[str] = Field(default=None, validation_alias="BIGQUERY_DATASET")
    service_account_credentials: Optional[SecretStr] = Field(default=None, validation_alias="GOOGLE_CREDENTIALS")
    project: Optional[str] = Field(default=None, validation_alias="BIGQUERY_PROJECT")
    location: Optional[str] = Field(default=None, validation_alias="BIGQUERY_LOCATION")
    timeout: Optional[float] = Field(default=None, validation_alias="BIGQUERY_TIMEOUT")
    debug: bool = Field(default=False, validation_alias="BIGQUERY_DEBUG")
    readonly: bool = Field(default=False, validation_alias="BIGQUERY_READONLY")
    statement_limit: int = Field(default=1000, validation_alias="BIGQUERY_STATEMENT_LIMIT")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    def to_config(self) -> Dict[str, Any]:
        """Builds a connection mapping for ``bigquery_connection``."""
        credentials = self.service_account_credentials
        return {
            "adapter": "bigquery",
            "dataset": self.dataset,
            "service_account_credentials": credentials.get_secret_value() if credentials else None,
            "project": self.project,
            "location": self.location,
            "timeout": self.timeout,
            "debug": self.debug,
            "readonly": self.readonly,
            "statement_limit": self.statement_limit,
        }


def load_settings() -> BigQuerySettings:
    """Reads settings from the environment.

    Raises:
        ConfigurationError: If a variable cannot be parsed (e.g. a non-numeric BIGQUERY_TIMEOUT).
    """
    try:
        return BigQuerySettings()
    except ValidationError as exc:
        raise ConfigurationError(f"Invalid BigQuery settings: {exc}") from exc


def connection_from_env(**overrides: Any) -> BigQueryAdapter:
    """Builds a BigQuery adapter from environment settings, applying ``overrides`` last."""
    config = {**load_settings().to_config(), **overrides}
    return bigquery_connection(config)
