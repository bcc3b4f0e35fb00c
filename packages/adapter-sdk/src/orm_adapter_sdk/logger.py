import json
import logging
from typing import Iterable, Optional

SQL_LOGGER_NAME = "orm_adapter_sdk.sql"

# Attributes every LogRecord carries; anything else was passed through ``extra``.
_RECORD_ATTRS = frozenset(logging.makeLogRecord({}).__dict__) | {"message", "asctime"}


def record_extras(record: logging.LogRecord) -> dict:
    """Returns the ``extra`` fields attached to a record (sql, binds, duration_ms ...)."""
    return {
        key: value for key, value in record.__dict__.items()
        if key not in _RECORD_ATTRS and not key.startswith("_")
    }


class JsonFormatter(logging.Formatter):
    """One JSON object per record, statement extras included."""

    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "timestamp": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "name": record.name,
            "message": record.getMessage(),
        }
        payload.update(record_extras(record))
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        return json.dumps(payload, default=str)


class StatementFormatter(logging.Formatter):
    """Text formatter that appends bind values to statement records."""

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        binds = getattr(record, "binds", None)
        if binds:
            line += f"  {binds!r}"
        return line


def configure_logging(level: str = "INFO", json_format: bool = False, sql_level: Optional[str] = None):
    """Configures the root logger.

    Args:
        level (str): The logging level (default: INFO).
        json_format (bool): Whether to use JSON formatting (default: False).
        sql_level (str, optional): Level for the statement logger; follows
            ``level`` when omitted.
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    handler = logging.StreamHandler()
    if json_format:
        handler.setFormatter(JsonFormatter())
    else:
        handler.setFormatter(StatementFormatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s"))
    root_logger.addHandler(handler)

    logging.getLogger(SQL_LOGGER_NAME).setLevel(sql_level or level)

    # Silence noisy libraries
    logging.getLogger("urllib3").setLevel(logging.WARNING)
    logging.getLogger("google.auth").setLevel(logging.WARNING)


def configure_vendor_logging(debug: bool, names: Iterable[str] = ("google",)) -> None:
    """Lets vendor client loggers through at DEBUG, or silences them entirely."""
    level = logging.DEBUG if debug else logging.CRITICAL
    for name in names:
        logging.getLogger(name).setLevel(level)


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)
