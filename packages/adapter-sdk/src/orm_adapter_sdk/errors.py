from enum import Enum
from typing import Any, Optional, Sequence


class ErrorCode(str, Enum):
    """Standardized error codes raised across the adapter boundary."""
    CONFIGURATION_ERROR = "CONFIGURATION_ERROR"
    READ_ONLY_VIOLATION = "READ_ONLY_VIOLATION"
    UNSUPPORTED_OPERATION = "UNSUPPORTED_OPERATION"
    STATEMENT_INVALID = "STATEMENT_INVALID"
    NO_DATABASE = "NO_DATABASE"
    ADAPTER_NOT_FOUND = "ADAPTER_NOT_FOUND"
    UNKNOWN_ERROR = "UNKNOWN_ERROR"


class AdapterError(Exception):
    """Base class for every error raised by a connection adapter.

    Attributes:
        message (str): A human-readable error message.
        error_code (ErrorCode): The standardized error code.
    """

    error_code: ErrorCode = ErrorCode.UNKNOWN_ERROR

    def __init__(self, message: str = ""):
        super().__init__(message)
        self.message = message


class ConfigurationError(AdapterError, ValueError):
    """Invalid or missing connection configuration, raised before any network call."""

    error_code = ErrorCode.CONFIGURATION_ERROR


class AdapterNotFoundError(ConfigurationError):
    error_code = ErrorCode.ADAPTER_NOT_FOUND


class ReadOnlyError(AdapterError):
    """A mutating statement was attempted while writes are prevented."""

    error_code = ErrorCode.READ_ONLY_VIOLATION


class UnsupportedOperationError(AdapterError, NotImplementedError):
    """The engine cannot express the requested operation; nothing was sent."""

    error_code = ErrorCode.UNSUPPORTED_OPERATION


class StatementInvalid(AdapterError):
    """A statement failed on the remote engine.

    The original client error is chained as ``__cause__``.

    Attributes:
        sql (Optional[str]): The statement that failed.
        binds (Sequence[Any]): Bind values logged alongside the statement.
    """

    error_code = ErrorCode.STATEMENT_INVALID

    def __init__(self, message: str = "", sql: Optional[str] = None, binds: Sequence[Any] = ()):
        super().__init__(message)
        self.sql = sql
        self.binds = list(binds)


class NoDatabaseError(StatementInvalid):
    """The configured database (dataset) does not exist."""

    error_code = ErrorCode.NO_DATABASE
