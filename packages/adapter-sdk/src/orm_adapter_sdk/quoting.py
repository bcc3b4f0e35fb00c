import datetime
from decimal import Decimal
from enum import Enum
from typing import Any


class Quoting:
    """ANSI quoting rules for identifiers and literals.

    Adapters override the hooks (``quote_string``, ``quote_column_name``,
    ``quoted_datetime`` ...) where their dialect differs.
    """

    def quote(self, value: Any) -> str:
        """Renders a Python value as an SQL literal."""
        if value is None:
            return "NULL"
        if value is True:
            return self.quoted_true()
        if value is False:
            return self.quoted_false()
        if isinstance(value, Enum):
            return self.quote(value.value)
        if isinstance(value, (int, float, Decimal)):
            return str(value)
        if isinstance(value, datetime.datetime):
            return self.quoted_datetime(value)
        if isinstance(value, datetime.date):
            return self.quoted_date(value)
        if isinstance(value, datetime.time):
            return self.quoted_time(value)
        if isinstance(value, (bytes, bytearray)):
            return self.quoted_binary(bytes(value))
        if isinstance(value, str):
            return f"'{self.quote_string(value)}'"
        raise TypeError(f"can't quote {type(value).__name__}")

    def quote_string(self, value: str) -> str:
        return value.replace("'", "''")

    def quote_column_name(self, name: Any) -> str:
        return '"' + str(name).replace('"', '""') + '"'

    def quote_table_name(self, name: Any) -> str:
        return ".".join(self.quote_column_name(part) for part in str(name).split("."))

    def quoted_true(self) -> str:
        return "TRUE"

    def quoted_false(self) -> str:
        return "FALSE"

    def quoted_datetime(self, value: datetime.datetime) -> str:
        return f"'{value.isoformat(sep=' ')}'"

    def quoted_date(self, value: datetime.date) -> str:
        return f"'{value.isoformat()}'"

    def quoted_time(self, value: datetime.time) -> str:
        return f"'{value.isoformat()}'"

    def quoted_binary(self, value: bytes) -> str:
        return f"X'{value.hex()}'"
