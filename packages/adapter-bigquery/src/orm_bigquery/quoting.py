import datetime
import re
from typing import Any

from orm_adapter_sdk import Quoting

PLAIN_IDENTIFIER = re.compile(r"\A[A-Za-z_][A-Za-z0-9_]*\Z")


def quote_identifier(name: Any) -> str:
    """Quotes a possibly dotted identifier; plain parts stay bare, others get backticks."""
    parts = str(name).split(".")
    return ".".join(
        part if PLAIN_IDENTIFIER.match(part) else "`" + part.replace("\\", "\\\\").replace("`", "\\`") + "`"
        for part in parts
    )


class BigQueryQuoting(Quoting):
    """GoogleSQL literal and identifier quoting."""

    def quote_string(self, value: str) -> str:
        return value.replace("\\", "\\\\").replace("'", "\\'")

    def quote_column_name(self, name: Any) -> str:
        return quote_identifier(name)

    def quote_table_name(self, name: Any) -> str:
        return quote_identifier(name)

    def quoted_datetime(self, value: datetime.datetime) -> str:
        if value.tzinfo is not None:
            return f"TIMESTAMP '{value.isoformat(sep=' ')}'"
        return f"DATETIME '{value.isoformat(sep=' ')}'"

    def quoted_date(self, value: datetime.date) -> str:
        return f"DATE '{value.isoformat()}'"

    def quoted_time(self, value: datetime.time) -> str:
        return f"TIME '{value.isoformat()}'"

    def quoted_binary(self, value: bytes) -> str:
        return f"FROM_HEX('{value.hex()}')"
