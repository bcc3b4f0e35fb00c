from typing import Any, Dict, Optional

from orm_adapter_sdk import Column, SchemaDumper


class BigQuerySchemaDumper(SchemaDumper):
    """BigQuery tables carry no primary keys, views, functions or triggers worth dumping."""

    def default_primary_key(self, column: Column) -> bool:
        return False

    def views(self) -> Optional[Dict[str, Any]]:
        return None

    def functions(self) -> Optional[Dict[str, Any]]:
        return None

    def triggers(self) -> Optional[Dict[str, Any]]:
        return None
