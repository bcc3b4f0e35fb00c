from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, TextIO

import yaml

from .capabilities import AdapterCapability
from .models import Column


class SchemaDumper:
    """Writes an adapter's schema as a YAML document.

    The document carries ``version``, ``adapter`` and ``tables``; dialects add
    ``views``, ``functions`` or ``triggers`` sections by overriding the hooks
    of the same name.
    """

    def __init__(self, adapter, options: Optional[Dict[str, Any]] = None):
        options = options or {}
        self._adapter = adapter
        self.ignore_tables: List[str] = list(options.get("ignore_tables", []))
        self.version: str = options.get("version") or datetime.now(timezone.utc).strftime("%Y%m%d%H%M%S")

    @classmethod
    def create(cls, adapter, options: Optional[Dict[str, Any]] = None) -> "SchemaDumper":
        return cls(adapter, options)

    def document(self) -> Dict[str, Any]:
        document: Dict[str, Any] = {
            "version": self.version,
            "adapter": self._adapter.adapter_name(),
            "tables": self.tables(),
        }
        for section in (self.views(), self.functions(), self.triggers()):
            if section:
                document.update(section)
        return document

    def dump(self, stream: TextIO) -> TextIO:
        yaml.safe_dump(self.document(), stream, sort_keys=False)
        return stream

    def tables(self) -> Dict[str, Any]:
        return {
            name: self.table(name)
            for name in sorted(self._adapter.tables())
            if name not in self.ignore_tables
        }

    def table(self, name: str) -> Dict[str, Any]:
        columns = self._adapter.columns(name)
        primary_key = self._adapter.primary_key(name)
        spec: Dict[str, Any] = {}

        pk_column = next((c for c in columns if c.name == primary_key), None)
        if pk_column is not None and not self.default_primary_key(pk_column):
            spec["primary_key"] = primary_key

        spec["columns"] = [self.column_spec(c) for c in columns]

        if self._adapter.supports(AdapterCapability.FOREIGN_KEYS):
            foreign_keys = self._adapter.foreign_keys(name)
            if foreign_keys:
                spec["foreign_keys"] = [
                    fk.model_dump(exclude={"from_table"}, exclude_none=True) for fk in foreign_keys
                ]
        return spec

    def column_spec(self, column: Column) -> Dict[str, Any]:
        spec: Dict[str, Any] = {
            "name": column.name,
            "type": column.type,
            "sql_type": column.sql_type,
            "null": column.null,
        }
        for key in ("limit", "precision", "scale", "default", "comment"):
            value = getattr(column, key)
            if value is not None:
                spec[key] = value
        return spec

    def default_primary_key(self, column: Column) -> bool:
        return column.name == "id" and column.type in ("integer", "bigint")

    def views(self) -> Optional[Dict[str, Any]]:
        if not self._adapter.supports(AdapterCapability.VIEWS):
            return None
        return {"views": sorted(self._adapter.views())}

    def functions(self) -> Optional[Dict[str, Any]]:
        return None

    def triggers(self) -> Optional[Dict[str, Any]]:
        return None
