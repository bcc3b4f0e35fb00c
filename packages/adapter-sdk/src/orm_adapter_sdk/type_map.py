import re
from typing import Callable, List, Optional, Pattern, Tuple, Union

from sqlalchemy import types as sqltypes
from sqlalchemy.types import TypeEngine

CastTypeFactory = Callable[[str], TypeEngine]

# Order matters: subclasses before their bases.
SEMANTIC_TYPES: List[Tuple[type, str]] = [
    (sqltypes.Boolean, "boolean"),
    (sqltypes.Text, "text"),
    (sqltypes.String, "string"),
    (sqltypes.Float, "float"),
    (sqltypes.Numeric, "decimal"),
    (sqltypes.Integer, "integer"),
    (sqltypes.DateTime, "datetime"),
    (sqltypes.Date, "date"),
    (sqltypes.Time, "time"),
    (sqltypes.LargeBinary, "binary"),
    (sqltypes.JSON, "json"),
]


def extract_limit(sql_type: str) -> Optional[int]:
    match = re.search(r"\((\d+)\)", sql_type)
    return int(match.group(1)) if match else None


def extract_precision(sql_type: str) -> Optional[int]:
    match = re.search(r"\((\d+)(?:\s*,\s*\d+)?\)", sql_type)
    return int(match.group(1)) if match else None


def extract_scale(sql_type: str) -> Optional[int]:
    match = re.search(r"\(\d+\s*,\s*(\d+)\)", sql_type)
    if match:
        return int(match.group(1))
    if re.search(r"\(\d+\)", sql_type):
        return 0
    return None


def semantic_type(cast_type: Optional[TypeEngine]) -> Optional[str]:
    """Maps a cast type to the ORM's semantic type name, or None when unknown."""
    if cast_type is None:
        return None
    for type_class, name in SEMANTIC_TYPES:
        if isinstance(cast_type, type_class):
            return name
    return None


class TypeMap:
    """Ordered registry of (pattern -> cast type factory).

    Lookups try registrations newest first, so a later registration overrides
    an earlier one for any SQL type string both match.
    """

    def __init__(self):
        self._mapping: List[Tuple[Pattern, CastTypeFactory]] = []

    def register_type(self, pattern: Union[str, Pattern], cast_type: Union[TypeEngine, CastTypeFactory]) -> None:
        if isinstance(pattern, str):
            pattern = re.compile(pattern, re.IGNORECASE)
        if isinstance(cast_type, TypeEngine):
            instance = cast_type
            factory: CastTypeFactory = lambda sql_type: instance
        else:
            factory = cast_type
        self._mapping.append((pattern, factory))

    def alias_type(self, pattern: Union[str, Pattern], target_sql_type: str) -> None:
        self.register_type(pattern, lambda sql_type: self.lookup(target_sql_type))

    def lookup(self, sql_type: str) -> Optional[TypeEngine]:
        for pattern, factory in reversed(self._mapping):
            if pattern.search(sql_type):
                return factory(sql_type)
        return None

    def clear(self) -> None:
        self._mapping.clear()

    def __len__(self) -> int:
        return len(self._mapping)


def register_class_with_limit(type_map: TypeMap, pattern: str, type_class: type) -> None:
    type_map.register_type(pattern, lambda sql_type: type_class(length=extract_limit(sql_type)))


def register_decimal(type_map: TypeMap, pattern: str, type_class: type = sqltypes.Numeric) -> None:
    type_map.register_type(
        pattern,
        lambda sql_type: type_class(precision=extract_precision(sql_type), scale=extract_scale(sql_type)),
    )


def initialize_default_type_map(type_map: TypeMap) -> None:
    """Registers the generic SQL type names every adapter starts from."""
    type_map.register_type(r"boolean", sqltypes.Boolean())
    register_class_with_limit(type_map, r"char", sqltypes.String)
    register_class_with_limit(type_map, r"binary|blob", sqltypes.LargeBinary)
    type_map.register_type(r"text", sqltypes.Text())
    type_map.register_type(r"date", sqltypes.Date())
    type_map.register_type(r"time", sqltypes.Time())
    type_map.register_type(r"timestamp", sqltypes.DateTime())
    type_map.register_type(r"datetime", sqltypes.DateTime())
    register_decimal(type_map, r"decimal|numeric")
    type_map.register_type(r"float|double|real", sqltypes.Float())
    type_map.register_type(r"^(?:tiny|small|medium|big)?int(?!erval)", sqltypes.Integer())
    type_map.register_type(r"json", sqltypes.JSON())
