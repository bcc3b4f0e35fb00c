"""Naming conventions shared by adapters for derived identifiers."""
import hashlib


def pluralize(word: str) -> str:
    if word.endswith("y") and word[-2:-1] not in ("a", "e", "i", "o", "u"):
        return word[:-1] + "ies"
    if word.endswith(("s", "x", "z", "ch", "sh")):
        return word + "es"
    return word + "s"


def singularize(word: str) -> str:
    if word.endswith("ies"):
        return word[:-3] + "y"
    if word.endswith(("ses", "xes", "zes", "ches", "shes")):
        return word[:-2]
    if word.endswith("s") and not word.endswith("ss"):
        return word[:-1]
    return word


def foreign_key_column_for(table_name: str) -> str:
    """``users`` -> ``user_id``; schema prefixes are dropped."""
    return f"{singularize(str(table_name).split('.')[-1])}_id"


def table_for_foreign_key_column(column: str) -> str:
    """``user_id`` -> ``users``."""
    base = column[:-3] if column.endswith("_id") else column
    return pluralize(base)


def foreign_key_name(table_name: str, column: str) -> str:
    identifier = f"{table_name}_{column}_fk"
    hashed = hashlib.sha256(identifier.encode()).hexdigest()[:10]
    return f"fk_rails_{hashed}"
