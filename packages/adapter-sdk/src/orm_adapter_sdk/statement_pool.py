import logging
from collections import OrderedDict
from typing import Any, List, Optional

logger = logging.getLogger(__name__)


class StatementPool:
    """Cache of prepared statements keyed by SQL text

    Holds at most `statement_limit` entries; the least recently used
    statement is evicted (and deallocated) when a new one would exceed it.
    """

    DEFAULT_STATEMENT_LIMIT = 1000

    def __init__(self, statement_limit: Optional[int] = None):
        """Initialize the pool.

        Args:
            statement_limit (Optional[int]): Maximum number of statements to keep.
        """
        self._cache: "OrderedDict[str, Any]" = OrderedDict()
        self._statement_limit = statement_limit or self.DEFAULT_STATEMENT_LIMIT

    @property
    def statement_limit(self) -> int:
        return self._statement_limit

    def __contains__(self, key: str) -> bool:
        return key in self._cache

    def __getitem__(self, key: str) -> Any:
        self._cache.move_to_end(key)
        return self._cache[key]

    def __setitem__(self, key: str, statement: Any) -> None:
        if key in self._cache:
            self._cache.move_to_end(key)
        self._cache[key] = statement
        self._evict()

    def __len__(self) -> int:
        return len(self._cache)

    def get(self, key: str, default: Any = None) -> Any:
        if key not in self._cache:
            return default
        return self[key]

    def keys(self) -> List[str]:
        return list(self._cache.keys())

    def delete(self, key: str) -> None:
        statement = self._cache.pop(key, None)
        if statement is not None:
            self.dealloc(statement)

    def clear(self) -> None:
        for statement in self._cache.values():
            self.dealloc(statement)
        self._cache.clear()

    def dealloc(self, statement: Any) -> None:
        """Release server-side resources held by a statement."""

    def _evict(self) -> None:
        while len(self._cache) > self._statement_limit:
            key, statement = self._cache.popitem(last=False)
            logger.debug(f"Evicting prepared statement: {key[:80]}")
            self.dealloc(statement)
