"""Base repository class with common functionality."""
from typing import TypeVar, Generic, Optional, List, Dict, Iterable

from grocery.db.connection import DatabaseConnection
from grocery.domain.types import Entity
from grocery.utils.logger import get_logger

# Generic type for repository entities
T = TypeVar('T', bound=Entity)


class BaseRepository(Generic[T]):
    """Base class for all repositories.

    Keeps an in-memory read cache of the table keyed by id. The cache is
    rebuilt on every full read and patched after each committed single-row
    write; it is never handed out directly.
    """

    def __init__(self, connection: Optional[DatabaseConnection] = None):
        """
        Initialize the repository.

        Args:
            connection: Connection manager to borrow the database handle from
        """
        self.db = connection or DatabaseConnection()
        self.logger = get_logger(self.__class__.__name__)
        self._cache: Dict[int, T] = {}

    @property
    def cached(self) -> List[T]:
        """Snapshot of the cached entities in storage order."""
        return list(self._cache.values())

    def _log_action(self, action: str, status: str = "success", **kwargs) -> None:
        """
        Log a repository action.

        Args:
            action: Name of the action
            status: Status of the action
            **kwargs: Additional log data
        """
        self.logger.debug(f"{action}: {status}", **kwargs)

    def _reload_cache(self, items: Iterable[T]) -> List[T]:
        self._cache.clear()
        for item in items:
            self._cache[item.id] = item
        return self.cached

    def _cache_put(self, item: T) -> None:
        self._cache[item.id] = item

    def _cache_patch(self, item: T) -> None:
        """Copy the fields of item onto the cached entity with the same id."""
        cached = self._cache.get(item.id)
        if cached is None or cached is item:
            return
        for field in type(item).model_fields:
            setattr(cached, field, getattr(item, field))

    def _cache_remove(self, item_id: int) -> None:
        self._cache.pop(item_id, None)
