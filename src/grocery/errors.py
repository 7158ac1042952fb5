"""Error types for the grocery data core."""
from typing import Optional, Dict, Any


class GroceryDataError(Exception):
    """Base class for data-layer errors."""
    def __init__(
        self,
        message: str,
        metadata: Optional[Dict[str, Any]] = None
    ):
        self.message = message
        self.metadata = metadata or {}
        super().__init__(message)


class StorageLocationError(GroceryDataError):
    """The database file location cannot be resolved or created."""
    pass


class MissingReferenceError(GroceryDataError):
    """A referenced parent row does not exist."""

    def __init__(self, table: str, row_id: int):
        super().__init__(
            f"{table} row {row_id} does not exist",
            metadata={"table": table, "id": row_id}
        )
        self.table = table
        self.row_id = row_id
