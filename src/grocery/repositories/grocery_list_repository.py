"""SQLite repository for grocery lists."""
from datetime import datetime
from typing import Optional, List, Dict, Any

from sqlalchemy import text
from sqlalchemy.engine import RowMapping
from sqlalchemy.exc import SQLAlchemyError

from grocery.db.connection import DatabaseConnection
from grocery.db.schema import GROCERY_LIST_TABLE
from grocery.domain.types import GroceryList
from .base_repository import BaseRepository


SELECT_ALL = text("SELECT Id, Name, CreatedOn, Color, OwnerUserId FROM GroceryList ORDER BY Id")
SELECT_ONE = text("SELECT Id, Name, CreatedOn, Color, OwnerUserId FROM GroceryList WHERE Id = :id")
INSERT = text(
    "INSERT INTO GroceryList (Name, CreatedOn, Color, OwnerUserId) "
    "VALUES (:name, :created_on, :color, :owner_user_id)"
)
UPDATE = text(
    "UPDATE GroceryList SET Name = :name, CreatedOn = :created_on, Color = :color, "
    "OwnerUserId = :owner_user_id WHERE Id = :id"
)
DELETE = text("DELETE FROM GroceryList WHERE Id = :id")


class GroceryListRepository(BaseRepository[GroceryList]):
    """Repository for grocery lists."""

    def __init__(self, connection: Optional[DatabaseConnection] = None):
        super().__init__(connection)
        self.db.create_table_if_absent(GROCERY_LIST_TABLE)
        self.get_all()

    @staticmethod
    def _from_row(row: RowMapping) -> GroceryList:
        created_on = row["CreatedOn"]
        return GroceryList(
            id=row["Id"],
            name=row["Name"],
            created_on=datetime.fromisoformat(created_on) if created_on else None,
            color=row["Color"],
            owner_user_id=row["OwnerUserId"],
        )

    @staticmethod
    def _to_params(item: GroceryList) -> Dict[str, Any]:
        return {
            "name": item.name,
            "created_on": item.created_on.isoformat() if item.created_on else None,
            "color": item.color,
            "owner_user_id": item.owner_user_id,
        }

    def get_all(self) -> List[GroceryList]:
        """Read every list and rebuild the cache from it."""
        with self.db.scope() as connection:
            rows = connection.execute(SELECT_ALL).mappings().all()
        return self._reload_cache(self._from_row(row) for row in rows)

    def get(self, list_id: int) -> Optional[GroceryList]:
        if list_id <= 0:
            return None
        with self.db.scope() as connection:
            row = connection.execute(SELECT_ONE, {"id": list_id}).mappings().first()
        return self._from_row(row) if row else None

    def add(self, item: GroceryList) -> Optional[GroceryList]:
        """Insert a list; blank names are rejected with None."""
        if not item.name.strip():
            self._log_action("add_list", status="rejected")
            return None
        try:
            with self.db.transaction() as connection:
                new_id = connection.execute(INSERT, self._to_params(item)).lastrowid
        except SQLAlchemyError:
            self.logger.exception("Failed to add grocery list")
            return None

        item.id = new_id
        self._cache_put(item)
        self._log_action("add_list", list_id=item.id)
        return item

    def update(self, item: GroceryList) -> Optional[GroceryList]:
        if item.id <= 0 or not item.name.strip():
            return None
        try:
            with self.db.transaction() as connection:
                params = self._to_params(item)
                params["id"] = item.id
                rows = connection.execute(UPDATE, params).rowcount
        except SQLAlchemyError:
            self.logger.exception("Failed to update grocery list")
            return None

        if rows == 0:
            return None

        self._cache_patch(item)
        self._log_action("update_list", list_id=item.id)
        return item

    def delete(self, item: GroceryList) -> Optional[GroceryList]:
        """Delete a list together with its items."""
        if item.id <= 0:
            return None
        try:
            with self.db.transaction() as connection:
                rows = connection.execute(DELETE, {"id": item.id}).rowcount
        except SQLAlchemyError:
            self.logger.exception("Failed to delete grocery list")
            return None

        if rows == 0:
            return None

        self._cache_remove(item.id)
        self._log_action("delete_list", list_id=item.id)
        return item
