"""SQLite repository for grocery list items with reference checks."""
from typing import Optional, List, Union

from sqlalchemy import text
from sqlalchemy.engine import Connection, RowMapping
from sqlalchemy.exc import SQLAlchemyError

from grocery.db.connection import DatabaseConnection
from grocery.db.schema import PRODUCT_TABLE, GROCERY_LIST_TABLE, GROCERY_LIST_ITEM_TABLE
from grocery.domain.types import GroceryListItem
from grocery.errors import MissingReferenceError
from .base_repository import BaseRepository


SELECT_ALL = text("SELECT Id, GroceryListId, ProductId, Amount FROM GroceryListItem ORDER BY Id")
SELECT_ONE = text("SELECT Id, GroceryListId, ProductId, Amount FROM GroceryListItem WHERE Id = :id")
SELECT_ON_LIST = text(
    "SELECT Id, GroceryListId, ProductId, Amount FROM GroceryListItem "
    "WHERE GroceryListId = :list_id ORDER BY Id"
)
INSERT = text(
    "INSERT INTO GroceryListItem (GroceryListId, ProductId, Amount) "
    "VALUES (:grocery_list_id, :product_id, :amount)"
)
UPDATE = text(
    "UPDATE GroceryListItem SET GroceryListId = :grocery_list_id, "
    "ProductId = :product_id, Amount = :amount WHERE Id = :id"
)
DELETE = text("DELETE FROM GroceryListItem WHERE Id = :id")
LAST_INSERT_ID = text("SELECT last_insert_rowid()")

EXISTS = {
    "GroceryList": text("SELECT 1 FROM GroceryList WHERE Id = :id LIMIT 1"),
    "Product": text("SELECT 1 FROM Product WHERE Id = :id LIMIT 1"),
}


class GroceryListItemRepository(BaseRepository[GroceryListItem]):
    """Repository for the products placed on grocery lists.

    Both references of an item are checked before it is inserted so a
    missing list or product is reported as a rejected add rather than a
    constraint error.
    """

    def __init__(self, connection: Optional[DatabaseConnection] = None):
        super().__init__(connection)
        # Parent tables first, so construction order between repositories
        # does not matter
        self.db.create_table_if_absent(PRODUCT_TABLE)
        self.db.create_table_if_absent(GROCERY_LIST_TABLE)
        self.db.create_table_if_absent(GROCERY_LIST_ITEM_TABLE)
        self.get_all()

    @staticmethod
    def _from_row(row: RowMapping) -> GroceryListItem:
        return GroceryListItem(
            id=row["Id"],
            grocery_list_id=row["GroceryListId"],
            product_id=row["ProductId"],
            amount=row["Amount"],
        )

    @staticmethod
    def _has_valid_fields(item: Optional[GroceryListItem]) -> bool:
        return (
            item is not None
            and item.grocery_list_id > 0
            and item.product_id > 0
            and item.amount > 0
        )

    @staticmethod
    def _require_row(connection: Connection, table: str, row_id: int) -> None:
        """Raise MissingReferenceError if table has no row with row_id."""
        if connection.execute(EXISTS[table], {"id": row_id}).scalar() is None:
            raise MissingReferenceError(table, row_id)

    def get_all(self) -> List[GroceryListItem]:
        """Read every list item and rebuild the cache from it."""
        with self.db.scope() as connection:
            rows = connection.execute(SELECT_ALL).mappings().all()
        return self._reload_cache(self._from_row(row) for row in rows)

    def get_all_on_grocery_list_id(self, list_id: int) -> List[GroceryListItem]:
        """Read the items of one list straight from the store."""
        with self.db.scope() as connection:
            rows = connection.execute(SELECT_ON_LIST, {"list_id": list_id}).mappings().all()
        return [self._from_row(row) for row in rows]

    def get(self, item_id: int) -> Optional[GroceryListItem]:
        if item_id <= 0:
            return None
        with self.db.scope() as connection:
            row = connection.execute(SELECT_ONE, {"id": item_id}).mappings().first()
        return self._from_row(row) if row else None

    def add(self, item: Optional[GroceryListItem]) -> Optional[GroceryListItem]:
        """
        Insert a list item after checking that its list and product exist.

        Args:
            item: Item to insert; its id is ignored

        Returns:
            The same item with its new id, or None if a field is not
            positive, a reference is missing or the store failed. Nothing
            is written in those cases.
        """
        if not self._has_valid_fields(item):
            self._log_action("add_list_item", status="rejected")
            return None

        try:
            with self.db.transaction() as connection:
                self._require_row(connection, "GroceryList", item.grocery_list_id)
                self._require_row(connection, "Product", item.product_id)
                connection.execute(INSERT, {
                    "grocery_list_id": item.grocery_list_id,
                    "product_id": item.product_id,
                    "amount": item.amount,
                })
                new_id = connection.execute(LAST_INSERT_ID).scalar_one()
        except MissingReferenceError as e:
            self._log_action("add_list_item", status="rejected", reason=e.message)
            return None
        except SQLAlchemyError:
            self.logger.exception("Failed to add list item")
            return None

        item.id = new_id
        self._cache_put(item)
        self._log_action("add_list_item", item_id=item.id, list_id=item.grocery_list_id)
        return item

    def update(self, item: Optional[GroceryListItem]) -> Optional[GroceryListItem]:
        """
        Write the references and amount of an existing list item.

        References are not probed here; the store's foreign keys reject a
        dangling one, which ends up as a None result.
        """
        if not self._has_valid_fields(item) or item.id <= 0:
            self._log_action("update_list_item", status="rejected")
            return None

        try:
            with self.db.transaction() as connection:
                rows = connection.execute(UPDATE, {
                    "id": item.id,
                    "grocery_list_id": item.grocery_list_id,
                    "product_id": item.product_id,
                    "amount": item.amount,
                }).rowcount
        except SQLAlchemyError:
            self.logger.exception("Failed to update list item")
            return None

        if rows == 0:
            self._log_action("update_list_item", status="not_found", item_id=item.id)
            return None

        self._cache_patch(item)
        self._log_action("update_list_item", item_id=item.id)
        return item

    def delete(self, item_id: Union[int, GroceryListItem]) -> bool:
        """
        Delete a list item by id.

        Returns:
            True if a row was deleted

        Raises:
            NotImplementedError: If called with an item instead of an id
            TypeError: If the id is not an int (bools included)
        """
        if isinstance(item_id, GroceryListItem):
            raise NotImplementedError("Delete list items by id")
        if isinstance(item_id, bool) or not isinstance(item_id, int):
            raise TypeError(f"List item id must be an int, got {type(item_id).__name__}")
        if item_id <= 0:
            return False

        try:
            with self.db.transaction() as connection:
                rows = connection.execute(DELETE, {"id": item_id}).rowcount
        except SQLAlchemyError:
            self.logger.exception("Failed to delete list item")
            return False

        if rows == 0:
            return False

        self._cache_remove(item_id)
        self._log_action("delete_list_item", item_id=item_id)
        return True
