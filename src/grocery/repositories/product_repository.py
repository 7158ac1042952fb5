"""SQLite repository for products."""
from datetime import date
from decimal import Decimal
from typing import Optional, List, Dict, Any

from sqlalchemy import text
from sqlalchemy.engine import RowMapping
from sqlalchemy.exc import SQLAlchemyError

from grocery.db.connection import DatabaseConnection
from grocery.db.schema import PRODUCT_TABLE, PRODUCT_SEED
from grocery.domain.types import Product
from .base_repository import BaseRepository


SELECT_ALL = text("SELECT Id, Name, Stock, Date, Price FROM Product ORDER BY Id")
SELECT_ONE = text("SELECT Id, Name, Stock, Date, Price FROM Product WHERE Id = :id")
INSERT = text(
    "INSERT INTO Product (Name, Stock, Date, Price) "
    "VALUES (:name, :stock, :date, :price)"
)
UPDATE = text(
    "UPDATE Product SET Name = :name, Stock = :stock, Date = :date, Price = :price "
    "WHERE Id = :id"
)
DELETE = text("DELETE FROM Product WHERE Id = :id")


class ProductRepository(BaseRepository[Product]):
    """Repository for the product catalog.

    Creates the Product table and its seed rows on construction, then warms
    the cache.
    """

    def __init__(self, connection: Optional[DatabaseConnection] = None):
        super().__init__(connection)
        self.db.create_table_if_absent(PRODUCT_TABLE)
        self.db.run_batch_transactional(PRODUCT_SEED)
        self.get_all()

    @staticmethod
    def _from_row(row: RowMapping) -> Product:
        return Product(
            id=row["Id"],
            name=row["Name"],
            stock=row["Stock"],
            shelf_life=date.fromisoformat(row["Date"]),
            # Stored as REAL; go through str to keep the written digits
            price=Decimal(str(row["Price"])),
        )

    @staticmethod
    def _to_params(item: Product) -> Dict[str, Any]:
        return {
            "name": item.name,
            "stock": item.stock,
            "date": item.shelf_life.isoformat(),
            "price": float(item.price),
        }

    def get_all(self) -> List[Product]:
        """Read every product and rebuild the cache from it."""
        with self.db.scope() as connection:
            rows = connection.execute(SELECT_ALL).mappings().all()
        return self._reload_cache(self._from_row(row) for row in rows)

    def get(self, product_id: int) -> Optional[Product]:
        """Get a product by id, or None if it does not exist."""
        if product_id <= 0:
            return None
        with self.db.scope() as connection:
            row = connection.execute(SELECT_ONE, {"id": product_id}).mappings().first()
        return self._from_row(row) if row else None

    def add(self, item: Product) -> Optional[Product]:
        """
        Insert a product.

        The store-assigned id is set on the passed object, which is cached
        and returned.

        Args:
            item: Product to insert; its id is ignored

        Returns:
            The same product with its new id, or None if the store failed
        """
        try:
            with self.db.transaction() as connection:
                new_id = connection.execute(INSERT, self._to_params(item)).lastrowid
        except SQLAlchemyError:
            self.logger.exception("Failed to add product")
            return None

        item.id = new_id
        self._cache_put(item)
        self._log_action("add_product", product_id=item.id, product_name=item.name)
        return item

    def update(self, item: Product) -> Optional[Product]:
        """
        Write all fields of a product.

        The cached product with the same id is updated in place.

        Returns:
            The product, or None if it has no id, no row matched or the
            store failed
        """
        if item.id <= 0:
            return None
        try:
            with self.db.transaction() as connection:
                params = self._to_params(item)
                params["id"] = item.id
                rows = connection.execute(UPDATE, params).rowcount
        except SQLAlchemyError:
            self.logger.exception("Failed to update product")
            return None

        if rows == 0:
            self._log_action("update_product", status="not_found", product_id=item.id)
            return None

        self._cache_patch(item)
        self._log_action("update_product", product_id=item.id)
        return item

    def delete(self, item: Product) -> Optional[Product]:
        """
        Delete a product by its id.

        List items referring to it are removed by the store.

        Returns:
            The product, or None if nothing was deleted
        """
        if item.id <= 0:
            return None
        try:
            with self.db.transaction() as connection:
                rows = connection.execute(DELETE, {"id": item.id}).rowcount
        except SQLAlchemyError:
            self.logger.exception("Failed to delete product")
            return None

        if rows == 0:
            self._log_action("delete_product", status="not_found", product_id=item.id)
            return None

        self._cache_remove(item.id)
        self._log_action("delete_product", product_id=item.id)
        return item
