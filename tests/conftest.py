"""Test configuration and fixtures for the grocery data core."""
import pytest
from datetime import date, datetime
from decimal import Decimal
from loguru import logger
from sqlalchemy import text

from grocery.db.connection import DatabaseConnection
from grocery.domain import Product, GroceryList, GroceryListItem
from grocery.repositories import (
    ProductRepository,
    GroceryListRepository,
    GroceryListItemRepository,
)


@pytest.fixture
def db_path(tmp_path):
    """Path of a fresh database file for a test."""
    return tmp_path / "grocery_test.db"


@pytest.fixture
def connection(db_path):
    """Create a connection manager on the test database."""
    db = DatabaseConnection(db_path)
    yield db
    db.dispose()


@pytest.fixture
def product_repository(connection) -> ProductRepository:
    """Create a product repository (seeds the catalog)."""
    return ProductRepository(connection)


@pytest.fixture
def list_repository(connection) -> GroceryListRepository:
    """Create a grocery list repository."""
    return GroceryListRepository(connection)


@pytest.fixture
def item_repository(connection, product_repository, list_repository) -> GroceryListItemRepository:
    """Create a list item repository on a seeded database."""
    return GroceryListItemRepository(connection)


@pytest.fixture
def grocery_list(list_repository) -> GroceryList:
    """Create a test grocery list."""
    return list_repository.add(GroceryList(
        name="Weekend",
        created_on=datetime(2025, 9, 20, 10, 30),
        color="#FF4B4B",
        owner_user_id=1,
    ))


@pytest.fixture
def grocery_list_item(item_repository, grocery_list) -> GroceryListItem:
    """Put two of product 1 on the test list."""
    return item_repository.add(GroceryListItem(
        grocery_list_id=grocery_list.id,
        product_id=1,
        amount=2,
    ))


@pytest.fixture
def new_product() -> Product:
    """An unsaved product."""
    return Product(
        name="Appels",
        stock=25,
        shelf_life=date(2025, 10, 1),
        price=Decimal("3.49"),
    )


@pytest.fixture
def count_rows(connection):
    """Count the rows of a table straight from the store."""
    def _count(table: str) -> int:
        with connection.scope() as conn:
            return conn.execute(text(f"SELECT COUNT(*) FROM {table}")).scalar_one()
    return _count


@pytest.fixture
def fail_on(connection):
    """Install a trigger that makes the store abort a statement on a table."""
    def _install(event: str, table: str) -> None:
        with connection.scope() as conn:
            conn.execute(text(
                f"CREATE TRIGGER fail_{event.lower()}_{table} BEFORE {event} ON {table} "
                "BEGIN SELECT RAISE(ABORT, 'simulated failure'); END"
            ))
            conn.commit()
    return _install


@pytest.fixture
def log_records():
    """Capture log records emitted during a test."""
    records = []
    handler_id = logger.add(lambda message: records.append(message.record), level="DEBUG")
    yield records
    logger.remove(handler_id)
