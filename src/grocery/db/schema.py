"""Fixed schema and seed data for the grocery database."""
from typing import List

PRODUCT_TABLE = """
    CREATE TABLE IF NOT EXISTS Product (
        [Id]     INTEGER NOT NULL PRIMARY KEY AUTOINCREMENT,
        [Name]   TEXT NOT NULL,
        [Stock]  INTEGER NOT NULL,
        [Date]   TEXT NOT NULL,
        [Price]  REAL NOT NULL
    )"""

GROCERY_LIST_TABLE = """
    CREATE TABLE IF NOT EXISTS GroceryList (
        [Id]          INTEGER NOT NULL PRIMARY KEY AUTOINCREMENT,
        [Name]        TEXT NOT NULL,
        [CreatedOn]   TEXT NULL,
        [Color]       TEXT NULL,
        [OwnerUserId] INTEGER NULL
    )"""

GROCERY_LIST_ITEM_TABLE = """
    CREATE TABLE IF NOT EXISTS GroceryListItem (
        [Id]            INTEGER NOT NULL PRIMARY KEY AUTOINCREMENT,
        [GroceryListId] INTEGER NOT NULL,
        [ProductId]     INTEGER NOT NULL,
        [Amount]        INTEGER NOT NULL,
        FOREIGN KEY(GroceryListId) REFERENCES GroceryList(Id) ON DELETE CASCADE,
        FOREIGN KEY(ProductId)     REFERENCES Product(Id)     ON DELETE CASCADE
    )"""

# Parents first so the foreign keys resolve
ALL_TABLES: List[str] = [PRODUCT_TABLE, GROCERY_LIST_TABLE, GROCERY_LIST_ITEM_TABLE]

PRODUCT_SEED: List[str] = [
    "INSERT OR IGNORE INTO Product(Id, Name, Stock, Date, Price) VALUES(1, 'Melk', 300, '2025-09-25', 0.95)",
    "INSERT OR IGNORE INTO Product(Id, Name, Stock, Date, Price) VALUES(2, 'Kaas', 100, '2025-09-30', 7.98)",
    "INSERT OR IGNORE INTO Product(Id, Name, Stock, Date, Price) VALUES(3, 'Brood', 400, '2025-09-12', 2.19)",
    "INSERT OR IGNORE INTO Product(Id, Name, Stock, Date, Price) VALUES(4, 'Cornflakes', 0, '2025-12-31', 1.48)",
]
