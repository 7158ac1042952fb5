"""SQLite persistence layer for products, grocery lists and their items."""
