"""Database initialization script."""
from pathlib import Path
from typing import Optional, Union

from grocery.db.connection import DatabaseConnection
from grocery.db.schema import ALL_TABLES, PRODUCT_SEED
from grocery.utils.logger import get_logger

logger = get_logger(__name__)


def init_db(db_path: Optional[Union[str, Path]] = None) -> Path:
    """Create every table and apply the seed data.

    Safe to run against an existing database.

    Returns:
        Path of the initialized database file
    """
    with DatabaseConnection(db_path) as db:
        for ddl in ALL_TABLES:
            db.create_table_if_absent(ddl)
        db.run_batch_transactional(PRODUCT_SEED)
        logger.info("Database initialized", path=str(db.db_path))
        return db.db_path


if __name__ == "__main__":
    init_db()
