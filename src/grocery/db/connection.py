"""Database connection management for the grocery data core."""
from contextlib import contextmanager
from pathlib import Path
from typing import Generator, Iterable, Optional, Union
import sqlite3
import sys

from sqlalchemy import create_engine, event, text
from sqlalchemy.engine import Connection, Engine, RootTransaction
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.pool import NullPool

from grocery.config.settings import GrocerySettings, get_settings
from grocery.errors import StorageLocationError
from grocery.utils.logger import get_logger

logger = get_logger(__name__)

MOBILE_PLATFORMS = ("android", "ios")


def set_sqlite_pragma(dbapi_connection, connection_record):
    """Configure SQLite connection."""
    # SQLite leaves foreign keys off for every new connection
    if isinstance(dbapi_connection, sqlite3.Connection):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


def platform_data_dir() -> Path:
    """Get the directory the database lives in when none is configured.

    Mobile builds keep their data inside the app sandbox. Desktop and
    server processes use the directory of their entry script, so the file
    does not move with the working directory. Interactive sessions and
    ``python -c`` have no script and fall back to the working directory.
    """
    if sys.platform == "ios":
        return Path.home() / "Library"
    if sys.platform in MOBILE_PLATFORMS:
        return Path.home()
    script = sys.argv[0] if sys.argv else ""
    if script and script != "-c":
        return Path(script).resolve().parent
    return Path.cwd()


def resolve_storage_location(
    db_path: Optional[Union[str, Path]] = None,
    settings: Optional[GrocerySettings] = None
) -> Path:
    """
    Resolve the SQLite database file location.

    Args:
        db_path: Explicit file path; wins over configuration
        settings: Settings to read DATA_DIR and DB_NAME from

    Returns:
        Absolute path of the database file. Its directory exists.

    Raises:
        StorageLocationError: If the directory cannot be created
    """
    settings = settings or get_settings()
    if db_path is not None:
        path = Path(db_path)
    else:
        folder = settings.DATA_DIR or platform_data_dir()
        path = Path(folder) / settings.DB_NAME

    try:
        path.parent.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise StorageLocationError(
            f"Cannot create database directory {path.parent}",
            metadata={"path": str(path)}
        ) from e
    return path.resolve()


class DatabaseConnection:
    """Owns the SQLite handle that repositories borrow per operation.

    The handle is opened and closed around each unit of work and never
    left open between calls.
    """

    def __init__(
        self,
        db_path: Optional[Union[str, Path]] = None,
        settings: Optional[GrocerySettings] = None
    ):
        """
        Initialize the connection manager.

        Args:
            db_path: Explicit database file; resolved from settings if omitted
            settings: Settings instance (default: cached application settings)
        """
        self.settings = settings or get_settings()
        self.db_path = resolve_storage_location(db_path, self.settings)

        # No pooling: closing the connection releases the file
        self.engine: Engine = create_engine(
            f"sqlite:///{self.db_path}",
            echo=self.settings.DB_ECHO,
            poolclass=NullPool,
        )
        event.listen(self.engine, "connect", set_sqlite_pragma)

        self._connection: Optional[Connection] = None
        logger.debug("Using SQLite file", path=str(self.db_path))

    @property
    def is_open(self) -> bool:
        return self._connection is not None and not self._connection.closed

    def open(self) -> Connection:
        """Open the connection unless it is already open."""
        if not self.is_open:
            self._connection = self.engine.connect()
        return self._connection

    def close(self) -> None:
        """Close the connection unless it is already closed."""
        if self._connection is None:
            return
        try:
            self._connection.close()
        finally:
            self._connection = None

    @contextmanager
    def scope(self) -> Generator[Connection, None, None]:
        """Provide an open connection, closing it again on exit.

        A scope entered while the connection is already open leaves closing
        to whoever opened it.
        """
        opened_here = not self.is_open
        connection = self.open()
        try:
            yield connection
        finally:
            if opened_here:
                self.close()

    @contextmanager
    def transaction(self) -> Generator[Connection, None, None]:
        """
        Run a unit of work inside one transaction.

        Commits when the block finishes, unless the block already rolled
        back. On any failure the transaction is rolled back and the error
        re-raised.

        Yields:
            Connection: The open connection

        Raises:
            Exception: Any exception that occurs during the transaction
        """
        with self.scope() as connection:
            tx = connection.begin()
            try:
                yield connection
                if tx.is_active:
                    tx.commit()
            except Exception:
                self._rollback_quietly(tx)
                raise

    @staticmethod
    def _rollback_quietly(tx: RootTransaction) -> None:
        """Best-effort rollback; a failing rollback is logged, not raised."""
        try:
            if tx.is_active:
                tx.rollback()
        except SQLAlchemyError:
            logger.opt(exception=True).warning("Rollback failed")
        else:
            logger.debug("Transaction rolled back")

    def create_table_if_absent(self, ddl: str) -> None:
        """Execute a CREATE TABLE IF NOT EXISTS statement."""
        with self.scope() as connection:
            connection.execute(text(ddl))
            connection.commit()

    def run_batch_transactional(self, statements: Iterable[str]) -> None:
        """
        Execute statements in order inside a single transaction.

        Args:
            statements: SQL statements without bind parameters

        Raises:
            SQLAlchemyError: The first failing statement; nothing is committed
        """
        try:
            with self.transaction() as connection:
                for sql in statements:
                    connection.execute(text(sql))
        except SQLAlchemyError:
            logger.exception("Insert batch failed")
            raise

    def dispose(self) -> None:
        """Close any open handle and release the engine."""
        try:
            self.close()
        finally:
            self.engine.dispose()

    def __enter__(self) -> "DatabaseConnection":
        return self

    def __exit__(self, exc_type, exc_value, traceback) -> None:
        self.dispose()
