import asyncio
from contextlib import asynccontextmanager

import aiosqlite
from pydantic import ValidationError as PydanticValidationError

from config import DB_PATH
from constants import EXPENSE_COLUMNS, REQUIRED_COLUMNS, SCHEMA_VERSION
from errors import (
    ExpenseError,
    SchemaMismatchError,
    StorageError,
    StorageIOError,
    StorageUnavailableError,
)
from models import Expense
from utils.logging import logger

CREATE_EXPENSES_TABLE = """
    CREATE TABLE IF NOT EXISTS expenses (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        amount REAL NOT NULL,
        category TEXT NOT NULL,
        note TEXT,
        date TEXT NOT NULL
    );
"""


def _storage_error(action: str, error: Exception) -> StorageError:
    """Translate a sqlite error into the store's error kinds."""
    message = str(error)
    if isinstance(error, aiosqlite.OperationalError) and "no such column" in message:
        return SchemaMismatchError(
            f"Error {action}: {message}. The expenses table is out of date, reset the store"
        )
    return StorageIOError(f"Error {action}: {message}")


class Database:
    """Handles database operations for the expense tracker.

    A single connection is shared by every call so that a read issued after
    a write always sees that write.
    """

    def __init__(self, db_path: str = DB_PATH):
        """Initialize database settings; the connection is opened by initialize()."""
        self.db_path = db_path
        self._connection: aiosqlite.Connection | None = None
        self._connection_lock = asyncio.Lock()

    @property
    def is_open(self) -> bool:
        return self._connection is not None

    async def open(self) -> None:
        """Open the database connection if it is not open yet."""
        if self._connection is not None:
            return

        logger.debug(f"Opening async database connection to {self.db_path}")
        connection = None
        try:
            connection = await aiosqlite.connect(self.db_path)
            await connection.execute("PRAGMA synchronous = NORMAL")
            await connection.execute("PRAGMA temp_store = MEMORY")
        except aiosqlite.Error as e:
            logger.error(f"Error opening database {self.db_path}: {e}")
            if connection is not None:
                await connection.close()
            raise StorageUnavailableError(f"Cannot open database {self.db_path}: {e}") from e

        # Make aiosqlite return rows as Row objects accessible by column name
        connection.row_factory = aiosqlite.Row
        self._connection = connection

    async def close(self) -> None:
        """Close the database connection."""
        logger.info("Closing database connection")
        async with self._connection_lock:
            if self._connection is not None:
                await self._connection.close()
                self._connection = None
        logger.info("Database connection closed")

    def get_connection(self) -> aiosqlite.Connection:
        """Return the open connection or fail when the store is not ready."""
        if self._connection is None:
            raise StorageUnavailableError("Database is not initialized")
        return self._connection

    @asynccontextmanager
    async def connection(self, action: str = "accessing the database"):
        """Async context manager yielding a cursor on the shared connection."""
        async with self._connection_lock:
            conn = self.get_connection()
            try:
                async with conn.cursor() as cursor:
                    yield cursor
            except aiosqlite.Error as e:
                raise _storage_error(action, e) from e

    @asynccontextmanager
    async def transaction(self, action: str = "writing to the database"):
        """Async context manager for database transactions."""
        async with self._connection_lock:
            conn = self.get_connection()
            try:
                await conn.execute("BEGIN")
                async with conn.cursor() as cursor:
                    yield cursor
                await conn.commit()
            except aiosqlite.Error as e:
                await self._rollback(conn)
                raise _storage_error(action, e) from e
            except Exception:
                await self._rollback(conn)
                raise

    @staticmethod
    async def _rollback(conn: aiosqlite.Connection) -> None:
        try:
            await conn.rollback()
        except aiosqlite.Error as e:
            logger.error(f"Error rolling back transaction: {e}")

    async def initialize(self) -> None:
        """Open the database, create the expenses table and verify its schema."""
        logger.info("Initializing expense store")
        await self.open()
        await self.create_tables()
        await self.check_schema()
        logger.info("Expense store ready")

    async def create_tables(self) -> None:
        """Create database tables if they don't exist."""
        logger.info("Initializing database tables")
        try:
            async with self.connection("creating tables") as cursor:
                await cursor.execute(CREATE_EXPENSES_TABLE)
            logger.info("Database tables initialized successfully")
        except ExpenseError as e:
            logger.error(f"Error creating database tables: {e}")
            raise

    async def check_schema(self) -> None:
        """Verify that the expenses table has every expected column.

        Tables created before the date column existed are not migrated.

        Raises:
            SchemaMismatchError: If a column is missing, a required column
                accepts NULL, or the stored schema version is newer than this
                code understands
        """
        logger.info("Checking expenses table schema")
        try:
            async with self.connection("checking schema") as cursor:
                await cursor.execute("PRAGMA table_info(expenses)")
                # table_info rows: (cid, name, type, notnull, default, pk)
                table_info = await cursor.fetchall()
                columns = {col[1] for col in table_info}
                missing = [name for name in EXPENSE_COLUMNS if name not in columns]
                if missing:
                    raise SchemaMismatchError(
                        f"Expenses table is missing column(s): {', '.join(missing)}. "
                        "Reset the store to recreate it"
                    )

                nullable = [
                    col[1] for col in table_info if col[1] in REQUIRED_COLUMNS and not col[3]
                ]
                if nullable:
                    raise SchemaMismatchError(
                        "Expenses table allows NULL in required column(s): "
                        f"{', '.join(nullable)}. "
                        "Reset the store to recreate it"
                    )

                await cursor.execute("PRAGMA user_version")
                version = (await cursor.fetchone())[0]
                if version > SCHEMA_VERSION:
                    raise SchemaMismatchError(
                        f"Expenses table has schema version {version}, "
                        f"expected at most {SCHEMA_VERSION}"
                    )
                if version < SCHEMA_VERSION:
                    logger.info(f"Stamping expenses table with schema version {SCHEMA_VERSION}")
                    await cursor.execute(f"PRAGMA user_version = {SCHEMA_VERSION}")
            logger.info("Expenses table schema is up to date")
        except ExpenseError as e:
            logger.error(f"Schema check failed: {e}")
            raise

    async def reset(self) -> None:
        """Drop and recreate the expenses table. All expenses are lost."""
        logger.warning("Resetting expense store, all expenses will be deleted")
        await self.open()
        try:
            async with self.connection("resetting the store") as cursor:
                await cursor.execute("DROP TABLE IF EXISTS expenses")
                await cursor.execute(CREATE_EXPENSES_TABLE)
                await cursor.execute(f"PRAGMA user_version = {SCHEMA_VERSION}")
            logger.info("Expense store reset successfully")
        except ExpenseError as e:
            logger.error(f"Error resetting expense store: {e}")
            raise

    async def create(self, amount: float, category: str, note: str | None, date: str) -> int:
        """Add a new expense record and return its id."""
        logger.info(f"Adding expense of {amount} in '{category}' dated {date}")
        try:
            async with self.transaction("adding expense") as cursor:
                await cursor.execute(
                    "INSERT INTO expenses (amount, category, note, date) VALUES (?, ?, ?, ?);",
                    (amount, category, note, date),
                )
                expense_id = cursor.lastrowid
            logger.info(f"Expense {expense_id} added successfully")
            return expense_id
        except ExpenseError as e:
            logger.error(f"Error adding expense: {e}")
            raise

    async def list_all(self) -> list[Expense]:
        """Return every expense, most recently created first."""
        logger.debug("Fetching all expenses")
        try:
            async with self.connection("fetching expenses") as cursor:
                await cursor.execute(
                    "SELECT id, amount, category, note, date FROM expenses ORDER BY id DESC;"
                )
                rows = await cursor.fetchall()
            try:
                expenses = [Expense.from_row(tuple(row)) for row in rows]
            except PydanticValidationError as e:
                raise StorageIOError(f"Error fetching expenses: malformed row ({e})") from e
            logger.debug(f"Retrieved {len(expenses)} expenses")
            return expenses
        except ExpenseError as e:
            logger.error(f"Error fetching expenses: {e}")
            raise

    async def update(
        self, expense_id: int, amount: float, category: str, note: str | None, date: str
    ) -> None:
        """Overwrite an expense record. Unknown ids are left alone."""
        logger.info(f"Updating expense {expense_id}")
        try:
            async with self.transaction("updating expense") as cursor:
                await cursor.execute(
                    "UPDATE expenses SET amount = ?, category = ?, note = ?, date = ? WHERE id = ?;",
                    (amount, category, note, date, expense_id),
                )
                updated = cursor.rowcount > 0
            if updated:
                logger.info(f"Expense {expense_id} updated successfully")
            else:
                logger.warning(f"Expense {expense_id} not found, nothing updated")
        except ExpenseError as e:
            logger.error(f"Error updating expense {expense_id}: {e}")
            raise

    async def delete(self, expense_id: int) -> None:
        """Remove an expense record. Unknown ids are left alone."""
        logger.info(f"Removing expense with ID {expense_id}")
        try:
            async with self.transaction("removing expense") as cursor:
                await cursor.execute("DELETE FROM expenses WHERE id = ?;", (expense_id,))
                removed = cursor.rowcount > 0
            if removed:
                logger.info(f"Expense {expense_id} removed successfully")
            else:
                logger.warning(f"Expense {expense_id} not found, nothing removed")
        except ExpenseError as e:
            logger.error(f"Error removing expense {expense_id}: {e}")
            raise


# Create global database instance
db = Database()
