"""
Embedded DuckDB key/value backend.

All keys live in a single ``kv_store`` table inside one database file.
"""

import logging
from pathlib import Path

import duckdb

from ..errors import PersistenceError
from .base import KeyValueStore

logger = logging.getLogger(__name__)

SCHEMA_STATEMENT = """
CREATE TABLE IF NOT EXISTS kv_store (
    key VARCHAR PRIMARY KEY,
    value BLOB NOT NULL
)
"""


class DuckDBKeyValueStore(KeyValueStore):
    """
    Manages a DuckDB connection holding the key/value table.
    """

    def __init__(self, db_path: str | Path, quota_bytes: int | None = None) -> None:
        """
        Args:
            db_path: Path to the DuckDB database file, or ":memory:"
            quota_bytes: Maximum total size of stored values
        """
        super().__init__(quota_bytes)
        self.db_path = str(db_path)
        self._connection: duckdb.DuckDBPyConnection | None = None

        if self.db_path != ":memory:":
            Path(self.db_path).parent.mkdir(parents=True, exist_ok=True)

        self.initialize_schema()

    def connect(self) -> duckdb.DuckDBPyConnection:
        """Get or create the database connection."""
        if self._connection is None:
            self._connection = duckdb.connect(self.db_path)
            logger.info(f"Connected to DuckDB database at {self.db_path}")

        return self._connection

    def close(self) -> None:
        """Close the database connection."""
        if self._connection is not None:
            self._connection.close()
            self._connection = None
            logger.info("Closed DuckDB database connection")

    def initialize_schema(self) -> None:
        """Create the key/value table if it does not exist."""
        try:
            self.connect().execute(SCHEMA_STATEMENT)
        except duckdb.Error as e:
            logger.error(f"Failed to initialize key/value schema: {e}")
            raise PersistenceError(
                f"Failed to initialize DuckDB store: {e}",
                code="schema_init_failed",
                details={"db_path": self.db_path},
                original_exception=e,
            ) from e

    def get(self, key: str) -> bytes | None:
        try:
            row = self.connect().execute("SELECT value FROM kv_store WHERE key = ?", [key]).fetchone()
        except duckdb.Error as e:
            raise PersistenceError(
                f"Failed to read '{key}': {e}",
                code="read_failed",
                details={"key": key, "db_path": self.db_path},
                original_exception=e,
            ) from e

        if row is None:
            return None
        return bytes(row[0])

    def delete(self, key: str) -> None:
        try:
            self.connect().execute("DELETE FROM kv_store WHERE key = ?", [key])
        except duckdb.Error as e:
            raise PersistenceError(
                f"Failed to delete '{key}': {e}",
                code="delete_failed",
                details={"key": key, "db_path": self.db_path},
                original_exception=e,
            ) from e

    def _write(self, key: str, value: bytes) -> None:
        try:
            self.connect().execute(
                "INSERT INTO kv_store (key, value) VALUES (?, ?) "
                "ON CONFLICT (key) DO UPDATE SET value = excluded.value",
                [key, value],
            )
        except duckdb.Error as e:
            logger.error(f"Key/value write failed for {key}: {e}")
            raise PersistenceError(
                f"Failed to write '{key}': {e}",
                code="write_failed",
                details={"key": key, "db_path": self.db_path},
                original_exception=e,
            ) from e

    def _size_excluding(self, key: str) -> int:
        try:
            row = (
                self.connect()
                .execute("SELECT COALESCE(SUM(octet_length(value)), 0) FROM kv_store WHERE key <> ?", [key])
                .fetchone()
            )
        except duckdb.Error as e:
            raise PersistenceError(
                f"Failed to measure stored size: {e}",
                code="size_query_failed",
                details={"db_path": self.db_path},
                original_exception=e,
            ) from e
        return int(row[0]) if row else 0
