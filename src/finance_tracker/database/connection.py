import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Generator, Optional, Tuple

from finance_tracker.logging_setup import get_logger

Connection = sqlite3.Connection

SCHEMA_PATH = Path(__file__).parent / "schema.sql"

logger = get_logger("finance_tracker.database.connection")


class DatabaseConfig:
    """Where the transactions database lives."""

    def __init__(self, db_path: Path | str = "data/finance.db"):
        self.db_path = Path(db_path)
        self.db_path.parent.mkdir(parents=True, exist_ok=True)

    @property
    def connection_string(self) -> str:
        return str(self.db_path.absolute())


def configure_connection(conn: Connection) -> None:
    """Name-addressable rows for the repository, and enforced foreign keys."""
    conn.execute("PRAGMA foreign_keys = ON")
    conn.row_factory = sqlite3.Row


class DatabaseManager:
    """
    Owns the single SQLite connection of a finance tracker session.

    The connection opens on first use. Writes go through transaction(), so a
    batch of inserts or deletes lands completely or not at all.
    """

    def __init__(self, config: DatabaseConfig):
        self.config = config
        self._connection: Connection | None = None

    def get_connection(self) -> Connection:
        if self._connection is None:
            logger.debug("Opening database %s", self.config.connection_string)
            self._connection = sqlite3.connect(
                self.config.connection_string,
                check_same_thread=False,
            )
            configure_connection(self._connection)
        return self._connection

    def initialize_schema(self, schema_path: Path = SCHEMA_PATH) -> Optional[Tuple[int, str]]:
        """
        Create the transactions tables if they are missing.

        Safe to run on every start: the script only creates what does not
        exist yet and seeds its version row once.

        Returns:
            The (version, description) now recorded, see schema_version()
        """
        execute_schema(self.get_connection(), schema_path)
        version = self.schema_version()
        logger.debug("Schema ready at version %s", version[0] if version else None)
        return version

    def schema_version(self) -> Optional[Tuple[int, str]]:
        """Latest (version, description) in schema_version, or None"""
        row = self.get_connection().execute(
            "SELECT version, description FROM schema_version ORDER BY version DESC LIMIT 1"
        ).fetchone()
        return (row["version"], row["description"]) if row else None

    def close(self) -> None:
        if self._connection:
            self._connection.close()
            self._connection = None

    @contextmanager
    def transaction(self) -> Generator[Connection, None, None]:
        """
        Commit everything done inside the block, or roll all of it back.

        Usage:
            with db_manager.transaction() as conn:
                conn.executemany("INSERT INTO transactions ...", rows)
        """
        conn = self.get_connection()
        try:
            yield conn
            conn.commit()
        except Exception:
            conn.rollback()
            raise

    def __enter__(self) -> "DatabaseManager":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()


def execute_schema(conn: Connection, schema_path: Path) -> None:
    """Run an SQL script file and commit it."""
    conn.executescript(schema_path.read_text())
    conn.commit()
