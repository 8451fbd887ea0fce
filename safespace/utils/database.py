"""
Database
Owns the SQLite connection, the schema and transactions.
"""

import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Optional, List, Dict, Any, Iterator
from .config import settings
from .errors import StorageIOError, StorageUnavailable
from .logger import logger

MEMORY = ":memory:"

SCHEMA = (
    """
    CREATE TABLE IF NOT EXISTS moods (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        mood TEXT NOT NULL,
        date TEXT NOT NULL,
        note TEXT,
        intensity REAL DEFAULT 0.5
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS journal (
        id TEXT PRIMARY KEY,
        date TEXT NOT NULL,
        content TEXT NOT NULL,
        mood TEXT
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS preferences (
        key TEXT PRIMARY KEY,
        value TEXT
    )
    """,
)


class Database:
    """SQLite database holding the moods, journal and preferences tables"""

    def __init__(self, db_url: str = None, seed: Optional[Dict[str, str]] = None):
        """
        Args:
            db_url: database URL or path, defaults to the configured URL
            seed: preferences written once, when the schema is first created
        """
        self.db_url = db_url or settings.database_url
        self.db_path = self._parse_db_path()
        self.seed = dict(seed or {})
        self._conn: Optional[sqlite3.Connection] = None
        self._depth = 0

    def _parse_db_path(self) -> str:
        """Strip the sqlite:/// scheme from the URL"""
        if self.db_url.startswith("sqlite:///"):
            return self.db_url.replace("sqlite:///", "")
        return self.db_url

    @property
    def is_open(self) -> bool:
        return self._conn is not None

    def open(self) -> sqlite3.Connection:
        """
        Open the database, creating the file and the schema when missing.

        Calling open() on an already open database returns the live connection.

        Returns:
            the open connection

        Raises:
            StorageUnavailable: the file could not be opened or initialized
        """
        if self._conn is not None:
            return self._conn

        conn = None
        try:
            if self.db_path != MEMORY:
                Path(self.db_path).parent.mkdir(parents=True, exist_ok=True)
            # async callers run queries on a worker thread, one at a time
            conn = sqlite3.connect(self.db_path, check_same_thread=False)
            conn.row_factory = sqlite3.Row
            self._init_db(conn)
        except (OSError, sqlite3.Error) as e:
            if conn is not None:
                conn.close()
            logger.error(f"Failed to open database {self.db_path}: {e}")
            raise StorageUnavailable(f"cannot open database {self.db_path}: {e}") from e

        self._conn = conn
        return conn

    def _init_db(self, conn: sqlite3.Connection):
        """Create the tables; seed preferences only on first creation"""
        cursor = conn.cursor()
        cursor.execute(
            "SELECT name FROM sqlite_master WHERE type = 'table' AND name = 'preferences'"
        )
        first_creation = cursor.fetchone() is None

        for statement in SCHEMA:
            cursor.execute(statement)

        if first_creation:
            cursor.executemany(
                "INSERT OR REPLACE INTO preferences (key, value) VALUES (?, ?)",
                list(self.seed.items()),
            )
            logger.info(f"Database created: {self.db_path}")

        conn.commit()

    def close(self):
        if self._conn is None:
            return
        self._conn.close()
        self._conn = None
        self._depth = 0
        logger.info(f"Database closed: {self.db_path}")

    def get_connection(self) -> sqlite3.Connection:
        """
        Return the live connection.

        Raises:
            StorageUnavailable: the database is not open
        """
        if self._conn is None:
            raise StorageUnavailable(f"database {self.db_path} is not open")
        return self._conn

    @contextmanager
    def transaction(self) -> Iterator[sqlite3.Connection]:
        """
        Group several statements into one commit.

        Statements run inside the block are committed together when the
        outermost block exits and rolled back together if it raises.
        """
        conn = self.get_connection()
        self._depth += 1
        try:
            yield conn
        except BaseException:
            self._depth -= 1
            if self._depth == 0:
                self._rollback(conn)
            raise
        self._depth -= 1
        if self._depth == 0:
            self._commit(conn)

    def _commit(self, conn: sqlite3.Connection):
        try:
            conn.commit()
        except sqlite3.Error as e:
            # a failed commit leaves the transaction open
            self._rollback(conn)
            raise StorageIOError(f"commit failed: {e}") from e

    def _rollback(self, conn: sqlite3.Connection):
        try:
            conn.rollback()
        except sqlite3.Error as e:
            logger.error(f"Rollback failed: {e}")

    def _run(self, query: str, params: tuple, commit: bool = True) -> sqlite3.Cursor:
        conn = self.get_connection()
        try:
            cursor = conn.cursor()
            cursor.execute(query, params)
        except sqlite3.Error as e:
            if self._depth == 0:
                self._rollback(conn)
            raise StorageIOError(f"query failed: {e}") from e
        if commit and self._depth == 0:
            self._commit(conn)
        return cursor

    def execute(self, query: str, params: tuple = ()) -> int:
        """
        Execute a statement.

        Args:
            query: SQL statement
            params: statement parameters

        Returns:
            number of affected rows
        """
        return self._run(query, params).rowcount

    def insert(self, query: str, params: tuple = ()) -> int:
        """
        Execute an INSERT.

        Returns:
            rowid of the inserted row
        """
        return self._run(query, params).lastrowid

    def fetch_one(self, query: str, params: tuple = ()) -> Optional[Dict[str, Any]]:
        """
        Fetch a single row.

        Returns:
            the row as a dict, or None when nothing matches
        """
        row = self._run(query, params, commit=False).fetchone()
        return dict(row) if row else None

    def fetch_all(self, query: str, params: tuple = ()) -> List[Dict[str, Any]]:
        """
        Fetch every matching row.

        Returns:
            list of rows as dicts
        """
        return [dict(row) for row in self._run(query, params, commit=False).fetchall()]
