"""
Local SQLite access for data that never reaches the remote store.

The cellar lives in Supabase. The only local file is the legacy
key/value store written by the old client, kept so its cached API key
can be migrated once.
"""

import logging
import sqlite3
import threading
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Iterator, Optional

logger = logging.getLogger(__name__)


class BaseRepository:
    """
    Thread-safe SQLite base.

    Subclasses set SCHEMA (idempotent DDL); it runs on first use of the
    file. Each thread gets its own connection.
    """

    SCHEMA: str = ""

    def __init__(self, db_path: Optional[str] = None):
        """
        Args:
            db_path: SQLite file. Defaults to Config.legacy_store_path()
        """
        if db_path is None:
            from app.config import Config
            db_path = Config.legacy_store_path()

        self.db_path = str(db_path)
        self._local = threading.local()
        Path(self.db_path).parent.mkdir(parents=True, exist_ok=True)
        if self.SCHEMA:
            self._get_connection().executescript(self.SCHEMA)
            logger.debug(f"Local store ready at {self.db_path}")

    def _get_connection(self) -> sqlite3.Connection:
        conn = getattr(self._local, "connection", None)
        if conn is None:
            conn = sqlite3.connect(self.db_path, check_same_thread=False)
            conn.row_factory = sqlite3.Row
            self._local.connection = conn
        return conn

    @contextmanager
    def _transaction(self) -> Iterator[sqlite3.Cursor]:
        """Commit on success, roll back and re-raise on error."""
        conn = self._get_connection()
        cursor = conn.cursor()
        try:
            yield cursor
            conn.commit()
        except Exception:
            conn.rollback()
            raise

    def _fetch_value(self, sql: str, params: tuple = ()) -> Optional[Any]:
        """First column of the first row, or None."""
        row = self._get_connection().execute(sql, params).fetchone()
        return row[0] if row else None

    def close(self) -> None:
        conn = getattr(self._local, "connection", None)
        if conn is not None:
            conn.close()
            self._local.connection = None
