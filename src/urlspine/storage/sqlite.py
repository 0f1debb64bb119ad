"""SQLite history store - the durable, append-only sighting log.

The schema is a single table, compatible with ``history.db`` files written
by earlier versions of the bot:

    seen(id, url, nick, src, dst, timestamp) + index url_idx ON (url, dst)

Example:
    >>> from urlspine.storage.sqlite import SQLiteHistoryStore
    >>>
    >>> # Just pass a path - schema auto-creates!
    >>> store = SQLiteHistoryStore("history.db")
    >>> await store.initialize()
    >>>
    >>> # Or use in-memory for testing
    >>> store = SQLiteHistoryStore(":memory:")
"""

from __future__ import annotations

import asyncio
import logging
import re
import sqlite3
from collections.abc import Iterator
from contextlib import contextmanager
from datetime import UTC, datetime
from pathlib import Path

from urlspine.core.exceptions import StorageError
from urlspine.models.sighting import PriorSighting, SightingEvent

logger = logging.getLogger(__name__)

# Nanosecond fractions and a trailing zone name, as written by older clients:
# "2013-05-01 17:04:05.123456789 -0700 PDT" or "...05.123456789-07:00".
_LEGACY_TIMESTAMP = re.compile(
    r"^(?P<base>\d{4}-\d{2}-\d{2}[ T]\d{2}:\d{2}:\d{2})"
    r"(?:\.(?P<frac>\d+))?"
    r"\s*(?P<offset>Z|[+-]\d{2}:?\d{2})?"
    r"(?:\s+[A-Za-z]+)?$"
)

_COLUMNS = "id, url, nick, src, dst, timestamp"


class SQLiteHistoryStore:
    """SQLite history store with auto-schema creation.

    One connection per store, opened by :meth:`initialize` and closed by
    :meth:`close`. Transactions are explicit (``BEGIN IMMEDIATE``) so the
    lookup-then-append sequence of :meth:`observe` holds the write lock for
    its whole duration, across processes as well as coroutines.

    Args:
        path: Database file path, or ":memory:" for in-memory.
        timeout: Busy timeout in seconds (default 30).

    Example:
        >>> store = SQLiteHistoryStore("history.db")
        >>> await store.initialize()
        >>> prior = await store.observe(event)
        >>> prior.seen_before
        False
    """

    SCHEMA = (
        "CREATE TABLE IF NOT EXISTS seen ("
        "id integer not null primary key, "
        "url text not null, "
        "nick text, "
        "src text not null, "
        "dst text not null, "
        "timestamp datetime not null)",
        "CREATE INDEX IF NOT EXISTS url_idx ON seen (url, dst)",
    )

    def __init__(
        self,
        path: str | Path = ":memory:",
        *,
        timeout: float = 30.0,
    ) -> None:
        self._path = str(path)
        self._timeout = timeout
        self._conn: sqlite3.Connection | None = None
        self._lock = asyncio.Lock()

    @property
    def path(self) -> str:
        return self._path

    @contextmanager
    def _transaction(self, *, immediate: bool = True) -> Iterator[sqlite3.Cursor]:
        """Run a block inside BEGIN/COMMIT, rolling back on any error."""
        if self._conn is None:
            raise StorageError("History store not initialized. Call initialize() first.")
        cursor = self._conn.cursor()
        try:
            cursor.execute("BEGIN IMMEDIATE" if immediate else "BEGIN")
            yield cursor
            cursor.execute("COMMIT")
        except BaseException as e:
            if self._conn.in_transaction:
                self._conn.rollback()
            if isinstance(e, sqlite3.Error):
                raise StorageError(str(e)) from e
            raise
        finally:
            cursor.close()

    async def initialize(self) -> None:
        """Open the database and auto-create the schema.

        Safe to call multiple times (idempotent).

        Raises:
            StorageError: If the file cannot be opened or migrated.
        """
        if self._conn is not None:
            return
        try:
            if self._path != ":memory:":
                Path(self._path).parent.mkdir(parents=True, exist_ok=True)
            conn = sqlite3.connect(self._path, timeout=self._timeout, isolation_level=None)
        except (OSError, sqlite3.Error) as e:
            raise StorageError(f"cannot open history store {self._path}: {e}") from e

        conn.row_factory = sqlite3.Row
        self._conn = conn
        try:
            conn.execute("PRAGMA journal_mode=WAL")
            with self._transaction() as cursor:
                for statement in self.SCHEMA:
                    cursor.execute(statement)
        except (StorageError, sqlite3.Error) as e:
            conn.close()
            self._conn = None
            raise StorageError(f"cannot migrate history store {self._path}: {e}") from e
        logger.info("History store ready at %s", self._path)

    async def close(self) -> None:
        """Close database connection."""
        if self._conn is not None:
            self._conn.close()
            self._conn = None

    # --- Sighting Operations ---

    async def most_recent_and_count(self, url: str, dst: str) -> PriorSighting:
        async with self._lock:
            with self._transaction(immediate=False) as cursor:
                return self._lookup(cursor, url, dst)

    async def append(self, event: SightingEvent) -> int:
        async with self._lock:
            with self._transaction() as cursor:
                return self._insert(cursor, event)

    async def observe(self, event: SightingEvent) -> PriorSighting:
        """Look up the prior state of ``(url, dst)``, then append ``event``.

        A failed lookup is logged and rolled back to its savepoint; the
        append still runs and the result reports no prior sighting. A failed
        append rolls back the whole transaction.

        Raises:
            StorageError: If the sighting could not be appended.
        """
        async with self._lock:
            with self._transaction() as cursor:
                prior = self._lookup_or_none(cursor, event.url, event.dst)
                self._insert(cursor, event)
        return prior

    async def recent_distinct(self, limit: int) -> list[SightingEvent]:
        if limit <= 0:
            return []
        async with self._lock:
            with self._transaction(immediate=False) as cursor:
                cursor.execute(
                    f"SELECT {_COLUMNS} FROM seen "
                    "WHERE id IN (SELECT MAX(id) FROM seen GROUP BY url) "
                    "ORDER BY id DESC LIMIT ?",
                    (limit,),
                )
                return [self._row_to_event(row) for row in cursor.fetchall()]

    async def count(self, url: str | None = None, dst: str | None = None) -> int:
        sql = "SELECT COUNT(*) FROM seen WHERE 1=1"
        params: list[str] = []
        if url is not None:
            sql += " AND url = ?"
            params.append(url)
        if dst is not None:
            sql += " AND dst = ?"
            params.append(dst)
        async with self._lock:
            with self._transaction(immediate=False) as cursor:
                cursor.execute(sql, params)
                return cursor.fetchone()[0]

    # --- Helper Methods ---

    def _lookup_or_none(self, cursor: sqlite3.Cursor, url: str, dst: str) -> PriorSighting:
        cursor.execute("SAVEPOINT lookup")
        try:
            return self._lookup(cursor, url, dst)
        except (sqlite3.Error, StorageError, ValueError) as e:
            logger.warning("Lookup of %s in %s failed, treating as unseen: %s", url, dst, e)
            cursor.execute("ROLLBACK TO lookup")
            return PriorSighting.none()
        finally:
            cursor.execute("RELEASE lookup")

    def _lookup(self, cursor: sqlite3.Cursor, url: str, dst: str) -> PriorSighting:
        cursor.execute(
            f"SELECT {_COLUMNS} FROM seen WHERE url = ? AND dst = ? ORDER BY id DESC LIMIT 1",
            (url, dst),
        )
        row = cursor.fetchone()
        if row is None:
            return PriorSighting.none()
        cursor.execute("SELECT COUNT(*) FROM seen WHERE url = ? AND dst = ?", (url, dst))
        return PriorSighting(event=self._row_to_event(row), count=cursor.fetchone()[0])

    def _insert(self, cursor: sqlite3.Cursor, event: SightingEvent) -> int:
        cursor.execute(
            "INSERT INTO seen (url, nick, src, dst, timestamp) VALUES (?, ?, ?, ?, ?)",
            (
                event.url,
                event.nick,
                event.src,
                event.dst,
                event.timestamp.astimezone(UTC).isoformat(),
            ),
        )
        return cursor.lastrowid

    def _row_to_event(self, row: sqlite3.Row) -> SightingEvent:
        """Convert a database row to SightingEvent.

        Raises:
            StorageError: If the row cannot be decoded.
        """
        try:
            return SightingEvent(
                id=row["id"],
                url=row["url"],
                nick=row["nick"],
                src=row["src"],
                dst=row["dst"],
                timestamp=parse_timestamp(row["timestamp"]),
            )
        except ValueError as e:
            raise StorageError(f"unreadable row {row['id']}: {e}") from e


def parse_timestamp(value: str | datetime) -> datetime:
    """Parse a stored timestamp into an aware datetime.

    Example:
        >>> from urlspine.storage.sqlite import parse_timestamp
        >>> parse_timestamp("2024-03-01T10:00:00+00:00").isoformat()
        '2024-03-01T10:00:00+00:00'
        >>> parse_timestamp("2013-05-01 17:04:05.123456789-07:00").isoformat()
        '2013-05-01T17:04:05.123456-07:00'
        >>> parse_timestamp("2013-05-01 17:04:05 -0700 PDT").utcoffset().total_seconds()
        -25200.0
    """
    if isinstance(value, datetime):
        parsed = value
    else:
        match = _LEGACY_TIMESTAMP.match(value.strip())
        if match is None:
            raise StorageError(f"unrecognized timestamp: {value!r}")
        text = match["base"].replace(" ", "T")
        if match["frac"]:
            text += "." + match["frac"][:6].ljust(6, "0")
        offset = match["offset"]
        if offset:
            if offset != "Z" and ":" not in offset:
                offset = f"{offset[:3]}:{offset[3:]}"
            text += "+00:00" if offset == "Z" else offset
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError as e:
            raise StorageError(f"invalid timestamp: {value!r}") from e
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed
