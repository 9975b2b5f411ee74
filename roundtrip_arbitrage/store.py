"""
Append-only SQLite store for detected opportunities.
"""

import asyncio
from typing import Any, Dict, List, Optional

import aiosqlite

from .exceptions import PersistenceFailure
from .types import OpportunityRecord
from .utils import get_logger

logger = get_logger(__name__)

_COLUMNS = (
    "ts_utc",
    "dex_buy",
    "dex_sell",
    "token_in",
    "token_out",
    "amount_in",
    "amount_out",
    "price_buy",
    "price_sell",
    "gross_profit",
    "net_profit",
)


class OpportunityStore:
    """
    Opportunity persistence backed by one aiosqlite connection.

    Each append is its own INSERT + COMMIT. Concurrent appends from the two
    directions of a tick are serialized by an internal lock, so callers need
    no coordination of their own.
    """

    def __init__(self, db_path: str):
        self.db_path = db_path
        self._conn: Optional[aiosqlite.Connection] = None
        self._lock = asyncio.Lock()

    async def initialize(self) -> None:
        """
        Open the database and create the opportunities table.

        Raises:
            PersistenceFailure: If the database cannot be opened or migrated
        """
        if self._conn is not None:
            return

        conn = None
        try:
            conn = await aiosqlite.connect(self.db_path)
            await conn.execute("PRAGMA journal_mode=WAL")
            await conn.execute("PRAGMA synchronous=NORMAL")
            await conn.execute(
                """
                CREATE TABLE IF NOT EXISTS opportunities (
                    id            INTEGER PRIMARY KEY AUTOINCREMENT,
                    ts_utc        TEXT NOT NULL,
                    dex_buy       TEXT NOT NULL,
                    dex_sell      TEXT NOT NULL,
                    token_in      TEXT NOT NULL,
                    token_out     TEXT NOT NULL,
                    amount_in     TEXT NOT NULL,
                    amount_out    TEXT NOT NULL,
                    price_buy     REAL NOT NULL,
                    price_sell    REAL NOT NULL,
                    gross_profit  REAL NOT NULL,
                    net_profit    REAL NOT NULL
                )
            """
            )
            await conn.commit()
        except (aiosqlite.Error, OSError) as e:
            if conn is not None:
                await conn.close()
            raise PersistenceFailure(
                f"Failed to open opportunity store: {e}", db_path=self.db_path
            ) from e

        self._conn = conn
        logger.info(f"DB ready at {self.db_path}")

    async def append(self, record: OpportunityRecord) -> None:
        """
        Insert one opportunity row.

        Raises:
            PersistenceFailure: If the store is closed or the insert fails
        """
        if self._conn is None:
            raise PersistenceFailure("Opportunity store is not open", db_path=self.db_path)

        placeholders = ", ".join("?" for _ in _COLUMNS)
        sql = (
            f"INSERT INTO opportunities ({', '.join(_COLUMNS)}) "
            f"VALUES ({placeholders})"
        )

        async with self._lock:
            try:
                await self._conn.execute(sql, record.as_row())
                await self._conn.commit()
            except (aiosqlite.Error, ValueError) as e:
                raise PersistenceFailure(
                    f"Failed to insert opportunity: {e}",
                    db_path=self.db_path,
                    details={"direction": f"{record.dex_buy} -> {record.dex_sell}"},
                ) from e

    async def count(self) -> int:
        """Number of stored opportunities."""
        if self._conn is None:
            raise PersistenceFailure("Opportunity store is not open", db_path=self.db_path)
        async with self._conn.execute("SELECT COUNT(*) FROM opportunities") as cursor:
            row = await cursor.fetchone()
        return int(row[0])

    async def fetch_recent(self, limit: int = 20) -> List[Dict[str, Any]]:
        """Most recent opportunities first, as plain dicts."""
        if self._conn is None:
            raise PersistenceFailure("Opportunity store is not open", db_path=self.db_path)
        sql = (
            f"SELECT {', '.join(_COLUMNS)} FROM opportunities "
            "ORDER BY id DESC LIMIT ?"
        )
        async with self._conn.execute(sql, (limit,)) as cursor:
            rows = await cursor.fetchall()
        return [dict(zip(_COLUMNS, row)) for row in rows]

    async def close(self) -> None:
        if self._conn is not None:
            await self._conn.close()
            self._conn = None

    async def __aenter__(self) -> "OpportunityStore":
        await self.initialize()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()
