# manages the key-value store file, provides helper methods internal to db package
import asyncio
import json
import os.path
from contextlib import asynccontextmanager
from typing import Any, Optional

import aiosqlite

from utils.errors import StorageFailure
from utils.logger import get_logger

_logger = get_logger(__name__)

DB_PATH = os.getenv("EMS_DB_PATH", "data/ems.sqlite")
SEED_PATH = os.path.join(os.path.dirname(__file__), "seed-data.json")
SEEDED_KEYS = ("users", "products", "orders")

_initialized = False
_init_lock = asyncio.Lock()


async def _init_db(conn: aiosqlite.Connection) -> None:
    await conn.execute(
        """
        CREATE TABLE IF NOT EXISTS kv (
            key   TEXT PRIMARY KEY,
            value TEXT NOT NULL
        );
        """
    )
    with open(SEED_PATH, "r") as f:
        seed = json.load(f)
    for key in SEEDED_KEYS:
        if await read_value(conn, key) is None:
            _logger.info(f"Seeding '{key}' with {len(seed[key])} records...")
            await write_value(conn, key, seed[key])
    await conn.commit()


@asynccontextmanager
async def connect() -> aiosqlite.Connection:
    """Async context manager yielding an aiosqlite connection to the kv store.

    Creates and seeds the store on first use. Any sqlite error raised while
    the connection is open comes out as StorageFailure.
    """
    global _initialized
    try:
        parent = os.path.dirname(DB_PATH)
        if parent:
            os.makedirs(parent, exist_ok=True)
        conn = await aiosqlite.connect(DB_PATH)
    except (OSError, aiosqlite.Error) as exc:
        raise StorageFailure(f"Cannot open store at {DB_PATH}: {exc}") from exc

    try:
        if not _initialized:
            async with _init_lock:
                if not _initialized:
                    await _init_db(conn)
                    _initialized = True
        yield conn
    except aiosqlite.Error as exc:
        raise StorageFailure(str(exc)) from exc
    finally:
        await conn.close()


@asynccontextmanager
async def transaction(conn: Optional[aiosqlite.Connection] = None):
    """Yield `conn` as is, or open a connection and commit it on clean exit.

    Lets a caller group several store calls into one commit by passing its
    own connection down.
    """
    if conn is not None:
        yield conn
        return
    async with connect() as own:
        yield own
        await own.commit()


async def read_value(conn: aiosqlite.Connection, key: str) -> Optional[Any]:
    """Decoded JSON document stored under `key`, or None when absent."""
    cur = await conn.execute("SELECT value FROM kv WHERE key = ?;", (key,))
    row = await cur.fetchone()
    await cur.close()
    if row is None:
        return None
    try:
        return json.loads(row[0])
    except json.JSONDecodeError as exc:
        raise StorageFailure(f"Corrupt document under '{key}'") from exc


async def write_value(conn: aiosqlite.Connection, key: str, value: Any) -> None:
    await conn.execute(
        """
        INSERT INTO kv(key, value) VALUES (?, ?)
        ON CONFLICT(key) DO UPDATE SET value = excluded.value;
        """,
        (key, json.dumps(value)),
    )


async def delete_value(conn: aiosqlite.Connection, key: str) -> None:
    await conn.execute("DELETE FROM kv WHERE key = ?;", (key,))
