"""
Database handle: named collections, SQLite persistence and background autosave.
"""

import asyncio
import json
import sqlite3
from contextlib import contextmanager
from typing import Dict, Generator, Optional

from .config import ensure_db_directory, get_environment
from .store import Collection, ID_KEY
from ..util.logging import logger


@contextmanager
def get_db(path: str) -> Generator[sqlite3.Connection, None, None]:
    """Get a SQLite database connection."""
    conn = sqlite3.connect(path)
    try:
        yield conn
    finally:
        conn.close()


def _create_tables(cursor: sqlite3.Cursor):
    cursor.execute('''
        CREATE TABLE IF NOT EXISTS collections (
            name TEXT PRIMARY KEY,
            max_id INTEGER NOT NULL DEFAULT 0
        )
    ''')
    cursor.execute('''
        CREATE TABLE IF NOT EXISTS documents (
            collection TEXT NOT NULL,
            id INTEGER NOT NULL,
            data TEXT NOT NULL,
            PRIMARY KEY (collection, id)
        )
    ''')


class Database:
    """Holds every collection in memory and persists them to one SQLite file.

    Writes are visible to in-process reads immediately. They reach the disk on
    the next autosave tick, an explicit ``save()`` or ``close()``.
    """

    def __init__(self, path: str, autosave: bool = True, autosave_interval_ms: int = 100):
        self.path = path
        self.autosave = autosave
        self.autosave_interval_ms = autosave_interval_ms
        self.collections: Dict[str, Collection] = {}
        self._autosave_task: Optional[asyncio.Task] = None

    def get_collection(self, name: str) -> Optional[Collection]:
        return self.collections.get(name)

    def add_collection(self, name: str) -> Collection:
        collection = Collection(name)
        collection.dirty = True
        self.collections[name] = collection
        return collection

    def collection(self, name: str) -> Collection:
        """Get a collection by name, creating it on first access."""
        collection = self.get_collection(name)
        if collection is None:
            collection = self.add_collection(name)
        return collection

    @property
    def dirty(self) -> bool:
        return any(c.dirty for c in self.collections.values())

    def load(self) -> "Database":
        """Read all collections from disk, creating the tables when missing."""
        ensure_db_directory(self.path)
        with get_db(self.path) as conn:
            cursor = conn.cursor()
            _create_tables(cursor)
            conn.commit()

            cursor.execute("SELECT name, max_id FROM collections")
            collection_rows = cursor.fetchall()

            collections = {}
            for name, max_id in collection_rows:
                cursor.execute(
                    "SELECT data FROM documents WHERE collection = ? ORDER BY id",
                    (name,)
                )
                records = [json.loads(row[0]) for row in cursor.fetchall()]
                collections[name] = Collection(name, records, max_id)

        self.collections = collections
        logger.log_store_operation("load", "success", {
            "path": self.path,
            "collections": {name: len(c) for name, c in collections.items()}
        })
        return self

    def save(self) -> bool:
        """Write dirty collections to disk in one transaction.

        Returns False when there was nothing to write.
        """
        dirty = [c for c in self.collections.values() if c.dirty]
        if not dirty:
            return False

        ensure_db_directory(self.path)
        with get_db(self.path) as conn:
            cursor = conn.cursor()
            _create_tables(cursor)
            try:
                for collection in dirty:
                    cursor.execute(
                        "INSERT OR REPLACE INTO collections (name, max_id) VALUES (?, ?)",
                        (collection.name, collection.max_id)
                    )
                    cursor.execute("DELETE FROM documents WHERE collection = ?", (collection.name,))
                    cursor.executemany(
                        "INSERT INTO documents (collection, id, data) VALUES (?, ?, ?)",
                        [(collection.name, record[ID_KEY], json.dumps(record)) for record in collection.records()]
                    )
                conn.commit()
            except sqlite3.Error:
                conn.rollback()
                raise

        for collection in dirty:
            collection.dirty = False

        logger.log_store_operation("save", "success", {
            "path": self.path,
            "collections": [c.name for c in dirty]
        })
        return True

    def start_autosave(self):
        """Persist dirty collections on a fixed interval in the background."""
        if not self.autosave or self._autosave_task is not None:
            return
        self._autosave_task = asyncio.get_running_loop().create_task(self._autosave_loop())

    async def _autosave_loop(self):
        interval = self.autosave_interval_ms / 1000
        while True:
            await asyncio.sleep(interval)
            try:
                self.save()
            except (sqlite3.Error, OSError, TypeError, ValueError) as e:
                # Keep the loop alive, the next tick retries
                logger.log_store_operation("autosave", "failed", {"path": self.path, "error": str(e)})

    async def close(self):
        """Stop autosaving and flush pending changes."""
        if self._autosave_task is not None:
            self._autosave_task.cancel()
            try:
                await self._autosave_task
            except asyncio.CancelledError:
                pass
            self._autosave_task = None

        self.save()


async def connect(env: str = None) -> Database:
    """Open the database of the given (or active) environment and start autosaving."""
    settings = get_environment(env)
    db = Database(settings["db"], autosave=True, autosave_interval_ms=settings["autosave_interval_ms"])
    db.load()
    db.start_autosave()
    return db


async def init_db(env: str = None) -> Database:
    """Connect and bind the database to the model layer."""
    from .model import Model

    db = await connect(env)
    Model.bind(db)
    return db


async def close_db(db: Database):
    """Flush and close the database and unbind it from the model layer."""
    from .model import Model

    await db.close()
    Model.unbind()


def health_check(db: Optional[Database]) -> bool:
    """Check that the database file is reachable and holds the expected tables."""
    if db is None:
        return False
    try:
        with get_db(db.path) as conn:
            cursor = conn.cursor()
            cursor.execute("SELECT name FROM sqlite_master WHERE type='table';")
            table_names = [table[0] for table in cursor.fetchall()]
            return all(table in table_names for table in ("collections", "documents"))
    except sqlite3.Error:
        return False
