"""
SQLite item store.

Folders, notes and AI notes live in one ``items`` table linked by a
nullable ``parent_id`` that references ``items(id) ON DELETE CASCADE``,
so deleting any row removes its whole subtree.

Architecture:
  - One shared aiosqlite connection in autocommit mode; every statement
    is its own transaction.
  - Rich-text ``content`` is stored as JSON text and decoded on read.
  - Every aiosqlite.Error surfaces as PersistenceFailure.

Usage:
    store = SQLiteItemStore("data/notes.db")
    await store.connect()
    item = await store.get_item(item_id)
"""

import json
import logging
import uuid
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional

import aiosqlite

from ainotes.exceptions import PersistenceFailure
from ainotes.models.item import Item, ItemStatus, ItemVariant, ProcessKind

logger = logging.getLogger(__name__)

# ============================================================
# Schema
# ============================================================

_SCHEMA = """
CREATE TABLE IF NOT EXISTS items (
    id TEXT PRIMARY KEY,
    parent_id TEXT REFERENCES items(id) ON DELETE CASCADE,
    variant TEXT NOT NULL CHECK (variant IN ('folder', 'note', 'ai-note')),
    name TEXT CHECK (name IS NULL OR length(name) <= 255),
    content TEXT,
    process_kind TEXT,
    status TEXT CHECK (status IS NULL OR status IN ('draft', 'processing', 'complete', 'failed')),
    error_detail TEXT,
    created_at TEXT NOT NULL,
    updated_at TEXT NOT NULL,
    CHECK (variant != 'folder' OR (
        name IS NOT NULL AND content IS NULL
        AND status IS NULL AND process_kind IS NULL
    )),
    CHECK (parent_id IS NULL OR parent_id != id)
);
CREATE INDEX IF NOT EXISTS idx_items_parent_id ON items(parent_id);
CREATE INDEX IF NOT EXISTS idx_items_created_at ON items(created_at);
CREATE INDEX IF NOT EXISTS idx_items_status ON items(status);
CREATE INDEX IF NOT EXISTS idx_items_variant ON items(variant);
"""

# Columns update_item() may touch; updated_at is always refreshed
_UPDATABLE_COLUMNS = ("parent_id", "name", "content", "process_kind", "status", "error_detail")

# Folders first, then creation order (rowid breaks timestamp ties)
_CHILD_ORDER = "(variant != 'folder'), created_at ASC, rowid ASC"


def _now() -> str:
    """Current UTC time as ISO-8601 text (sorts chronologically)."""
    return datetime.now(timezone.utc).isoformat()


def _enum_value(value: Any) -> Any:
    """Store enums by value."""
    if isinstance(value, (ItemVariant, ItemStatus, ProcessKind)):
        return value.value
    return value


def _row_to_item(row: aiosqlite.Row) -> Item:
    """Convert a database row to an Item."""
    content = row["content"]
    return Item(
        id=row["id"],
        parent_id=row["parent_id"],
        variant=row["variant"],
        name=row["name"],
        content=json.loads(content) if content is not None else None,
        process_kind=row["process_kind"],
        status=row["status"],
        error_detail=row["error_detail"],
        created_at=datetime.fromisoformat(row["created_at"]),
        updated_at=datetime.fromisoformat(row["updated_at"]),
    )


class SQLiteItemStore:
    """Async persistence for the item hierarchy."""

    def __init__(self, db_path: str):
        self._db_path = db_path
        self._conn: Optional[aiosqlite.Connection] = None

    async def connect(self) -> None:
        """Open the SQLite connection and create the schema."""
        if self._db_path != ":memory:":
            Path(self._db_path).parent.mkdir(parents=True, exist_ok=True)
        try:
            self._conn = await aiosqlite.connect(
                self._db_path,
                timeout=30.0,
                isolation_level=None,
            )
            self._conn.row_factory = aiosqlite.Row
            await self._conn.execute("PRAGMA journal_mode=WAL")
            # Cascade delete depends on this, it is off by default per connection
            await self._conn.execute("PRAGMA foreign_keys=ON")
            await self._conn.execute("PRAGMA busy_timeout=5000")
            await self._conn.executescript(_SCHEMA)
        except aiosqlite.Error as e:
            raise PersistenceFailure(f"Could not open item store at {self._db_path}: {e}") from e
        logger.info(f"SQLite item store connected: {self._db_path}")

    async def close(self) -> None:
        """Close the SQLite connection."""
        if self._conn:
            await self._conn.close()
            self._conn = None
            logger.info("SQLite item store closed")

    def _get_conn(self) -> "_ConnContext":
        """Get the connection (context manager compatible)."""
        if self._conn is None:
            raise PersistenceFailure("Item store is not connected")
        return _ConnContext(self._conn)

    async def ping(self) -> bool:
        """Verify the connection is alive."""
        async with self._get_conn() as conn:
            await conn.execute("SELECT 1")
        return True

    # ============================================================
    # Reads
    # ============================================================

    async def get_item(self, item_id: str) -> Optional[Item]:
        """Fetch one item by id, or None."""
        async with self._get_conn() as conn:
            async with conn.execute("SELECT * FROM items WHERE id = ?", (item_id,)) as cursor:
                row = await cursor.fetchone()
        return _row_to_item(row) if row else None

    async def get_parent_id(self, item_id: str) -> Optional[str]:
        """Parent pointer of an item. None for root items and unknown ids."""
        async with self._get_conn() as conn:
            async with conn.execute("SELECT parent_id FROM items WHERE id = ?", (item_id,)) as cursor:
                row = await cursor.fetchone()
        return row["parent_id"] if row else None

    async def list_items(self) -> List[Item]:
        """All items, newest first."""
        return await self._fetch_all(
            "SELECT * FROM items ORDER BY created_at DESC, rowid DESC"
        )

    async def list_roots(self) -> List[Item]:
        """Root-level items, newest first."""
        return await self._fetch_all(
            "SELECT * FROM items WHERE parent_id IS NULL ORDER BY created_at DESC, rowid DESC"
        )

    async def list_children(self, parent_id: str) -> List[Item]:
        """Direct children of an item, folders first then oldest first."""
        return await self._fetch_all(
            f"SELECT * FROM items WHERE parent_id = ? ORDER BY {_CHILD_ORDER}",
            (parent_id,),
        )

    async def get_subtree(self, root_id: str, max_depth: int = 1000) -> List[Item]:
        """Root plus all descendants, ordered by depth.

        Within a depth level, folders come first and then creation order.
        Empty when the root does not exist.
        """
        return await self._fetch_all(
            """
            WITH RECURSIVE tree(id, depth) AS (
                SELECT id, 0 FROM items WHERE id = ?
                UNION ALL
                SELECT i.id, t.depth + 1
                FROM items i
                JOIN tree t ON i.parent_id = t.id
                WHERE t.depth < ?
            )
            SELECT items.* FROM tree
            JOIN items ON items.id = tree.id
            ORDER BY tree.depth ASC, (items.variant != 'folder'),
                     items.created_at ASC, items.rowid ASC
            """,
            (root_id, max_depth),
        )

    async def count_items(self) -> int:
        """Total number of stored items."""
        async with self._get_conn() as conn:
            async with conn.execute("SELECT COUNT(*) FROM items") as cursor:
                row = await cursor.fetchone()
        return row[0]

    async def _fetch_all(self, sql: str, params: tuple = ()) -> List[Item]:
        async with self._get_conn() as conn:
            async with conn.execute(sql, params) as cursor:
                rows = await cursor.fetchall()
        return [_row_to_item(row) for row in rows]

    # ============================================================
    # Writes
    # ============================================================

    async def insert_item(
        self,
        variant: ItemVariant,
        parent_id: Optional[str] = None,
        name: Optional[str] = None,
        content: Optional[Dict[str, Any]] = None,
        process_kind: Optional[ProcessKind] = None,
        status: Optional[ItemStatus] = None,
    ) -> Item:
        """Insert a new item and return it."""
        item_id = str(uuid.uuid4())
        now = _now()
        async with self._get_conn() as conn:
            await conn.execute(
                """
                INSERT INTO items (id, parent_id, variant, name, content,
                                   process_kind, status, error_detail,
                                   created_at, updated_at)
                VALUES (?, ?, ?, ?, ?, ?, ?, NULL, ?, ?)
                """,
                (
                    item_id,
                    parent_id,
                    _enum_value(variant),
                    name,
                    json.dumps(content) if content is not None else None,
                    _enum_value(process_kind),
                    _enum_value(status),
                    now,
                    now,
                ),
            )
        item = await self.get_item(item_id)
        if item is None:
            raise PersistenceFailure(f"Inserted item {item_id} could not be read back")
        return item

    async def update_item(self, item_id: str, **fields: Any) -> Optional[Item]:
        """Update the given columns and refresh updated_at.

        Returns the updated item, or None if it does not exist.
        """
        unknown = set(fields) - set(_UPDATABLE_COLUMNS)
        if unknown:
            raise ValueError(f"Cannot update columns: {sorted(unknown)}")

        assignments = []
        values: List[Any] = []
        for column, value in fields.items():
            if column == "content" and value is not None:
                value = json.dumps(value)
            assignments.append(f"{column} = ?")
            values.append(_enum_value(value))
        assignments.append("updated_at = ?")
        values.append(_now())
        values.append(item_id)

        async with self._get_conn() as conn:
            cursor = await conn.execute(
                f"UPDATE items SET {', '.join(assignments)} WHERE id = ?",
                values,
            )
            changed = cursor.rowcount
            await cursor.close()
        if not changed:
            return None
        return await self.get_item(item_id)

    async def set_status(
        self,
        item_id: str,
        status: ItemStatus,
        error_detail: Optional[str] = None,
    ) -> bool:
        """Set status and error detail. Returns False if the item is gone."""
        async with self._get_conn() as conn:
            cursor = await conn.execute(
                "UPDATE items SET status = ?, error_detail = ?, updated_at = ? WHERE id = ?",
                (status.value, error_detail, _now(), item_id),
            )
            changed = cursor.rowcount
            await cursor.close()
        return changed > 0

    async def begin_processing(
        self,
        item_id: str,
        process_kind: ProcessKind,
        from_status: Optional[ItemStatus] = None,
    ) -> bool:
        """Atomically move a note into ``processing``.

        A single conditional UPDATE, so two concurrent callers can never
        both succeed. Without ``from_status`` any non-processing status is
        accepted; with it, only that status is.

        Returns:
            True if this call performed the transition.
        """
        if from_status is None:
            condition = "COALESCE(status, '') != 'processing'"
            params: tuple = ()
        else:
            condition = "status = ?"
            params = (from_status.value,)

        async with self._get_conn() as conn:
            cursor = await conn.execute(
                f"""
                UPDATE items
                SET status = 'processing', process_kind = ?,
                    error_detail = NULL, updated_at = ?
                WHERE id = ? AND variant != 'folder' AND {condition}
                """,
                (process_kind.value, _now(), item_id) + params,
            )
            changed = cursor.rowcount
            await cursor.close()
        return changed > 0

    async def delete_item(self, item_id: str) -> int:
        """Delete an item and its subtree.

        Returns:
            Number of rows removed (0 if the item did not exist).
        """
        async with self._get_conn() as conn:
            async with conn.execute(
                """
                WITH RECURSIVE tree(id) AS (
                    SELECT id FROM items WHERE id = ?
                    UNION
                    SELECT i.id FROM items i JOIN tree t ON i.parent_id = t.id
                )
                SELECT COUNT(*) FROM tree
                """,
                (item_id,),
            ) as cursor:
                row = await cursor.fetchone()
            removed = row[0]
            # ON DELETE CASCADE removes the descendants
            await conn.execute("DELETE FROM items WHERE id = ?", (item_id,))
        return removed


class _ConnContext:
    """Async context manager wrapper for the shared connection.

    Translates driver errors into PersistenceFailure on the way out.
    """

    def __init__(self, conn: aiosqlite.Connection):
        self._conn = conn

    async def __aenter__(self) -> aiosqlite.Connection:
        return self._conn

    async def __aexit__(self, exc_type, exc, tb):
        # Connection stays open, managed by SQLiteItemStore
        if exc is not None and isinstance(exc, aiosqlite.Error):
            logger.error(f"Item store error: {exc}")
            raise PersistenceFailure(f"Item store error: {exc}") from exc
        return False
