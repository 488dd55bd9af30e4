"""Document store over a two-column (id, document) SQLite table."""

from __future__ import annotations

import asyncio
import json
import logging
from typing import Any, List

from docstore.db.connection import ConnectionPool
from docstore.db.models import Entry
from docstore.errors import InvalidOperand
from docstore.utils.validators import Number, to_number, validate_collection_name

from .op_logging import logged_operation
from .paths import assign_in, get_in, parse_key, remove_in

logger = logging.getLogger(__name__)


def _dumps(value: Any) -> str:
    return json.dumps(value, ensure_ascii=False, allow_nan=False)


class DocumentStore:
    """One named collection of JSON documents addressed by dot-path keys.

    Sub-path writes read the whole document, edit it and write it back, so
    two concurrent writers to the same id can overwrite each other's changes
    (last writer wins at row level).
    """

    def __init__(self, name: str, pool: ConnectionPool) -> None:
        self.name = validate_collection_name(name)
        self.pool = pool
        self._table = f'"{self.name}"'
        self._initialized = False
        self._init_lock = asyncio.Lock()

    def __repr__(self) -> str:
        return f"DocumentStore({self.name!r})"

    async def init(self) -> None:
        """Create the backing table if it does not exist yet."""
        await self.pool.execute(
            f"""
            CREATE TABLE IF NOT EXISTS {self._table} (
                id TEXT NOT NULL PRIMARY KEY,
                document TEXT NOT NULL
            )
            """
        )
        self._initialized = True
        logger.debug("Collection %s ready", self.name)

    async def _ensure_initialized(self) -> None:
        if not self._initialized:
            async with self._init_lock:
                if not self._initialized:
                    await self.init()

    async def _load(self, row_id: str) -> Any:
        """Return the decoded document for *row_id*, or None if there is no row."""
        await self._ensure_initialized()
        rows = await self.pool.execute(
            f"SELECT document FROM {self._table} WHERE id = ?",
            (row_id,),
        )
        if not rows:
            return None
        return json.loads(rows[0]["document"])

    async def _upsert(self, row_id: str, document: Any) -> None:
        payload = _dumps(document)
        await self._ensure_initialized()
        await self.pool.execute(
            f"""
            INSERT INTO {self._table} (id, document) VALUES (?, ?)
            ON CONFLICT(id) DO UPDATE SET document = excluded.document
            """,
            (row_id, payload),
        )

    @logged_operation
    async def get(self, key: str) -> Any:
        """Return the value at *key*, or None when the row or path is missing."""
        parsed = parse_key(key)
        document = await self._load(parsed.id)
        if parsed.path is None:
            return document
        return get_in(document, parsed.segments)

    @logged_operation
    async def set(self, key: str, value: Any) -> Any:
        """Store *value* at *key*.

        A bare id replaces the whole document and returns *value*. A sub-path
        is merged into the existing document (missing or non-object
        intermediates become ``{}``) and the full updated document is returned.
        """
        parsed = parse_key(key)
        if parsed.path is None:
            await self._upsert(parsed.id, value)
            return value

        current = await self._load(parsed.id)
        document = assign_in(current, parsed.segments, value)
        await self._upsert(parsed.id, document)
        return document

    @logged_operation
    async def delete(self, key: str) -> bool:
        """Delete the row for a bare id, or one property for a sub-path.

        Deleting a row always returns True. Deleting a sub-path returns False
        when anything along it is missing; nothing is created in that case.
        """
        parsed = parse_key(key)
        await self._ensure_initialized()
        if parsed.path is None:
            await self.pool.execute(f"DELETE FROM {self._table} WHERE id = ?", (parsed.id,))
            return True

        document = await self._load(parsed.id)
        if not remove_in(document, parsed.segments):
            return False

        await self.pool.execute(
            f"UPDATE {self._table} SET document = ? WHERE id = ?",
            (_dumps(document), parsed.id),
        )
        return True

    @logged_operation
    async def all(self) -> List[Entry]:
        """Return every row of the collection with its decoded document."""
        await self._ensure_initialized()
        rows = await self.pool.execute(f"SELECT id, document FROM {self._table} ORDER BY id")
        return [Entry(id=row["id"], data=json.loads(row["document"])) for row in rows]

    @logged_operation
    async def push(self, key: str, value: Any) -> List[Any]:
        """Append *value* to the list at *key*.

        A missing or non-list value at *key* is replaced by a new list.
        """
        current = await self.get(key)
        items = current if isinstance(current, list) else []
        items.append(value)
        await self.set(key, items)
        return items

    @logged_operation
    async def add(self, key: str, value: Any) -> Number:
        """Add *value* to the number at *key* and return the result."""
        return await self._apply_delta(key, value, "add")

    @logged_operation
    async def subtract(self, key: str, value: Any) -> Number:
        """Subtract *value* from the number at *key* and return the result."""
        return await self._apply_delta(key, value, "subtract")

    async def _apply_delta(self, key: str, value: Any, operation: str) -> Number:
        operand = to_number(value)
        if operand is None:
            raise InvalidOperand(value, operation)

        current = to_number(await self.get(key))
        if current is None:
            current = 0

        new_value = current + operand if operation == "add" else current - operand
        await self.set(key, new_value)
        return new_value

    @logged_operation
    async def has(self, key: str) -> bool:
        """Return True if *key* resolves to a value other than null."""
        return (await self.get(key)) is not None
