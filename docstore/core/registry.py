"""Construction and ownership of the named stores sharing one pool."""

from __future__ import annotations

import logging
from typing import Dict, Iterable, Iterator, Optional

from docstore.config import AppSettings, get_settings
from docstore.db.connection import ConnectionPool

from .store import DocumentStore

logger = logging.getLogger(__name__)


class Registry:
    """Holds exactly one :class:`DocumentStore` per collection name.

    Build it once at process start and pass it (or the stores it hands out)
    to whatever needs storage.
    """

    def __init__(self, pool: ConnectionPool, names: Iterable[str] = ()) -> None:
        self.pool = pool
        self._stores: Dict[str, DocumentStore] = {}
        for name in names:
            self.get(name)

    @classmethod
    def from_settings(cls, settings: Optional[AppSettings] = None) -> Registry:
        settings = settings or get_settings()
        return cls(ConnectionPool.from_settings(settings.db), settings.collections)

    def get(self, name: str) -> DocumentStore:
        """Return the store for *name*, creating it on first request."""
        store = self._stores.get(name)
        if store is None:
            store = DocumentStore(name, self.pool)
            self._stores[name] = store
            logger.debug("Registered collection %s", name)
        return store

    __getitem__ = get

    def __contains__(self, name: object) -> bool:
        return name in self._stores

    def __iter__(self) -> Iterator[str]:
        return iter(self._stores)

    def __len__(self) -> int:
        return len(self._stores)

    async def init_all(self) -> None:
        """Create the backing tables of every registered collection."""
        for store in self._stores.values():
            await store.init()
        logger.info("Initialized %d collections", len(self._stores))

    async def close(self) -> None:
        await self.pool.close()

    async def __aenter__(self) -> Registry:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()
