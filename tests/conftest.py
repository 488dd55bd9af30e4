"""
This file contains shared fixtures for the test suite.
"""

import os

import pytest
import pytest_asyncio

# Set env vars before any application modules are imported
os.environ.setdefault("TEST_MODE", "1")
os.environ.setdefault("DATABASE_PATH", ":memory:")
os.environ.setdefault("PYTHONIOENCODING", "utf-8")

from docstore.config import get_settings  # noqa: E402
from docstore.core.store import DocumentStore  # noqa: E402
from docstore.db.connection import ConnectionPool  # noqa: E402


@pytest.fixture(autouse=True)
def clear_settings_cache():
    """Make every test read settings from its own environment."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def db_path(tmp_path):
    """Path of a throwaway SQLite database file."""
    return str(tmp_path / "docstore_test.db")


@pytest_asyncio.fixture
async def pool(db_path):
    """File-backed pool with a small connection limit."""
    pool = ConnectionPool(db_path, size=3, timeout=2.0)
    yield pool
    await pool.close()


@pytest_asyncio.fixture
async def memory_pool():
    """Pool sharing a single in-memory connection."""
    pool = ConnectionPool(":memory:")
    yield pool
    await pool.close()


@pytest_asyncio.fixture
async def store(pool):
    """A freshly initialized collection."""
    store = DocumentStore("userData", pool)
    await store.init()
    return store
