"""Integration fixtures.

Each test gets a fresh in-memory SQLite database with all tables created.
"""

import pytest_asyncio

from src.infrastructure.persistence import Database


@pytest_asyncio.fixture
async def test_database():
    """Fresh database per test, disposed afterwards."""
    database = Database("sqlite+aiosqlite:///:memory:")
    await database.create_all()
    yield database
    await database.close()
