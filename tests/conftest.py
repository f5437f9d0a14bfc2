"""Pytest fixtures for AI Notes tests."""

import asyncio

import pytest
from fastapi.testclient import TestClient

from ainotes.config import get_settings
from ainotes.item_store import SQLiteItemStore


@pytest.fixture
def temp_db_path(tmp_path):
    """Provide a temporary database path."""
    return str(tmp_path / "test.db")


@pytest.fixture
def with_store(temp_db_path):
    """Run ``scenario(store)`` on a fresh, connected item store.

    Each call gets its own event loop; the store is closed afterwards.
    """
    def runner(scenario):
        async def main():
            store = SQLiteItemStore(temp_db_path)
            await store.connect()
            try:
                return await scenario(store)
            finally:
                await store.close()

        return asyncio.run(main())

    return runner


@pytest.fixture
def client(temp_db_path, monkeypatch):
    """Provide an API client backed by a temporary store and the mock LLM."""
    monkeypatch.setenv("DATABASE_PATH", temp_db_path)
    monkeypatch.setenv("USE_MOCK_LLM", "true")
    monkeypatch.setenv("SEED_WELCOME_NOTE", "false")
    get_settings.cache_clear()

    from ainotes.main import app

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()
    get_settings.cache_clear()


def paragraph_doc(*paragraphs):
    """Build a document with one paragraph per argument."""
    return {
        "type": "doc",
        "content": [
            {"type": "paragraph", "content": [{"type": "text", "text": text}]}
            for text in paragraphs
        ],
    }
