"""
Pytest configuration and shared fixtures.
"""

import pytest
from fastapi.testclient import TestClient

from api.main import app, get_store
from api.store import BookStore


@pytest.fixture
def store():
    """Create a fresh store holding the seed books."""
    return BookStore.with_seed_data()


@pytest.fixture
def empty_store():
    """Create a store with no books."""
    return BookStore()


@pytest.fixture
def client(store):
    """Create test client bound to the fresh store."""
    app.dependency_overrides[get_store] = lambda: store
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def new_book_payload():
    """Sample payload for creating a book."""
    return {"title": "Brave New World", "author": "Aldous Huxley"}
