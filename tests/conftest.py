"""Shared pytest fixtures and configuration."""

import os
import tempfile
import uuid

import pytest
from starlette.testclient import TestClient

from nodehub.database import NodeDatabase
from nodehub.server import create_app

API_KEY = "test-key-123"


@pytest.fixture
def temp_db():
    """Create a temporary database for testing."""
    with tempfile.NamedTemporaryFile(suffix=".db", delete=False) as f:
        db_path = f.name

    database = NodeDatabase(db_path)
    yield database

    # Dispose engine to release file locks (Windows)
    database.engine.dispose()

    try:
        os.unlink(db_path)
    except PermissionError:
        pass


@pytest.fixture
def unique_id():
    """Generate a unique test ID."""
    return f"test-{uuid.uuid4().hex[:12]}"


@pytest.fixture
def client(temp_db):
    """Test client for an app backed by the temporary database."""
    app = create_app(database=temp_db, api_keys=[API_KEY])
    with TestClient(app, headers={"X-API-Key": API_KEY}) as test_client:
        yield test_client
