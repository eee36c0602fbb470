"""Shared pytest fixtures."""
import os
import tempfile
from pathlib import Path

# Point the preference store at a throwaway SQLite file before database.config is imported
os.environ["DATABASE_URL"] = f"sqlite:///{Path(tempfile.mkdtemp()) / 'shiftrota-test.db'}"

import pytest
from fastapi.testclient import TestClient

from app.services.rosters import get_registry


@pytest.fixture(scope="session")
def registry():
    return get_registry()


@pytest.fixture
def client():
    from app.main import app

    with TestClient(app) as c:
        yield c
