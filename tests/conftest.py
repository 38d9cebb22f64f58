"""
Pytest configuration and shared fixtures.
"""

import pytest
import sys
import os

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from fastapi.testclient import TestClient

from app.main import app
from app.calculator.session import CalculatorSession
from app.services.sessions import SessionStore, get_session_store


def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line("markers", "integration: marks integration tests")


@pytest.fixture
def session_store():
    """Fresh session store for each test, wired into the API."""
    store = SessionStore(max_sessions=10)
    app.dependency_overrides[get_session_store] = lambda: store
    yield store
    app.dependency_overrides.pop(get_session_store, None)


@pytest.fixture
def client(session_store):
    """Create test client."""
    return TestClient(app)


@pytest.fixture
def calculator():
    """Fresh calculator session."""
    return CalculatorSession()
