"""
Shared fixtures for the Farm Ledger API tests

No database is needed: repositories are swapped out through
``app.dependency_overrides`` or built on top of a fake AsyncSession.
"""

import os

# Settings refuse to load without a signing secret
os.environ.setdefault("JWT_SECRET", "test-secret-not-for-production")

from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi.testclient import TestClient

from farmledger.api.core.security import create_access_token
from farmledger.api.main import app


class FakeResult:
    """Stands in for a SQLAlchemy Result; supports .mappings().all()/.first()"""

    def __init__(self, rows):
        self.rows = list(rows)

    def mappings(self):
        return self

    def all(self):
        return list(self.rows)

    def first(self):
        return self.rows[0] if self.rows else None

    def scalars(self):
        return self

    def scalar_one_or_none(self):
        return self.rows[0] if self.rows else None


def make_session(*results):
    """
    AsyncSession double whose execute() returns the given row lists in order
    """
    session = MagicMock()
    session.execute = AsyncMock(side_effect=[FakeResult(rows) for rows in results])
    session.get = AsyncMock(return_value=None)
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.flush = AsyncMock()
    session.refresh = AsyncMock()
    session.delete = AsyncMock()
    session.add = MagicMock()
    return session


@pytest.fixture
def fake_session():
    """Factory fixture: fake_session([rows], [rows], ...)"""
    return make_session


@pytest.fixture
def client():
    """Test client; dependency overrides are cleared after each test"""
    test_client = TestClient(app, raise_server_exceptions=False)
    yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def override():
    """Register a dependency override: override(get_x_repository, fake)"""
    def _override(dependency, fake):
        app.dependency_overrides[dependency] = lambda: fake
        return fake
    return _override


@pytest.fixture
def auth_headers():
    """Create valid JWT token for testing"""
    token = create_access_token(data={"sub": "1"})
    return {"Authorization": f"Bearer {token}"}


def row(**fields):
    """ORM-like object for from_attributes validation"""
    return SimpleNamespace(**fields)


@pytest.fixture
def make_row():
    return row


def make_routed_session(routes):
    """
    AsyncSession double answering each execute() by matching a SQL fragment

    ``routes`` maps a substring of the statement to the rows it returns.
    """
    session = make_session()

    async def execute(statement, params=None):
        sql = str(statement)
        for marker, rows in routes.items():
            if marker in sql:
                return FakeResult(rows)
        return FakeResult([])

    session.execute = AsyncMock(side_effect=execute)
    return session


@pytest.fixture
def routed_session():
    return make_routed_session
