# =============================================================================
# tests/conftest.py
# Pytest Configuration and Fixtures
# =============================================================================

import pytest
from datetime import datetime, timezone
from types import SimpleNamespace
from unittest.mock import MagicMock

from postgrest.exceptions import APIError


# =============================================================================
# FAKE BACKEND
# =============================================================================

class FakeQuery:
    """Chainable stand-in for a postgrest request builder."""

    def __init__(self, client, table):
        self.client = client
        self.table = table
        self.operation = None
        self.payload = None
        self.calls = []

    def _record(self, name, *args, **kwargs):
        self.calls.append((name, args, kwargs))
        return self

    def select(self, *args, **kwargs):
        self.operation = "select"
        return self._record("select", *args, **kwargs)

    def insert(self, payload):
        self.operation, self.payload = "insert", payload
        return self._record("insert", payload)

    def update(self, payload):
        self.operation, self.payload = "update", payload
        return self._record("update", payload)

    def upsert(self, payload):
        self.operation, self.payload = "upsert", payload
        return self._record("upsert", payload)

    def delete(self):
        self.operation = "delete"
        return self._record("delete")

    def eq(self, *args):
        return self._record("eq", *args)

    def gte(self, *args):
        return self._record("gte", *args)

    def lte(self, *args):
        return self._record("lte", *args)

    def ilike(self, *args):
        return self._record("ilike", *args)

    def order(self, *args, **kwargs):
        return self._record("order", *args, **kwargs)

    def limit(self, *args):
        return self._record("limit", *args)

    def execute(self):
        self.client.executed.append(self)
        error = self.client.errors.get(self.table)
        if error is not None:
            raise error
        if self.operation == "select":
            return SimpleNamespace(data=list(self.client.rows.get(self.table, [])))
        self.client.writes.append((self.table, self.operation, self.payload))
        if self.operation in ("insert", "upsert"):
            rows = self.payload if isinstance(self.payload, list) else [self.payload]
            return SimpleNamespace(data=[dict(r) for r in rows])
        return SimpleNamespace(data=[])


class FakeSupabaseClient:
    """
    In-memory Supabase client: configure ``rows`` / ``errors`` per table,
    inspect ``executed`` queries and ``writes`` afterwards.
    """

    def __init__(self, rows=None, errors=None):
        self.rows = dict(rows or {})
        self.errors = dict(errors or {})
        self.executed = []
        self.writes = []
        self.auth = MagicMock()
        self.auth.get_session.return_value = None

    def table(self, name):
        return FakeQuery(self, name)

    def last_query(self, table=None):
        queries = [q for q in self.executed if table is None or q.table == table]
        return queries[-1] if queries else None


def make_user(user_id="user-1", email="jane.doe@example.com", **metadata):
    return SimpleNamespace(id=user_id, email=email, user_metadata=metadata)


def make_session(user=None):
    return SimpleNamespace(user=user or make_user(), access_token="token")


# =============================================================================
# FIXTURES
# =============================================================================

@pytest.fixture
def fake_client():
    """Backend where every table is empty and reachable"""
    return FakeSupabaseClient()


@pytest.fixture
def missing_table_error():
    """Error raised by PostgREST for a table that was never created"""
    return APIError({
        "message": 'relation "public.energy_readings" does not exist',
        "code": "42P01",
        "hint": None,
        "details": None,
    })


@pytest.fixture
def network_error():
    return Exception("TypeError: Network request failed")


@pytest.fixture
def fixed_now():
    """Deterministic reference time"""
    return datetime(2024, 6, 15, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def memory_store(tmp_path):
    """Local key-value store in a temp directory"""
    from eco_core.storage.local_store import LocalKeyValueStore

    store = LocalKeyValueStore(tmp_path / "econexus_test.db")
    yield store
    store.close()


@pytest.fixture
def mock_supabase():
    """Mock Supabase client"""
    mock_client = MagicMock()
    mock_client.table.return_value.select.return_value.execute.return_value.data = []
    mock_client.table.return_value.insert.return_value.execute.return_value = MagicMock()
    return mock_client


@pytest.fixture(autouse=True)
def reset_shared_client():
    """Never let one test's client handle leak into the next"""
    from eco_core.data.supabase_client import set_backend_client

    yield
    set_backend_client(None)
