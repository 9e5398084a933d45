"""
Shared test fixtures.
"""

import os
import sys
from pathlib import Path

# Add backend directory to Python path
backend_dir = Path(__file__).parent.parent
sys.path.insert(0, str(backend_dir))

# Settings are loaded at import time; provide the required values
os.environ.setdefault("SUPABASE_URL", "http://localhost:54321")
os.environ.setdefault("SUPABASE_KEY", "test-anon-key")

import pytest
from datetime import datetime, timezone
from types import SimpleNamespace
from typing import Optional

from models.catalog import MaterialType
from services.path_service import PathService
from services.category_service import CategoryService
from services.material_service import MaterialService
from services.branch_service import BranchService
from services.user_service import UserService
from services.progress_service import ProgressService
from services.import_service import ImportService


# ===================
# MOCK SUPABASE CLIENT
# ===================

class MockSupabaseResponse:
    """Mock Supabase query response."""

    def __init__(self, data: list = None, count: int = None):
        self.data = data or []
        self.count = count if count is not None else len(self.data)


class MockSupabaseQuery:
    """
    Mock async query builder with chainable methods.

    Filters are applied against the table's rows when execute() is
    awaited, so inserts made earlier in a test are visible to later
    selects.
    """

    def __init__(self, table: "MockSupabaseTable", action: str, payload=None):
        self._table = table
        self._action = action
        self._payload = payload
        self._filters = []
        self._order: Optional[tuple[str, bool]] = None
        self._limit: Optional[int] = None

    def select(self, *args, **kwargs):
        return self

    def eq(self, column, value):
        self._filters.append(lambda row: row.get(column) == value)
        return self

    def neq(self, column, value):
        self._filters.append(lambda row: row.get(column) != value)
        return self

    def in_(self, column, values):
        values = list(values)
        self._filters.append(lambda row: row.get(column) in values)
        return self

    def order(self, column, desc: bool = False, **kwargs):
        self._order = (column, desc)
        return self

    def limit(self, count):
        self._limit = count
        return self

    def _matches(self, row: dict) -> bool:
        return all(f(row) for f in self._filters)

    async def execute(self) -> MockSupabaseResponse:
        table = self._table
        table.calls.append(self._action)
        if self._action in table.fail_on:
            raise Exception(table.fail_on[self._action])

        now = datetime.now(timezone.utc).isoformat()

        if self._action == "select":
            data = [dict(r) for r in table.rows if self._matches(r)]
            if self._order:
                column, desc = self._order
                data.sort(key=lambda r: (r.get(column) is None, r.get(column)), reverse=desc)
            if self._limit is not None:
                data = data[:self._limit]

        elif self._action == "insert":
            items = self._payload if isinstance(self._payload, list) else [self._payload]
            data = []
            for item in items:
                row = {"created_at": now, **item}
                table.rows.append(row)
                data.append(dict(row))

        elif self._action == "upsert":
            items = self._payload if isinstance(self._payload, list) else [self._payload]
            data = []
            for item in items:
                existing = next(
                    (r for r in table.rows if all(r.get(k) == item.get(k) for k in table.key_columns)),
                    None
                )
                if existing is None:
                    existing = {"created_at": now}
                    table.rows.append(existing)
                existing.update(item)
                data.append(dict(existing))

        elif self._action == "update":
            data = []
            for row in table.rows:
                if self._matches(row):
                    row.update(self._payload)
                    row["updated_at"] = now
                    data.append(dict(row))

        elif self._action == "delete":
            data = [dict(r) for r in table.rows if self._matches(r)]
            table.rows[:] = [r for r in table.rows if not self._matches(r)]

        else:
            raise ValueError(f"Unknown action {self._action}")

        return MockSupabaseResponse(data=data)


class MockSupabaseTable:
    """In-memory table shared by every query built from it."""

    def __init__(self, rows: list = None, key_columns: tuple = ("id",)):
        self.rows = rows if rows is not None else []
        self.key_columns = key_columns
        self.calls: list[str] = []
        self.fail_on: dict[str, str] = {}

    def select(self, *args, **kwargs):
        return MockSupabaseQuery(self, "select")

    def insert(self, data):
        return MockSupabaseQuery(self, "insert", data)

    def upsert(self, data, **kwargs):
        return MockSupabaseQuery(self, "upsert", data)

    def update(self, data):
        return MockSupabaseQuery(self, "update", data)

    def delete(self):
        return MockSupabaseQuery(self, "delete")


class MockAuthAdmin:
    """
    Mock of the auth admin API.

    Records every create_user call. Logins listed in `reject` fail with
    the given message, like the provider does for duplicates or weak
    passwords.
    """

    def __init__(self):
        self.calls: list[dict] = []
        self.reject: dict[str, str] = {}

    async def create_user(self, attributes: dict):
        self.calls.append(attributes)
        email = attributes["email"]
        if email in self.reject:
            raise MockAuthApiError(self.reject[email])
        user_id = f"auth-{len(self.calls)}"
        return SimpleNamespace(
            user=SimpleNamespace(id=user_id, email=email, user_metadata=attributes.get("user_metadata"))
        )


class MockAuthApiError(Exception):
    """Shaped like the auth client's error: carries .message."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class MockSupabaseClient:
    """Mock async Supabase client."""

    KEY_COLUMNS = {
        "user_progress": ("user_id", "path_id", "category_id"),
    }

    def __init__(self):
        self._tables: dict[str, MockSupabaseTable] = {}
        self.auth = SimpleNamespace(admin=MockAuthAdmin())

    def set_table_data(self, table_name: str, data: list):
        """Configure rows for a table (replaces existing rows)."""
        self.table(table_name).rows[:] = [dict(r) for r in data]

    def rows(self, table_name: str) -> list:
        """Current rows of a table."""
        return self.table(table_name).rows

    def fail(self, table_name: str, action: str, message: str = "connection reset"):
        """Make every `action` on a table raise."""
        self.table(table_name).fail_on[action] = message

    def table(self, name: str) -> MockSupabaseTable:
        if name not in self._tables:
            self._tables[name] = MockSupabaseTable(
                key_columns=self.KEY_COLUMNS.get(name, ("id",))
            )
        return self._tables[name]


# ===================
# FIXTURES
# ===================

@pytest.fixture
def mock_supabase() -> MockSupabaseClient:
    """
    Create a mock Supabase client.

    Usage:
        def test_something(mock_supabase):
            mock_supabase.set_table_data("branches", [
                {"id": "branch-1", "name": "North", ...}
            ])
    """
    return MockSupabaseClient()


@pytest.fixture
def auth_admin(mock_supabase) -> MockAuthAdmin:
    """Recording mock of the identity provider."""
    return mock_supabase.auth.admin


@pytest.fixture
def path_service(mock_supabase) -> PathService:
    return PathService(mock_supabase)


@pytest.fixture
def category_service(mock_supabase) -> CategoryService:
    return CategoryService(mock_supabase)


@pytest.fixture
def material_service(mock_supabase) -> MaterialService:
    return MaterialService(mock_supabase)


@pytest.fixture
def branch_service(mock_supabase) -> BranchService:
    return BranchService(mock_supabase)


@pytest.fixture
def user_service(mock_supabase) -> UserService:
    return UserService(mock_supabase, admin=mock_supabase)


@pytest.fixture
def progress_service(mock_supabase) -> ProgressService:
    return ProgressService(mock_supabase)


@pytest.fixture
def import_service(
    path_service,
    category_service,
    material_service,
    branch_service,
    user_service,
) -> ImportService:
    """ImportService wired to the in-memory store and identity provider."""
    return ImportService(
        paths=path_service,
        categories=category_service,
        materials=material_service,
        branches=branch_service,
        users=user_service,
        default_material_type=MaterialType.DOCUMENT,
        max_error_details=10,
    )


@pytest.fixture
def sample_branches_list() -> list:
    """Sample branches for testing."""
    return [
        {"id": "branch1", "name": "Downtown", "region": "North", "manager_id": "manager1"},
        {"id": "branch2", "name": "Westside", "region": "West", "manager_id": None},
    ]


@pytest.fixture
def sample_users_list() -> list:
    """Sample user profiles (one admin, one manager, three staff)."""
    return [
        {"id": "admin1", "name": "System Admin", "username": "admin", "role": "admin", "branch_id": None},
        {"id": "manager1", "name": "John Manager", "username": "manager1", "role": "manager", "branch_id": "branch1"},
        {"id": "staff1", "name": "Alice Smith", "username": "staff1", "role": "staff", "branch_id": "branch1"},
        {"id": "staff2", "name": "Bob Jones", "username": "staff2", "role": "staff", "branch_id": "branch1"},
        {"id": "staff3", "name": "Carol White", "username": "staff3", "role": "staff", "branch_id": "branch2"},
    ]


# ===================
# API TEST CLIENT
# ===================

@pytest.fixture
def test_client():
    """
    Create FastAPI test client.

    The lifespan (database check) does not run unless the client is
    used as a context manager.

    Usage:
        def test_endpoint(test_client):
            response = test_client.get("/")
            assert response.status_code == 200
    """
    from fastapi.testclient import TestClient
    from main import app

    return TestClient(app)
