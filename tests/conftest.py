# =============================================================================
# tests/conftest.py - Pytest Configuration
# =============================================================================
# - Sets up environment variables before any app imports
# - Provides an in-memory stand-in for the supabase query builder so route
#   tests exercise real filtering/ordering without a database
# - Provides TestClient fixtures with dependency overrides for the caller
# =============================================================================

import os

# app.config loads settings at import time
os.environ.setdefault("SUPABASE_URL", "https://test-project.supabase.co")
os.environ.setdefault("SUPABASE_KEY", "test-anon-key")
os.environ.setdefault("ENVIRONMENT", "development")
os.environ.setdefault("RATE_LIMIT", "10000/minute")
os.environ.setdefault("AUTH_RATE_LIMIT", "10000/minute")
os.environ.setdefault("CONTACT_RATE_LIMIT", "10000/minute")
os.environ.setdefault("RESEND_API_KEY", "")

import copy
import re
import uuid
from datetime import datetime, timedelta, timezone
from unittest.mock import MagicMock

import pytest
from fastapi.testclient import TestClient

from app.main import app
from app.core.dependencies import get_current_user_id, get_optional_user
from app.core.rate_limit import limiter
from app.database.supabase_client import get_supabase, get_auth_client
from app.modules.auth.service import clear_auth_cache


# =============================================================================
# In-memory supabase
# =============================================================================

TABLE_DEFAULTS = {
    "projects": {"likes_count": 0, "categories": [], "tags": [], "image_url": None},
    "profiles": {"full_name": None, "avatar_url": None},
}

UNIQUE_KEYS = {
    "likes": ("user_id", "project_id"),
}

_BASE_TIME = datetime(2026, 1, 1, tzinfo=timezone.utc)


class FakeResponse:
    def __init__(self, data, count=None):
        self.data = data
        self.count = count


class FakeQuery:
    def __init__(self, db, table):
        self.db = db
        self.table = table
        self.op = "select"
        self.columns = "*"
        self.payload = None
        self.filters = []
        self.order_by = None
        self.limit_n = None
        self.offset_n = 0
        self.count_mode = None
        self.on_conflict = "id"

    # -- operations ----------------------------------------------------------
    def select(self, columns="*", count=None):
        self.op = "select"
        self.columns = columns
        self.count_mode = count
        return self

    def insert(self, payload):
        self.op = "insert"
        self.payload = payload
        return self

    def upsert(self, payload, on_conflict="id"):
        self.op = "upsert"
        self.payload = payload
        self.on_conflict = on_conflict
        return self

    def update(self, payload):
        self.op = "update"
        self.payload = payload
        return self

    def delete(self):
        self.op = "delete"
        return self

    # -- filters ---------------------------------------------------------------
    def eq(self, column, value):
        self.filters.append(lambda row: row.get(column) == value)
        return self

    def in_(self, column, values):
        values = list(values)
        self.filters.append(lambda row: row.get(column) in values)
        return self

    def contains(self, column, values):
        self.filters.append(lambda row: set(values).issubset(set(row.get(column) or [])))
        return self

    def or_(self, expression):
        clauses = []
        for part in expression.split(","):
            column, operator, pattern = part.split(".", 2)
            assert operator == "ilike", f"unsupported operator {operator}"
            clauses.append((column, pattern.strip("%").lower()))
        self.filters.append(
            lambda row: any(needle in (row.get(column) or "").lower() for column, needle in clauses)
        )
        return self

    def order(self, column, desc=False):
        self.order_by = (column, desc)
        return self

    def limit(self, n):
        self.limit_n = n
        return self

    def offset(self, n):
        self.offset_n = n
        return self

    # -- execution -------------------------------------------------------------
    def _matches(self, row):
        return all(f(row) for f in self.filters)

    def execute(self):
        failure = self.db.failures.get((self.table, self.op))
        if failure is not None:
            raise failure
        rows = self.db.tables.setdefault(self.table, [])
        handler = getattr(self, f"_execute_{self.op}")
        return handler(rows)

    def _execute_select(self, rows):
        matched = [r for r in rows if self._matches(r)]
        if self.order_by:
            column, desc = self.order_by
            matched.sort(key=lambda r: r.get(column) or "", reverse=desc)
        total = len(matched)
        matched = matched[self.offset_n:]
        if self.limit_n is not None:
            matched = matched[:self.limit_n]
        data = [self.db.embed(self.columns, copy.deepcopy(r)) for r in matched]
        return FakeResponse(data, total if self.count_mode else None)

    def _execute_insert(self, rows):
        payload = self.payload if isinstance(self.payload, list) else [self.payload]
        inserted = []
        for item in payload:
            row = self.db.new_row(self.table, item)
            self.db.check_unique(self.table, row)
            rows.append(row)
            inserted.append(copy.deepcopy(row))
        return FakeResponse(inserted)

    def _execute_upsert(self, rows):
        payload = self.payload if isinstance(self.payload, list) else [self.payload]
        out = []
        for item in payload:
            existing = next((r for r in rows if r.get(self.on_conflict) == item.get(self.on_conflict)), None)
            if existing is not None:
                existing.update(copy.deepcopy(item))
                out.append(copy.deepcopy(existing))
            else:
                row = self.db.new_row(self.table, item)
                rows.append(row)
                out.append(copy.deepcopy(row))
        return FakeResponse(out)

    def _execute_update(self, rows):
        updated = []
        for row in rows:
            if self._matches(row):
                row.update(copy.deepcopy(self.payload))
                updated.append(copy.deepcopy(row))
        return FakeResponse(updated)

    def _execute_delete(self, rows):
        removed = [r for r in rows if self._matches(r)]
        self.db.tables[self.table] = [r for r in rows if not self._matches(r)]
        return FakeResponse(copy.deepcopy(removed))


class FakeBucket:
    def __init__(self, storage, name):
        self.storage = storage
        self.name = name

    def upload(self, path, content, file_options=None):
        self.storage.objects[(self.name, path)] = content
        return {"Key": f"{self.name}/{path}"}

    def get_public_url(self, path):
        return f"https://test-project.supabase.co/storage/v1/object/public/{self.name}/{path}"

    def remove(self, paths):
        for path in paths:
            self.storage.objects.pop((self.name, path), None)
            self.storage.removed.append((self.name, path))
        return []


class FakeStorage:
    def __init__(self):
        self.objects = {}
        self.removed = []

    def from_(self, name):
        return FakeBucket(self, name)


class FakeSupabase:
    """Just enough of supabase.Client for the services: table(), storage and auth."""

    def __init__(self):
        self.tables = {}
        self.failures = {}
        self.clock = 0
        self.storage = FakeStorage()
        self.auth = MagicMock()

    def table(self, name):
        return FakeQuery(self, name)

    def tick(self):
        self.clock += 1
        return (_BASE_TIME + timedelta(seconds=self.clock)).isoformat()

    def new_row(self, table, item):
        row = copy.deepcopy(TABLE_DEFAULTS.get(table, {}))
        row.update(copy.deepcopy(item))
        row.setdefault("id", str(uuid.uuid4()))
        row.setdefault("created_at", self.tick())
        return row

    def check_unique(self, table, row):
        keys = UNIQUE_KEYS.get(table)
        if not keys:
            return
        for other in self.tables.get(table, []):
            if all(other.get(k) == row.get(k) for k in keys):
                raise Exception('duplicate key value violates unique constraint "likes_user_id_project_id_key" (23505)')

    def embed(self, columns, row):
        if re.search(r"profiles:user_id", columns or ""):
            profile = next((p for p in self.tables.get("profiles", []) if p["id"] == row.get("user_id")), None)
            row["profiles"] = (
                {"full_name": profile.get("full_name"), "avatar_url": profile.get("avatar_url")}
                if profile else None
            )
        return row

    def seed(self, table, **values):
        row = self.new_row(table, values)
        self.tables.setdefault(table, []).append(row)
        return copy.deepcopy(row)

    def rows(self, table):
        return self.tables.get(table, [])


# =============================================================================
# Fixtures
# =============================================================================

ALICE = {"id": "user-alice", "email": "alice@example.com", "user_metadata": {"full_name": "Alice"}}
BOB = {"id": "user-bob", "email": "bob@example.com", "user_metadata": {"full_name": "Bob"}}


@pytest.fixture
def fake_db():
    return FakeSupabase()


@pytest.fixture
def client(fake_db):
    app.dependency_overrides[get_supabase] = lambda: fake_db
    app.dependency_overrides[get_auth_client] = lambda: fake_db
    clear_auth_cache()
    limiter.reset()
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()
    clear_auth_cache()
    limiter.reset()


@pytest.fixture
def login_as(client):
    """Make subsequent requests run as the given user (None = anonymous)."""
    def _login(user):
        if user is None:
            app.dependency_overrides.pop(get_current_user_id, None)
            app.dependency_overrides[get_optional_user] = lambda: None
        else:
            app.dependency_overrides[get_current_user_id] = lambda: user
            app.dependency_overrides[get_optional_user] = lambda: user
        return user
    return _login


@pytest.fixture
def alice_project(fake_db):
    fake_db.seed("profiles", id=ALICE["id"], email=ALICE["email"], full_name="Alice")
    return fake_db.seed(
        "projects",
        user_id=ALICE["id"],
        title="便利なTodoアプリ",
        description="React で作ったタスク管理",
        url="https://todo.example.com",
        categories=["Webアプリ"],
        tags=["React"],
    )
