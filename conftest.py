"""Shared fixtures: an in-memory stand-in for the Supabase table API."""
from uuid import uuid4

import pytest


class FakeResponse:
    def __init__(self, data, count=None):
        self.data = data
        self.count = count


class FakeQuery:
    """Chainable query over one in-memory table, mirroring the postgrest builder calls we use."""

    def __init__(self, client, name):
        self.client = client
        self.name = name
        self.op = "select"
        self.payload = None
        self.on_conflict = "id"
        self.filters = []
        self.order_by = None
        self.limit_n = None

    @property
    def rows(self):
        return self.client.tables.setdefault(self.name, [])

    # --- operations ---
    def select(self, *columns, **kwargs):
        self.op = "select"
        return self

    def insert(self, payload):
        self.op, self.payload = "insert", payload
        return self

    def upsert(self, payload, on_conflict="id"):
        self.op, self.payload, self.on_conflict = "upsert", payload, on_conflict
        return self

    def update(self, payload):
        self.op, self.payload = "update", payload
        return self

    def delete(self):
        self.op = "delete"
        return self

    # --- modifiers ---
    def eq(self, column, value):
        self.filters.append(lambda r: r.get(column) == value)
        return self

    def in_(self, column, values):
        self.filters.append(lambda r: r.get(column) in values)
        return self

    def order(self, column, desc=False):
        self.order_by = (column, desc)
        return self

    def limit(self, n):
        self.limit_n = n
        return self

    def _matches(self, row):
        return all(f(row) for f in self.filters)

    def execute(self):
        self.client.calls.append((self.name, self.op, self.payload))
        if self.op == "select":
            data = [dict(r) for r in self.rows if self._matches(r)]
            if self.order_by:
                column, desc = self.order_by
                data.sort(key=lambda r: r.get(column) or "", reverse=desc)
            if self.limit_n is not None:
                data = data[: self.limit_n]
            return FakeResponse(data)

        if self.op == "insert":
            items = self.payload if isinstance(self.payload, list) else [self.payload]
            inserted = []
            for item in items:
                row = dict(item)
                row.setdefault("id", str(uuid4()))
                self.rows.append(row)
                inserted.append(dict(row))
            return FakeResponse(inserted)

        if self.op == "upsert":
            items = self.payload if isinstance(self.payload, list) else [self.payload]
            for item in items:
                key = item[self.on_conflict]
                existing = next((r for r in self.rows if r.get(self.on_conflict) == key), None)
                if existing is None:
                    self.rows.append(dict(item))
                else:
                    existing.update(item)
            return FakeResponse([dict(i) for i in items])

        if self.op == "update":
            updated = []
            for row in self.rows:
                if self._matches(row):
                    row.update(self.payload)
                    updated.append(dict(row))
            return FakeResponse(updated)

        if self.op == "delete":
            kept = [r for r in self.rows if not self._matches(r)]
            removed = len(self.rows) - len(kept)
            self.client.tables[self.name] = kept
            return FakeResponse([], count=removed)

        raise AssertionError(f"unsupported op {self.op}")


class FakeSupabase:
    def __init__(self):
        self.tables = {}
        self.calls = []

    def table(self, name):
        return FakeQuery(self, name)


class BrokenSupabase:
    """Every table call fails, like a client with a dead connection."""

    def table(self, name):
        raise ConnectionError(f"cannot reach table {name}")


@pytest.fixture
def fake_client():
    return FakeSupabase()


@pytest.fixture
def broken_client():
    return BrokenSupabase()
