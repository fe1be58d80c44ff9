from __future__ import annotations

import re
import time
from collections import defaultdict
from datetime import datetime, timedelta

import pymysql
import pytest
from fastapi.testclient import TestClient

from main import app
from routers import (
    common,
    health,
    places,
    products,
    spaces,
    stock_entries,
    stock_items,
    unit_conversions,
    units,
)

PATCHED_MODULES = (
    common,
    health,
    places,
    products,
    spaces,
    stock_entries,
    stock_items,
    unit_conversions,
    units,
)

SELECT_BY_ID = re.compile(r"^SELECT \* FROM (\w+) WHERE id=%s$")
SELECT_ALL = re.compile(r"^SELECT \* FROM (\w+)(?: WHERE (.+))? ORDER BY id$")
INSERT = re.compile(r"^INSERT INTO (\w+) \((.+)\) VALUES \((.+)\)$")
UPDATE = re.compile(r"^UPDATE (\w+) SET (.+) WHERE id=%s$")
DELETE = re.compile(r"^DELETE FROM (\w+) WHERE id=%s$")
CONDITION = re.compile(r"^(\w+) (=|LIKE) %s$")


class FakeDatabase:
    """In-memory stand-in for MySQL that understands the statements db.py emits."""

    def __init__(self):
        self.tables = defaultdict(dict)
        self.next_ids = defaultdict(lambda: 1)
        self.statements = []
        self.commits = 0
        self.unavailable = False
        self.clock = datetime(2026, 3, 2, 10, 0, 0)
        self._error = None

    # -- test controls -------------------------------------------------------

    def connect(self):
        if self.unavailable:
            raise pymysql.err.OperationalError(2003, "Can't connect to MySQL server on 'localhost'")
        return FakeConnection(self)

    def fail_next(self, error: Exception):
        self._error = error

    def seed(self, table: str, **values) -> dict:
        return dict(self._insert(table, values))

    def rows(self, table: str) -> list:
        return [dict(row) for _, row in sorted(self.tables[table].items())]

    # -- statement execution -------------------------------------------------

    def _tick(self) -> datetime:
        self.clock += timedelta(seconds=1)
        return self.clock

    def _insert(self, table: str, values: dict) -> dict:
        row_id = self.next_ids[table]
        self.next_ids[table] += 1
        now = self._tick()
        row = {"id": row_id, **values, "created_at": now, "updated_at": now}
        self.tables[table][row_id] = row
        return row

    def execute(self, cursor: "FakeCursor", sql: str, params: list):
        self.statements.append((sql, params))
        if self._error is not None:
            error, self._error = self._error, None
            raise error

        if sql == "SELECT 1":
            cursor.set_result([{"1": 1}])
            return

        m = SELECT_BY_ID.match(sql)
        if m:
            row = self.tables[m.group(1)].get(params[0])
            cursor.set_result([dict(row)] if row else [])
            return

        m = SELECT_ALL.match(sql)
        if m:
            table, where = m.groups()
            conditions = [CONDITION.match(c).groups() for c in where.split(" AND ")] if where else []
            rows = [
                dict(row) for _, row in sorted(self.tables[table].items())
                if all(_matches(row, cond, value) for cond, value in zip(conditions, params))
            ]
            cursor.set_result(rows)
            return

        m = INSERT.match(sql)
        if m:
            table, columns, _ = m.groups()
            row = self._insert(table, dict(zip(columns.split(", "), params)))
            cursor.lastrowid = row["id"]
            cursor.rowcount = 1
            cursor.set_result([])
            return

        m = UPDATE.match(sql)
        if m:
            table, assignments = m.groups()
            columns = [a.split("=")[0] for a in assignments.split(", ")]
            row = self.tables[table].get(params[-1])
            if row:
                row.update(zip(columns, params[:-1]))
                row["updated_at"] = self._tick()
            cursor.rowcount = 1 if row else 0
            cursor.set_result([])
            return

        m = DELETE.match(sql)
        if m:
            removed = self.tables[m.group(1)].pop(params[0], None)
            cursor.rowcount = 1 if removed else 0
            cursor.set_result([])
            return

        raise AssertionError(f"Unexpected statement: {sql}")


def _matches(row: dict, condition: tuple, value) -> bool:
    column, op = condition
    if op == "LIKE":
        needle = value.strip("%").lower()
        return needle in str(row.get(column) or "").lower()
    return row.get(column) == value


class FakeCursor:
    def __init__(self, db: FakeDatabase):
        self._db = db
        self._rows = []
        self.rowcount = -1
        self.lastrowid = None

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        self.close()

    def set_result(self, rows):
        self._rows = rows

    def execute(self, sql, params=None):
        self._db.execute(self, " ".join(sql.split()), list(params or []))
        return self.rowcount

    def fetchone(self):
        if not self._rows:
            return None
        return self._rows.pop(0)

    def fetchall(self):
        rows, self._rows = self._rows, []
        return rows

    def close(self):
        self._rows = []


class FakeConnection:
    def __init__(self, db: FakeDatabase):
        self._db = db
        self.open = True

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        self.close()

    def cursor(self):
        return FakeCursor(self._db)

    def commit(self):
        self._db.commits += 1

    def rollback(self):
        pass

    def close(self):
        self.open = False


@pytest.fixture()
def fake_db(monkeypatch):
    db = FakeDatabase()
    for module in PATCHED_MODULES:
        monkeypatch.setattr(module, "get_connection", db.connect)
    return db


@pytest.fixture()
def client(fake_db):
    # the context manager keeps one event loop alive so background operations can finish
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture()
def wait_for_operation(client):
    def _wait(status_url: str, attempts: int = 100) -> dict:
        for _ in range(attempts):
            body = client.get(status_url).json()
            if body["status"] in ("completed", "failed"):
                return body
            time.sleep(0.01)
        raise AssertionError(f"Operation at {status_url} did not finish")

    return _wait
