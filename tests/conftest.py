# tests/conftest.py
import itertools
from collections.abc import Mapping

import pytest

from strivio.db import LocalStore, init_db, make_engine
from strivio.errors import StoreError
from strivio.models import Identity
from strivio.utils.query_cache import QueryCache


class FakeStore:
    """In-memory RemoteStore that records every call."""

    def __init__(self):
        self.tables = {"users": [], "projects": [], "tasks": []}
        self.calls = []
        self.fail = {}
        self.identity = None
        self.accounts = {}
        self.listeners = []
        self._ids = itertools.count(1)

    def _check(self, op):
        if op in self.fail:
            raise StoreError(self.fail[op])

    def mutations(self):
        return [c for c in self.calls if c[0] in ("insert", "update", "delete")]

    def select(self, table, columns="*", eq=None):
        self.calls.append(("select", table, columns, dict(eq or {})))
        self._check("select")
        rows = [dict(r) for r in self.tables[table]
                if all(r.get(k) == v for k, v in (eq or {}).items())]
        if "projects(name)" in columns:
            names = {p["id"]: p["name"] for p in self.tables["projects"]}
            for r in rows:
                r["projects"] = {"name": names.get(r["project_id"])}
        return rows

    def insert(self, table, rows):
        payload = [rows] if isinstance(rows, Mapping) else list(rows)
        self.calls.append(("insert", table, [dict(r) for r in payload]))
        self._check("insert")
        out = []
        for r in payload:
            row = {"id": f"{table[0].upper()}{next(self._ids)}", **r}
            self.tables[table].append(row)
            out.append(dict(row))
        return out

    def update(self, table, row_id, values):
        self.calls.append(("update", table, row_id, dict(values)))
        self._check("update")
        for r in self.tables[table]:
            if r["id"] == row_id:
                r.update(values)
                return [dict(r)]
        raise StoreError(f"No {table} row with id {row_id}")

    def delete(self, table, row_id):
        self.calls.append(("delete", table, row_id))
        self._check("delete")
        self.tables[table] = [r for r in self.tables[table] if r["id"] != row_id]

    def sign_up(self, email, password):
        self.calls.append(("sign_up", email))
        self._check("sign_up")
        self.accounts[email] = password
        return Identity(id=f"auth-{email}", email=email)

    def sign_in(self, email, password):
        self.calls.append(("sign_in", email))
        self._check("sign_in")
        if self.accounts.get(email) != password:
            raise StoreError("Invalid login credentials")
        self.identity = Identity(id=f"auth-{email}", email=email)
        self._notify("SIGNED_IN")
        return self.identity

    def sign_out(self):
        self.calls.append(("sign_out",))
        self.identity = None
        self._notify("SIGNED_OUT")

    def get_session(self):
        self.calls.append(("get_session",))
        self._check("get_session")
        return self.identity

    def on_session_change(self, callback):
        self.listeners.append(callback)
        return lambda: self.listeners.remove(callback)

    def _notify(self, event_name):
        for listener in list(self.listeners):
            listener(event_name, self.identity)


@pytest.fixture
def fake_store():
    return FakeStore()


@pytest.fixture
def cache():
    return QueryCache()


@pytest.fixture
def engine():
    engine = make_engine("sqlite://")
    init_db(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def local_store(engine):
    return LocalStore(engine)
