"""Shared fakes for the database layer: no live PostgreSQL needed."""

from __future__ import annotations

from typing import Any

import pytest


class FakeCursor:
    """Cursor stub fed by the owning connection's result queue."""

    def __init__(self, conn: FakeConn) -> None:
        self._conn = conn
        self._rows: list[tuple[Any, ...]] = []
        self.rowcount = 0

    def __enter__(self) -> FakeCursor:
        return self

    def __exit__(self, exc_type, exc, tb) -> bool:  # type: ignore[no-untyped-def]
        return False

    def execute(self, sql: Any, params: tuple[Any, ...] | None = None) -> None:
        self._conn.executes.append((sql, params))
        if self._conn.error is not None:
            raise self._conn.error
        self._rows = list(self._conn.results.pop(0)) if self._conn.results else []
        self.rowcount = len(self._rows)

    def fetchone(self) -> tuple[Any, ...] | None:
        return self._rows[0] if self._rows else None

    def fetchall(self) -> list[tuple[Any, ...]]:
        return list(self._rows)


class FakeConn:
    """Connection stub recording SQL, commits and rollbacks."""

    def __init__(self, results: list[list[tuple[Any, ...]]] | None = None,
                 error: Exception | None = None) -> None:
        self.results = list(results or [])
        self.error = error
        self.executes: list[tuple[Any, tuple[Any, ...] | None]] = []
        self.commits = 0
        self.rollbacks = 0

    def cursor(self) -> FakeCursor:
        return FakeCursor(self)

    def commit(self) -> None:
        self.commits += 1

    def rollback(self) -> None:
        self.rollbacks += 1


@pytest.fixture
def use_conn(monkeypatch: pytest.MonkeyPatch):
    """
    Route a repository module's get/release_connection to a FakeConn.

    Usage:
        conn = use_conn(catalog_repo, results=[[(1, "x")]])
    """
    def _install(module, results=None, error=None) -> FakeConn:
        conn = FakeConn(results=results, error=error)
        conn.released = 0

        def _release(c) -> None:
            assert c is conn
            conn.released += 1

        monkeypatch.setattr(module, "get_connection", lambda: conn)
        monkeypatch.setattr(module, "release_connection", _release)
        return conn

    return _install
