# tests/fakes.py

from __future__ import annotations

import itertools
from dataclasses import dataclass, field
from typing import Any, Callable


@dataclass
class FakeResponse:
    data: list[dict[str, Any]]


class FakeQuery:
    """
    In-memory stand-in for a Supabase table query builder.

    Supports the subset of the fluent API the repositories use: select,
    insert, update, upsert, delete, eq, gte, lte, order, limit, execute.
    """

    def __init__(self, client: "FakeSupabaseClient", table: str) -> None:
        self._client = client
        self._table = table
        self._action = "select"
        self._payload: dict[str, Any] | None = None
        self._filters: list[Callable[[dict[str, Any]], bool]] = []
        self._order: tuple[str, bool] | None = None
        self._limit: int | None = None

    @property
    def _rows(self) -> list[dict[str, Any]]:
        return self._client.tables.setdefault(self._table, [])

    def select(self, *_columns: str) -> "FakeQuery":
        self._action = "select"
        return self

    def insert(self, payload: dict[str, Any]) -> "FakeQuery":
        self._action, self._payload = "insert", payload
        return self

    def upsert(self, payload: dict[str, Any]) -> "FakeQuery":
        self._action, self._payload = "upsert", payload
        return self

    def update(self, payload: dict[str, Any]) -> "FakeQuery":
        self._action, self._payload = "update", payload
        return self

    def delete(self) -> "FakeQuery":
        self._action = "delete"
        return self

    def eq(self, column: str, value: Any) -> "FakeQuery":
        self._filters.append(lambda row: row.get(column) == value)
        return self

    def gte(self, column: str, value: Any) -> "FakeQuery":
        self._filters.append(lambda row: row.get(column) is not None and row[column] >= value)
        return self

    def lte(self, column: str, value: Any) -> "FakeQuery":
        self._filters.append(lambda row: row.get(column) is not None and row[column] <= value)
        return self

    def order(self, column: str, desc: bool = False) -> "FakeQuery":
        self._order = (column, desc)
        return self

    def limit(self, count: int) -> "FakeQuery":
        self._limit = count
        return self

    def _matching(self) -> list[dict[str, Any]]:
        return [row for row in self._rows if all(f(row) for f in self._filters)]

    def execute(self) -> FakeResponse:
        self._client.calls.append((self._table, self._action))
        if self._table in self._client.failing_tables:
            raise self._client.failing_tables[self._table]

        if self._action == "insert":
            row = {"id": self._client.next_id(), **(self._payload or {})}
            self._rows.append(row)
            return FakeResponse([dict(row)])

        if self._action == "upsert":
            payload = dict(self._payload or {})
            for row in self._rows:
                if row.get("id") == payload.get("id"):
                    row.update(payload)
                    return FakeResponse([dict(row)])
            payload.setdefault("id", self._client.next_id())
            self._rows.append(payload)
            return FakeResponse([dict(payload)])

        matching = self._matching()

        if self._action == "update":
            for row in matching:
                row.update(self._payload or {})
            return FakeResponse([dict(row) for row in matching])

        if self._action == "delete":
            for row in matching:
                self._rows.remove(row)
            return FakeResponse([dict(row) for row in matching])

        if self._order:
            column, desc = self._order
            matching = sorted(matching, key=lambda row: row.get(column) or "", reverse=desc)
        if self._limit:
            matching = matching[: self._limit]
        return FakeResponse([dict(row) for row in matching])


@dataclass
class FakeSupabaseClient:
    """Supabase client double holding tables as lists of row dicts."""

    tables: dict[str, list[dict[str, Any]]] = field(default_factory=dict)
    failing_tables: dict[str, Exception] = field(default_factory=dict)
    calls: list[tuple[str, str]] = field(default_factory=list)
    _ids: Any = field(default_factory=lambda: itertools.count(1))

    def next_id(self) -> str:
        return f"gen-{next(self._ids)}"

    def table(self, name: str) -> FakeQuery:
        return FakeQuery(self, name)
