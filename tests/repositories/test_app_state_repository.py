"""Tests for the SQLAlchemy gate record repository with a mocked session."""

from __future__ import annotations

from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import pytest
from sqlalchemy.dialects import postgresql

from app.features.initialization.repository import AppStateRepository


def _session(scalar):
    result = MagicMock()
    result.scalar_one_or_none.return_value = scalar
    db = MagicMock()
    db.execute = AsyncMock(return_value=result)
    db.commit = AsyncMock()
    return db


@pytest.mark.asyncio
async def test_claim_is_a_conditional_upsert():
    db = _session("initialization")

    assert await AppStateRepository(db).claim_initialization("admin") is True

    stmt = db.execute.call_args.args[0]
    sql = str(stmt.compile(dialect=postgresql.dialect()))
    assert "ON CONFLICT (id) DO UPDATE" in sql
    assert "WHERE app_state.initialized IS false" in sql
    assert "RETURNING app_state.id" in sql
    db.commit.assert_awaited_once()


@pytest.mark.asyncio
async def test_claim_rejected_when_already_initialized():
    assert await AppStateRepository(_session(None)).claim_initialization("admin") is False


@pytest.mark.asyncio
async def test_get_initialization():
    row = SimpleNamespace(initialized=True, initialized_at=None, initialized_by="admin")

    record = await AppStateRepository(_session(row)).get_initialization()

    assert record.initialized is True
    assert record.initialized_by == "admin"
    assert await AppStateRepository(_session(None)).get_initialization() is None


@pytest.mark.asyncio
async def test_release_resets_the_gate_record():
    db = _session(None)

    await AppStateRepository(db).release_initialization()

    stmt = db.execute.call_args.args[0]
    sql = str(stmt.compile(dialect=postgresql.dialect()))
    assert sql.startswith("UPDATE app_state SET initialized=")
    assert "WHERE app_state.id = " in sql
    db.commit.assert_awaited_once()
