"""Shared test fixtures.

Every test runs against in-memory doubles: no Supabase project, database or
image CDN is contacted.
"""

from __future__ import annotations

from datetime import datetime

import pytest

from app.infra.supabase.repositories import RepositoryFactory
from tests.factories import NOW
from tests.fakes import FakeSupabaseClient


@pytest.fixture()
def now() -> datetime:
    return NOW


@pytest.fixture()
def fake_client() -> FakeSupabaseClient:
    return FakeSupabaseClient()


@pytest.fixture()
def repos(fake_client) -> RepositoryFactory:
    return RepositoryFactory(fake_client)
