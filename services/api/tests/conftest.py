"""Shared fixtures: an in-process API client and a stand-in DB session."""

from contextlib import asynccontextmanager
from typing import Any

import pytest
from httpx import ASGITransport, AsyncClient

from app.main import app


@pytest.fixture
async def client():
    """Create test client."""
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac


class FakeSession:
    """Records ORM objects added during a `get_session()` block."""

    def __init__(
        self,
        existing: dict[Any, Any] | None = None,
        flush_error: Exception | None = None,
    ) -> None:
        self.added: list[Any] = []
        self.flushes = 0
        self.existing = existing or {}
        self.flush_error = flush_error

    def add(self, obj: Any) -> None:
        self.added.append(obj)

    async def flush(self) -> None:
        self.flushes += 1
        if self.flush_error is not None:
            raise self.flush_error

    async def get(self, model: Any, key: Any) -> Any:
        return self.existing.get((model, key))


@pytest.fixture
def fake_session() -> FakeSession:
    return FakeSession()


def make_get_session(session: FakeSession):
    """Build a drop-in replacement for app.stores.postgres.get_session."""

    @asynccontextmanager
    async def _get_session():
        yield session

    return _get_session
