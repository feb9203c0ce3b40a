"""
Shared pytest fixtures and configuration.
"""

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from flowstate.api.app import create_app
from flowstate.storage.log_store import InMemoryLogStore


class FakeClock:
    """Manually advanced Unix-seconds clock."""

    def __init__(self, start: float = 1_700_000_000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def store():
    return InMemoryLogStore()


@pytest.fixture
def app(store):
    """A fresh app instance per test, backed by the in-memory store."""
    return create_app(store=store)


@pytest_asyncio.fixture
async def client(app):
    """Async HTTP client wired directly to the ASGI app (no server needed)."""
    async with app.router.lifespan_context(app):
        async with AsyncClient(
            transport=ASGITransport(app=app), base_url="http://test"
        ) as ac:
            yield ac
