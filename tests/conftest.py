"""Shared test fixtures: in-memory store with a controllable clock, test client."""

from datetime import datetime, timedelta, timezone

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from shoal.config import settings
from shoal.dependencies import get_store
from shoal.main import app
from shoal.services.store import Store

SESSION_HEADER = settings.session_header


class FakeClock:
    """Callable clock that only moves when told to."""

    def __init__(self, now: datetime | None = None):
        self.now = now or datetime(2026, 1, 1, 12, 0, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now += timedelta(**kwargs)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest_asyncio.fixture
async def store(clock: FakeClock) -> Store:
    """Yield an initialized in-memory store."""
    s = Store(clock=clock)
    await s.initialize()
    yield s
    await s.close()


@pytest_asyncio.fixture
async def client(store: Store) -> AsyncClient:
    """Yield an httpx AsyncClient wired to the test store."""
    app.dependency_overrides[get_store] = lambda: store
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        yield c
    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def session_headers(client: AsyncClient) -> dict[str, str]:
    """Log in and return headers carrying the new session token."""
    response = await client.post("/login")
    return {SESSION_HEADER: response.json()["id"]}
