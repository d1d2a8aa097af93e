"""Session header resolution: missing, unreadable, unknown, expired and reaped tokens."""

import pytest
from httpx import AsyncClient

from shoal.config import settings
from shoal.services.store import Store

HEADER = settings.session_header


@pytest.mark.asyncio
async def test_unknown_session_returns_400(client: AsyncClient):
    response = await client.get("/fish", headers={HEADER: "not-a-session"})
    assert response.status_code == 400
    data = response.json()
    assert data["error"] is True
    assert data["detail"] == "Session `not-a-session` not found"


@pytest.mark.asyncio
async def test_non_utf8_session_returns_400(client: AsyncClient):
    """Header bytes that aren't valid text are rejected, shown lossily."""
    response = await client.get("/fish", headers={HEADER: b"\xff\xfeabc"})
    assert response.status_code == 400
    assert response.json()["detail"] == "Session `\ufffd\ufffdabc` not found"


@pytest.mark.asyncio
async def test_header_name_case_insensitive(client: AsyncClient, session_headers):
    token = session_headers[HEADER]
    response = await client.get("/fish", headers={HEADER.lower(): token})
    assert response.status_code == 200
    assert len(response.json()) == 4


@pytest.mark.asyncio
async def test_expired_session_returns_400(client: AsyncClient, session_headers, clock):
    """Session stops resolving at its expiry, even before it is reaped."""
    clock.advance(hours=1)
    response = await client.get("/fish", headers=session_headers)
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_reaped_session_fish_gone(
    client: AsyncClient, store: Store, session_headers, clock
):
    """After reaping, the session's fish are not reachable from any scope."""
    fish_ids = [f["id"] for f in (await client.get("/fish", headers=session_headers)).json()]
    clock.advance(hours=2)
    await store.reap_expired_sessions()

    assert (await client.get("/fish", headers=session_headers)).status_code == 400
    other = {HEADER: (await client.post("/login")).json()["id"]}
    for fish_id in fish_ids:
        assert (await client.get(f"/fish/{fish_id}")).status_code == 404
        assert (await client.get(f"/fish/{fish_id}", headers=other)).status_code == 404
