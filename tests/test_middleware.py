import logging

import pytest
from httpx import ASGITransport, AsyncClient

from shoal.core.middleware import session_digest
from shoal.dependencies import get_store
from shoal.main import app


class BrokenStore:
    async def create_session(self):
        raise OSError("disk I/O error")


@pytest.mark.asyncio
async def test_request_id_in_response():
    """All responses include X-Request-ID header."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        response = await client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "ok"
    assert "X-Request-ID" in response.headers
    # UUID format: 8-4-4-4-12
    request_id = response.headers["X-Request-ID"]
    assert len(request_id) == 36


@pytest.mark.asyncio
async def test_404_returns_structured_json():
    """Non-existent endpoint returns structured JSON error with request_id."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        response = await client.get("/nonexistent")
    assert response.status_code == 404
    data = response.json()
    assert data["error"] is True
    assert data["status_code"] == 404
    assert data["request_id"] == response.headers["X-Request-ID"]


@pytest.mark.asyncio
async def test_root_redirects_to_docs():
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        response = await client.get("/")
    assert response.status_code == 307
    assert response.headers["location"] == "/docs"


@pytest.mark.asyncio
async def test_storage_fault_returns_generic_500(caplog):
    """Internal errors hide their detail from the client and log it instead."""
    app.dependency_overrides[get_store] = lambda: BrokenStore()
    transport = ASGITransport(app=app, raise_app_exceptions=False)
    try:
        with caplog.at_level(logging.ERROR, logger="shoal"):
            async with AsyncClient(transport=transport, base_url="http://test") as client:
                response = await client.post("/login")
    finally:
        app.dependency_overrides.clear()

    assert response.status_code == 500
    data = response.json()
    assert data["detail"] == "Internal server error"
    assert "disk I/O error" not in response.text
    assert "disk I/O error" in caplog.text


@pytest.mark.asyncio
async def test_access_log_hashes_session(client: AsyncClient, session_headers, caplog):
    """Access log records a hash of the session token, never the token."""
    token = next(iter(session_headers.values()))
    with caplog.at_level(logging.INFO, logger="shoal.access"):
        await client.get("/fish", headers=session_headers)
        await client.get("/fish")
    assert f"scope=session:{session_digest(token)}" in caplog.text
    assert "scope=template" in caplog.text
    assert "GET /fish -> 200" in caplog.text
    assert token not in caplog.text
