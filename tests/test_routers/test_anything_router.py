import json

import pytest
from httpx import AsyncClient


@pytest.mark.asyncio
async def test_anything_echoes_json(client: AsyncClient):
    response = await client.post(
        "/anything/some/path?a=1&b=2&a=3",
        json={"fish": "Nemo"},
        headers={"X-Test": "yes"},
    )
    assert response.status_code == 200
    data = response.json()
    assert data["method"] == "POST"
    assert data["url"] == "/anything/some/path?a=1&b=2&a=3"
    assert data["args"] == {"a": ["1", "3"], "b": "2"}
    assert data["headers"]["x-test"] == "yes"
    assert data["json"] == {"fish": "Nemo"}
    assert json.loads(data["data"]) == {"fish": "Nemo"}


@pytest.mark.asyncio
async def test_anything_non_json_body(client: AsyncClient):
    response = await client.put("/anything", content=b"hello \xff")
    assert response.status_code == 200
    data = response.json()
    assert data["method"] == "PUT"
    assert data["url"] == "/anything"
    assert data["args"] == {}
    assert data["data"] == "hello \ufffd"
    assert data["json"] is None
