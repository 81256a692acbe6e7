import pytest
from fastapi import status
from httpx import AsyncClient
from httpx._transports.asgi import ASGITransport

from community_registry.main import app


@pytest.fixture
async def plain_client():
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client


@pytest.mark.asyncio
async def test_health_check(plain_client):
    response = await plain_client.get("/api/v1/health")
    assert response.status_code == status.HTTP_200_OK
    assert response.json() == {"status": "ok"}


@pytest.mark.asyncio
async def test_unknown_route(plain_client):
    response = await plain_client.get("/api/v1/nowhere")
    assert response.status_code == status.HTTP_404_NOT_FOUND
