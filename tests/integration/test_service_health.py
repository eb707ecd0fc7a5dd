"""Integration tests for health endpoints and request middleware."""

import pytest
from httpx import AsyncClient

from shopcore.infrastructure.api.app import create_app


@pytest.mark.asyncio
async def test_health(client: AsyncClient):
    res = await client.get("/health")

    assert res.status_code == 200
    assert res.json()["status"] == "OK"
    assert res.json()["service"] == "ShopCore"


@pytest.mark.asyncio
async def test_correlation_id_is_echoed(client: AsyncClient):
    res = await client.get("/health", headers={"X-Correlation-ID": "req-123"})

    assert res.headers["X-Correlation-ID"] == "req-123"


@pytest.mark.asyncio
async def test_correlation_id_is_generated(client: AsyncClient):
    res = await client.get("/health")

    assert res.headers["X-Correlation-ID"]


@pytest.mark.asyncio
async def test_malformed_json_body(client: AsyncClient):
    res = await client.post(
        "/login", content=b"{not json", headers={"Content-Type": "application/json"}
    )

    assert res.status_code == 400
    assert res.json()["error"] == "Validation failed"


def test_app_registers_every_route():
    app = create_app()

    routes = {
        (route.path, method)
        for route in app.routes
        for method in getattr(route, "methods", None) or ()
    }

    assert ("/api-keys/{key_id}", "DELETE") in routes
    assert ("/login", "POST") in routes
    assert ("/webhooks/shopify-sales", "POST") in routes


@pytest.mark.asyncio
@pytest.mark.parametrize("supplied", ["x" * 65, "has spaces", "<script>", "a;b"])
async def test_unusable_correlation_id_is_replaced(client: AsyncClient, supplied):
    res = await client.get("/health", headers={"X-Correlation-ID": supplied})

    assert res.headers["X-Correlation-ID"] != supplied
    assert res.headers["X-Correlation-ID"].startswith("cid_")


@pytest.mark.asyncio
async def test_longest_accepted_correlation_id(client: AsyncClient):
    supplied = "a" * 64

    res = await client.get("/health", headers={"X-Correlation-ID": supplied})

    assert res.headers["X-Correlation-ID"] == supplied
