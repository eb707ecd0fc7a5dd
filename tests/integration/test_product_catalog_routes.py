"""Integration tests for product routes."""

import httpx
import pytest
from httpx import AsyncClient

from shopcore.core.config import Settings
from shopcore.domain.entities import RoleTier
from shopcore.infrastructure.api.app import app
from shopcore.infrastructure.auth import api_key_service
from shopcore.infrastructure.commerce import ShopifyClient
from shopcore.infrastructure.persistence.models import ProductModel
from shopcore.infrastructure.persistence.repositories import ProductRepository


@pytest.fixture
def shopify_store():
    """Point the app at a fake Shopify store for one test."""
    requests = []

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        return httpx.Response(
            201,
            json={"product": {"id": 7001, "title": "Desk Lamp", "variants": [{"price": "19.90"}]}},
        )

    original = app.state.shopify_client
    app.state.shopify_client = ShopifyClient(
        Settings(shopify_store_domain="example-store.myshopify.com", shopify_admin_api_token="shpat_x"),
        transport=httpx.MockTransport(handler),
    )
    yield requests
    app.state.shopify_client = original


async def add_product(session, owner, name="Desk Lamp", sales_count=0, shopify_id=None):
    return await ProductRepository(session).create(
        ProductModel(
            shopify_id=shopify_id or f"mock_{name.replace(' ', '_')}",
            name=name,
            price=10.0,
            sales_count=sales_count,
            created_by=owner.id,
        )
    )


@pytest.mark.asyncio
async def test_create_product_in_mock_mode(client: AsyncClient, regular_user, auth_headers):
    res = await client.post(
        "/products", headers=auth_headers(regular_user), json={"name": "Desk Lamp", "price": 19.9}
    )

    assert res.status_code == 201
    data = res.json()
    assert data["mock"] is True
    assert data["message"] == "Product created in DB only (Shopify mock mode)"
    assert data["product"]["shopify_id"].startswith("mock_")
    assert data["product"]["sales_count"] == 0
    assert data["product"]["created_by"] == regular_user.id


@pytest.mark.asyncio
async def test_create_product_on_shopify(
    client: AsyncClient, regular_user, auth_headers, shopify_store
):
    res = await client.post(
        "/products", headers=auth_headers(regular_user), json={"name": "Desk Lamp", "price": 19.9}
    )

    assert res.status_code == 201
    data = res.json()
    assert "mock" not in data
    assert data["product"]["shopify_id"] == "7001"
    assert data["product"]["price"] == 19.9
    assert len(shopify_store) == 1


@pytest.mark.asyncio
async def test_shopify_failure_stores_nothing(
    client: AsyncClient, db_session, regular_user, auth_headers
):
    original = app.state.shopify_client
    app.state.shopify_client = ShopifyClient(
        Settings(shopify_store_domain="example-store.myshopify.com", shopify_admin_api_token="shpat_x"),
        transport=httpx.MockTransport(lambda request: httpx.Response(502, text="bad gateway")),
    )
    try:
        res = await client.post(
            "/products", headers=auth_headers(regular_user), json={"name": "Lamp", "price": 5}
        )
    finally:
        app.state.shopify_client = original

    assert res.status_code == 500
    assert res.json() == {"error": "Upstream service failure"}
    assert await ProductRepository(db_session).list_all() == []


@pytest.mark.asyncio
async def test_image_requires_premium(client: AsyncClient, regular_user, auth_headers):
    res = await client.post(
        "/products",
        headers=auth_headers(regular_user),
        json={"name": "Desk Lamp", "price": 19.9, "image_url": "https://cdn.example.com/lamp.png"},
    )

    assert res.status_code == 403
    assert res.json() == {"error": "Permission denied: Image upload requires PREMIUM role or higher"}


@pytest.mark.asyncio
async def test_premium_can_attach_image(client: AsyncClient, premium_user, auth_headers):
    res = await client.post(
        "/products",
        headers=auth_headers(premium_user),
        json={"name": "Desk Lamp", "price": 19.9, "image_url": "https://cdn.example.com/lamp.png"},
    )

    assert res.status_code == 201
    assert res.json()["product"]["image_url"] == "https://cdn.example.com/lamp.png"


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "payload,field",
    [
        ({"name": "Lamp", "price": 0}, "price"),
        ({"name": "Lamp", "price": -3}, "price"),
        ({"name": "L", "price": 3}, "name"),
        ({"name": "Lamp", "price": 3, "image_url": "not a url"}, "image_url"),
    ],
)
async def test_create_product_validation(
    client: AsyncClient, regular_user, auth_headers, payload, field
):
    res = await client.post("/products", headers=auth_headers(regular_user), json=payload)

    assert res.status_code == 400
    assert res.json()["details"][0]["field"] == field


@pytest.mark.asyncio
async def test_create_product_with_api_key(client: AsyncClient, db_session, regular_user):
    plaintext, _ = await api_key_service.create_api_key(
        db_session, user_id=regular_user.id, name="ci"
    )
    await db_session.commit()

    res = await client.post(
        "/products", headers={"x-api-key": plaintext}, json={"name": "Desk Lamp", "price": 5}
    )

    assert res.status_code == 201
    assert res.json()["product"]["created_by"] == regular_user.id


@pytest.mark.asyncio
async def test_banned_cannot_create_products(client: AsyncClient, banned_user, auth_headers):
    res = await client.post(
        "/products", headers=auth_headers(banned_user), json={"name": "Desk Lamp", "price": 5}
    )

    assert res.status_code == 403


@pytest.mark.asyncio
async def test_no_credentials_hint(client: AsyncClient):
    res = await client.get("/products")

    assert res.status_code == 401
    assert res.json() == {
        "error": "Authentication required",
        "hint": "Provide either Authorization: Bearer <jwt> or x-api-key: <api_key> header",
    }


@pytest.mark.asyncio
async def test_product_listings(
    client: AsyncClient, db_session, regular_user, premium_user, auth_headers
):
    await add_product(db_session, regular_user, "Mine")
    await add_product(db_session, premium_user, "Theirs")
    await db_session.commit()

    mine = await client.get("/my-products", headers=auth_headers(regular_user))
    everything = await client.get("/products", headers=auth_headers(regular_user))

    assert [p["name"] for p in mine.json()["products"]] == ["Mine"]
    assert everything.json()["count"] == 2


@pytest.mark.asyncio
async def test_bestsellers_ordering(client: AsyncClient, db_session, premium_user, auth_headers):
    await add_product(db_session, premium_user, "Slow", sales_count=1)
    await add_product(db_session, premium_user, "Fast", sales_count=9)
    await add_product(db_session, premium_user, "Middle", sales_count=4)
    await db_session.commit()

    res = await client.get("/my-bestsellers", headers=auth_headers(premium_user))

    assert res.status_code == 200
    assert [p["name"] for p in res.json()["bestsellers"]] == ["Fast", "Middle", "Slow"]
    assert res.json()["count"] == 3


@pytest.mark.asyncio
async def test_bestsellers_requires_capability(client: AsyncClient, regular_user, auth_headers):
    res = await client.get("/my-bestsellers", headers=auth_headers(regular_user))

    assert res.status_code == 403


@pytest.mark.asyncio
async def test_add_sale(client: AsyncClient, db_session, premium_user, auth_headers):
    product = await add_product(db_session, premium_user, "Desk Lamp", sales_count=2)
    await db_session.commit()

    res = await client.post(
        f"/products/{product.id}/add-sale", headers=auth_headers(premium_user), json={"quantity": 3}
    )

    assert res.status_code == 200
    data = res.json()
    assert data["success"] is True
    assert data["message"] == 'Added 3 sale(s) to product "Desk Lamp"'
    assert data["product"]["sales_count"] == 5


@pytest.mark.asyncio
@pytest.mark.parametrize("body", [None, {}, {"quantity": 0}, {"quantity": -4}])
async def test_add_sale_defaults_to_one(
    client: AsyncClient, db_session, premium_user, auth_headers, body
):
    product = await add_product(db_session, premium_user, "Desk Lamp")
    await db_session.commit()

    kwargs = {"json": body} if body is not None else {}
    res = await client.post(
        f"/products/{product.id}/add-sale", headers=auth_headers(premium_user), **kwargs
    )

    assert res.status_code == 200
    assert res.json()["product"]["sales_count"] == 1


@pytest.mark.asyncio
async def test_add_sale_to_someone_elses_product(
    client: AsyncClient, db_session, premium_user, user_factory, auth_headers
):
    other = await user_factory(RoleTier.PREMIUM)
    product = await add_product(db_session, other, "Not Mine")
    await db_session.commit()

    res = await client.post(
        f"/products/{product.id}/add-sale", headers=auth_headers(premium_user), json={"quantity": 1}
    )

    assert res.status_code == 403
    assert res.json() == {"error": "You can only add sales to your own products"}


@pytest.mark.asyncio
async def test_add_sale_unknown_product(client: AsyncClient, premium_user, auth_headers):
    res = await client.post("/products/9999/add-sale", headers=auth_headers(premium_user))

    assert res.status_code == 404
    assert res.json() == {"error": "Product not found"}
