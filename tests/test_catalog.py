"""Tests for the catalog store and product endpoints."""

from decimal import Decimal

import pytest
from httpx import AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from storefront.core.exceptions import Forbidden, NotFound, ValidationError
from storefront.db.repositories import ProductRepository
from storefront.db.seed import SAMPLE_PRODUCTS, seed_admin, seed_sample_catalog
from storefront.schemas.token import Identity
from storefront.services.catalog import CatalogStore

ADMIN = Identity(id="admin-1", email="admin@example.com", role="admin", name="Admin")
SHOPPER = Identity(id="user-1", email="john@example.com", role="user", name="John")


@pytest.fixture
def catalog(db_session: AsyncSession) -> CatalogStore:
    return CatalogStore(ProductRepository(db_session))


async def _seed(client: AsyncClient, headers: dict) -> list[dict]:
    payloads = [
        {"name": "Pioneer DJ DDJ-400", "price": 299.99, "category": "Controllers",
         "brand": "Pioneer DJ", "model": "DDJ-400", "stock": 15},
        {"name": "Technics Turntable", "price": 999.99, "category": "Turntables",
         "brand": "Technics", "model": "SL-1200MK7", "stock": 8},
        {"name": "Shure Microphone", "price": 399.99, "category": "Microphones",
         "brand": "Shure", "model": "SM7B", "stock": 12},
    ]
    created = []
    for body in payloads:
        resp = await client.post("/api/products", json=body, headers=headers)
        assert resp.status_code == 201, resp.text
        created.append(resp.json())
    return created


# ── Service level ───────────────────────────────────────────────────
@pytest.mark.asyncio
async def test_create_requires_admin(catalog: CatalogStore):
    with pytest.raises(Forbidden):
        await catalog.create({"name": "X", "price": 1}, SHOPPER)


@pytest.mark.asyncio
async def test_create_parses_numeric_strings(catalog: CatalogStore):
    product = await catalog.create({"name": "Cable", "price": "12.50", "stock": "4"}, ADMIN)
    assert product.price == Decimal("12.50")
    assert product.stock == 4


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "data",
    [
        {"price": 10},
        {"name": "No price"},
        {"name": "Bad", "price": "abc"},
        {"name": "Neg", "price": -1},
        {"name": "Neg stock", "price": 1, "stock": -3},
        {"name": "Frac stock", "price": 1, "stock": 2.5},
        {"name": "Bool stock", "price": 1, "stock": True},
        {"name": "Bool price", "price": True},
        {"name": "   ", "price": 1},
    ],
)
async def test_create_rejects_malformed_input(catalog: CatalogStore, data):
    with pytest.raises(ValidationError) as exc_info:
        await catalog.create(data, ADMIN)
    assert exc_info.value.details


@pytest.mark.asyncio
async def test_update_never_coerces_bad_numbers(catalog: CatalogStore):
    product = await catalog.create({"name": "Mixer", "price": 100, "stock": 3}, ADMIN)
    for patch in ({"stock": -1}, {"price": -0.01}, {"price": "abc"}, {"stock": "lots"}, {"stock": True}):
        with pytest.raises(ValidationError):
            await catalog.update(product.id, patch, ADMIN)
    unchanged = await catalog.get(product.id)
    assert unchanged.price == Decimal("100.00")
    assert unchanged.stock == 3


@pytest.mark.asyncio
async def test_update_merges_fields(catalog: CatalogStore):
    product = await catalog.create({"name": "Mixer", "price": 100, "stock": 3}, ADMIN)
    updated = await catalog.update(product.id, {"stock": 7, "price": None, "category": "Mixers"}, ADMIN)
    assert updated.stock == 7
    assert updated.price == Decimal("100.00")
    assert updated.category == "Mixers"
    assert updated.name == "Mixer"


@pytest.mark.asyncio
async def test_update_blank_text_clears_field(catalog: CatalogStore):
    product = await catalog.create({"name": "Mixer", "price": 100, "category": "Mixers"}, ADMIN)
    updated = await catalog.update(product.id, {"category": "   ", "brand": "  Allen & Heath "}, ADMIN)
    assert updated.category is None
    assert updated.brand == "Allen & Heath"
    assert await catalog.categories() == []


@pytest.mark.asyncio
async def test_update_and_delete_require_admin(catalog: CatalogStore):
    product = await catalog.create({"name": "Mixer", "price": 100}, ADMIN)
    with pytest.raises(Forbidden):
        await catalog.update(product.id, {"price": 1}, SHOPPER)
    with pytest.raises(Forbidden):
        await catalog.delete(product.id, SHOPPER)


@pytest.mark.asyncio
async def test_missing_product(catalog: CatalogStore):
    with pytest.raises(NotFound):
        await catalog.get("missing")
    with pytest.raises(NotFound):
        await catalog.update("missing", {"price": 1}, ADMIN)
    with pytest.raises(NotFound):
        await catalog.delete("missing", ADMIN)


@pytest.mark.asyncio
async def test_inverted_price_range_rejected(catalog: CatalogStore):
    with pytest.raises(ValidationError):
        await catalog.list({"min_price": 10, "max_price": 5})


@pytest.mark.asyncio
async def test_sample_catalog_seeding(db_session: AsyncSession, catalog: CatalogStore):
    assert await seed_sample_catalog(db_session) == len(SAMPLE_PRODUCTS)
    assert await seed_sample_catalog(db_session) == 0
    assert len(await catalog.list()) == len(SAMPLE_PRODUCTS)


@pytest.mark.asyncio
async def test_seed_admin_is_idempotent(db_session: AsyncSession):
    admin = await seed_admin(db_session)
    assert admin is not None and admin.role == "admin"
    assert await seed_admin(db_session) is None


# ── HTTP surface ────────────────────────────────────────────────────
@pytest.mark.asyncio
async def test_list_products_in_insertion_order(async_client: AsyncClient, admin_headers):
    created = await _seed(async_client, admin_headers)
    resp = await async_client.get("/api/products")
    assert resp.status_code == 200
    assert [p["id"] for p in resp.json()] == [p["id"] for p in created]
    assert resp.json()[0]["price"] == 299.99


@pytest.mark.asyncio
async def test_search_is_case_insensitive_across_fields(async_client: AsyncClient, admin_headers):
    await _seed(async_client, admin_headers)
    by_model = await async_client.get("/api/products", params={"search": "sm7b"})
    assert [p["name"] for p in by_model.json()] == ["Shure Microphone"]
    by_brand = await async_client.get("/api/products", params={"search": "TECHNICS"})
    assert [p["name"] for p in by_brand.json()] == ["Technics Turntable"]
    by_category = await async_client.get("/api/products", params={"category": "controllers"})
    assert len(by_category.json()) == 1


@pytest.mark.asyncio
async def test_price_range_is_inclusive(async_client: AsyncClient, admin_headers):
    await _seed(async_client, admin_headers)
    resp = await async_client.get("/api/products", params={"minPrice": 299.99, "maxPrice": 399.99})
    names = sorted(p["name"] for p in resp.json())
    assert names == ["Pioneer DJ DDJ-400", "Shure Microphone"]


@pytest.mark.asyncio
async def test_sort_by_price(async_client: AsyncClient, admin_headers):
    await _seed(async_client, admin_headers)
    low = await async_client.get("/api/products", params={"sort": "price-low"})
    assert [p["price"] for p in low.json()] == [299.99, 399.99, 999.99]
    high = await async_client.get("/api/products", params={"sort": "price-high"})
    assert [p["price"] for p in high.json()] == [999.99, 399.99, 299.99]


@pytest.mark.asyncio
async def test_categories_and_brands(async_client: AsyncClient, admin_headers):
    await _seed(async_client, admin_headers)
    cats = await async_client.get("/api/products/categories")
    assert cats.json() == ["Controllers", "Microphones", "Turntables"]
    brands = await async_client.get("/api/products/brands")
    assert brands.json() == ["Pioneer DJ", "Shure", "Technics"]


@pytest.mark.asyncio
async def test_create_validation_error_shape(async_client: AsyncClient, admin_headers):
    resp = await async_client.post(
        "/api/products", json={"name": "Bad", "price": "abc"}, headers=admin_headers
    )
    assert resp.status_code == 400
    body = resp.json()
    assert body["error"] == "Validation failed"
    assert any(d.startswith("price") for d in body["details"])


@pytest.mark.asyncio
async def test_get_update_delete_roundtrip(async_client: AsyncClient, admin_headers):
    created = (await _seed(async_client, admin_headers))[0]
    pid = created["id"]

    resp = await async_client.put(
        f"/api/products/{pid}", json={"price": "249.5", "stock": 2}, headers=admin_headers
    )
    assert resp.status_code == 200
    assert resp.json()["price"] == 249.5
    assert resp.json()["stock"] == 2

    resp = await async_client.delete(f"/api/products/{pid}", headers=admin_headers)
    assert resp.status_code == 200
    assert resp.json()["id"] == pid

    resp = await async_client.get(f"/api/products/{pid}")
    assert resp.status_code == 404
    assert resp.json() == {"error": "Product not found"}


@pytest.mark.asyncio
async def test_health_reports_catalog_mode(async_client: AsyncClient):
    resp = await async_client.get("/api/health")
    assert resp.status_code == 200
    assert resp.json() == {"status": "ok", "database": True, "sample_catalog": False}
