"""Integration tests for seeding, product reads, health and the error envelope."""

from collections.abc import AsyncIterator

import pytest
from httpx import AsyncClient
from sqlalchemy.exc import OperationalError

from catalog_api.db.session import get_db
from catalog_api.main import app


@pytest.mark.asyncio
async def test_initialize_products_seeds_starter_catalog(client: AsyncClient) -> None:
    resp = await client.post("/initialize-products")
    assert resp.status_code == 201
    assert resp.json() == {"message": "Products added successfully"}

    products = (await client.get("/products")).json()
    assert [p["productname"] for p in products] == ["sorted", "tax-sorted", "auditomation"]
    assert [p["productid"] for p in products] == [1, 2, 3]

    tax_dates = products[1]["groups"][1]
    assert tax_dates["groupname"] == "Dates"
    assert [s["subgroupname"] for s in tax_dates["subgroups"]] == ["Standard Dates", "Fiscal Dates"]
    fiscal_labels = [label["label"] for label in tax_dates["subgroups"][1]["labels"]]
    assert fiscal_labels == ["${END_DATE}", "${FY}", "${YEAR_END_DATE_IN_WORDS}"]


@pytest.mark.asyncio
async def test_initialize_products_twice_returns_400(client: AsyncClient) -> None:
    assert (await client.post("/initialize-products")).status_code == 201

    resp = await client.post("/initialize-products")
    assert resp.status_code == 400
    assert resp.json() == {"code": "already_initialized", "message": "Products already exist in DB"}


@pytest.mark.asyncio
async def test_initialize_products_refused_when_data_exists(
    client: AsyncClient, seeded_db: None
) -> None:
    resp = await client.post("/initialize-products")
    assert resp.status_code == 400
    assert len((await client.get("/products")).json()) == 2


@pytest.mark.asyncio
async def test_seeded_ids_continue_after_seed(client: AsyncClient) -> None:
    await client.post("/initialize-products")

    resp = await client.post("/products/sorted/groups", json={"groupname": "Phones"})
    assert resp.json()["group"]["groupid"] == 3


@pytest.mark.asyncio
async def test_list_products_empty_database(client: AsyncClient) -> None:
    resp = await client.get("/products")
    assert resp.status_code == 200
    assert resp.json() == []


@pytest.mark.asyncio
async def test_get_product_returns_full_tree(client: AsyncClient, seeded_db: None) -> None:
    resp = await client.get("/products/sorted")
    assert resp.status_code == 200
    body = resp.json()

    assert body["productid"] == 1
    assert body["productname"] == "sorted"
    addresses = body["groups"][0]
    assert addresses == {
        "groupid": 1,
        "groupname": "Addresses",
        "subgroups": [
            {
                "subgroupid": 1,
                "subgroupname": "Primary Addresses",
                "labels": [
                    {
                        "label": "Firm Address",
                        "description": "Firm postal address",
                        "displayName": "Firm Address",
                    }
                ],
            },
            {"subgroupid": 2, "subgroupname": "Secondary Addresses", "labels": []},
        ],
        "labels": [{"label": "Address 1", "description": "d1", "displayName": ""}],
    }


@pytest.mark.asyncio
async def test_get_product_name_is_case_insensitive(client: AsyncClient, seeded_db: None) -> None:
    resp = await client.get("/products/SORTED")
    assert resp.status_code == 200
    assert resp.json()["productname"] == "sorted"


@pytest.mark.asyncio
async def test_get_missing_product_returns_404(client: AsyncClient, seeded_db: None) -> None:
    resp = await client.get("/products/missing")
    assert resp.status_code == 404
    assert resp.json() == {"code": "product_not_found", "message": "Product 'missing' not found"}


@pytest.mark.asyncio
async def test_health(client: AsyncClient) -> None:
    resp = await client.get("/health")
    assert resp.status_code == 200
    assert resp.json() == {"status": "ok"}


@pytest.mark.asyncio
async def test_request_id_is_echoed(client: AsyncClient) -> None:
    resp = await client.get("/products", headers={"X-Request-ID": "req-123"})
    assert resp.headers["X-Request-ID"] == "req-123"

    generated = await client.get("/products")
    assert generated.headers["X-Request-ID"]


class _UnavailableSession:
    async def execute(self, *args: object, **kwargs: object) -> None:
        raise OperationalError("SELECT", {}, Exception("connection refused"))


@pytest.mark.asyncio
async def test_storage_failure_returns_500_with_driver_message(client: AsyncClient) -> None:
    async def broken_db() -> AsyncIterator[_UnavailableSession]:
        yield _UnavailableSession()

    app.dependency_overrides[get_db] = broken_db

    resp = await client.get("/products")
    assert resp.status_code == 500
    assert resp.json() == {"code": "storage_error", "message": "connection refused"}
