"""Integration tests for subgroup create, rename and delete."""

import pytest
from httpx import AsyncClient

SUBGROUPS = "/products/sorted/groups/Addresses/subgroups"


@pytest.mark.asyncio
async def test_add_subgroup_assigns_next_id(client: AsyncClient, seeded_db: None) -> None:
    resp = await client.post(
        SUBGROUPS,
        json={
            "subgroupname": "Tertiary Addresses",
            "labels": [{"label": "PO Box", "description": "Postal box", "displayName": "PO Box"}],
        },
    )
    assert resp.status_code == 201
    assert resp.json() == {
        "message": "Subgroup added successfully",
        "subgroup": {
            "subgroupid": 3,
            "subgroupname": "Tertiary Addresses",
            "labels": [{"label": "PO Box", "description": "Postal box", "displayName": "PO Box"}],
        },
    }


@pytest.mark.asyncio
async def test_add_subgroup_to_group_without_subgroups(
    client: AsyncClient, seeded_db: None
) -> None:
    await client.post("/products/sorted/groups", json={"groupname": "Phones"})

    resp = await client.post(
        "/products/sorted/groups/phones/subgroups", json={"subgroupname": "Mobile"}
    )
    assert resp.status_code == 201
    assert resp.json()["subgroup"]["subgroupid"] == 1


@pytest.mark.asyncio
async def test_add_subgroup_never_reuses_deleted_id(client: AsyncClient, seeded_db: None) -> None:
    resp = await client.delete(f"{SUBGROUPS}/Secondary Addresses")
    assert resp.status_code == 200

    resp = await client.post(SUBGROUPS, json={"subgroupname": "Secondary Addresses"})
    assert resp.json()["subgroup"]["subgroupid"] == 3


@pytest.mark.asyncio
async def test_add_duplicate_subgroup_returns_409(client: AsyncClient, seeded_db: None) -> None:
    resp = await client.post(SUBGROUPS, json={"subgroupname": "PRIMARY ADDRESSES"})
    assert resp.status_code == 409
    assert resp.json()["code"] == "conflict"


@pytest.mark.asyncio
async def test_add_subgroup_without_name_returns_400(client: AsyncClient, seeded_db: None) -> None:
    resp = await client.post(SUBGROUPS, json={"labels": []})
    assert resp.status_code == 400
    assert resp.json() == {"code": "invalid_body", "message": "subgroupname is required"}


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "path, code",
    [
        ("/products/missing/groups/Addresses/subgroups", "product_not_found"),
        ("/products/sorted/groups/Phones/subgroups", "group_not_found"),
    ],
    ids=["product", "group"],
)
async def test_add_subgroup_not_found(
    client: AsyncClient, seeded_db: None, path: str, code: str
) -> None:
    resp = await client.post(path, json={"subgroupname": "Other"})
    assert resp.status_code == 404
    assert resp.json()["code"] == code


@pytest.mark.asyncio
async def test_rename_subgroup(client: AsyncClient, seeded_db: None) -> None:
    resp = await client.put(
        f"{SUBGROUPS}/primary addresses", json={"newSubgroupName": "Main Addresses"}
    )
    assert resp.status_code == 200
    body = resp.json()
    assert body["message"] == "Subgroup name updated successfully"
    subgroup = body["product"]["groups"][0]["subgroups"][0]
    assert subgroup["subgroupid"] == 1
    assert subgroup["subgroupname"] == "Main Addresses"
    assert subgroup["labels"][0]["label"] == "Firm Address"


@pytest.mark.asyncio
async def test_rename_subgroup_to_sibling_name_returns_409(
    client: AsyncClient, seeded_db: None
) -> None:
    resp = await client.put(
        f"{SUBGROUPS}/Primary Addresses", json={"newSubgroupName": "secondary addresses"}
    )
    assert resp.status_code == 409


@pytest.mark.asyncio
async def test_rename_subgroup_without_name_returns_400(
    client: AsyncClient, seeded_db: None
) -> None:
    resp = await client.put(f"{SUBGROUPS}/Primary Addresses", json={})
    assert resp.status_code == 400
    assert resp.json()["message"] == "newSubgroupName is required"


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "path, code",
    [
        ("/products/missing/groups/Nope/subgroups/Nope", "product_not_found"),
        ("/products/sorted/groups/Nope/subgroups/Nope", "group_not_found"),
        ("/products/sorted/groups/Addresses/subgroups/Nope", "subgroup_not_found"),
    ],
    ids=["product", "group", "subgroup"],
)
async def test_rename_subgroup_reports_first_missing_segment(
    client: AsyncClient, seeded_db: None, path: str, code: str
) -> None:
    resp = await client.put(path, json={"newSubgroupName": "Other"})
    assert resp.status_code == 404
    assert resp.json()["code"] == code


@pytest.mark.asyncio
async def test_delete_subgroup(client: AsyncClient, seeded_db: None) -> None:
    resp = await client.delete(f"{SUBGROUPS}/PRIMARY ADDRESSES")
    assert resp.status_code == 200
    body = resp.json()
    assert body["message"] == "Subgroup deleted successfully"
    assert [s["subgroupname"] for s in body["product"]["groups"][0]["subgroups"]] == [
        "Secondary Addresses"
    ]


@pytest.mark.asyncio
async def test_delete_missing_subgroup_returns_404(client: AsyncClient, seeded_db: None) -> None:
    resp = await client.delete(f"{SUBGROUPS}/Nope")
    assert resp.status_code == 404
    assert resp.json() == {"code": "subgroup_not_found", "message": "Subgroup 'Nope' not found"}
