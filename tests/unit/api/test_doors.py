"""Tests for /doors: create with allow-list, replace allow-list, deactivate, delete, validation."""

import pytest
from httpx import AsyncClient


@pytest.fixture
async def user_ids(async_client: AsyncClient):
    ids = []
    for name in ("Ada", "Grace"):
        ids.append((await async_client.post("/users", json={"full_name": name})).json()["id"])
    return ids


async def test_create_door_with_allow_list(async_client: AsyncClient, user_ids):
    r = await async_client.post(
        "/doors",
        json={"id": "3", "name": "Main entrance", "allowed_user_ids": [user_ids[1], user_ids[1]]},
    )
    assert r.status_code == 201
    data = r.json()
    assert data == {
        "id": "3",
        "name": "Main entrance",
        "location": None,
        "active": True,
        "allowed_user_ids": [user_ids[1]],
    }


async def test_create_door_rejects_unroutable_id(async_client: AsyncClient):
    for door_id in ("", "a.b", "3,4", "lab#1"):
        r = await async_client.post("/doors", json={"id": door_id})
        assert r.status_code == 422


async def test_create_duplicate_door_is_409(async_client: AsyncClient):
    assert (await async_client.post("/doors", json={"id": "3"})).status_code == 201
    r = await async_client.post("/doors", json={"id": "3"})
    assert r.status_code == 409


async def test_allow_list_with_unknown_user_is_404(async_client: AsyncClient):
    r = await async_client.post("/doors", json={"id": "3", "allowed_user_ids": [42]})
    assert r.status_code == 404
    assert "42" in r.json()["detail"]


async def test_patch_replaces_allow_list(async_client: AsyncClient, user_ids):
    await async_client.post("/doors", json={"id": "3", "allowed_user_ids": [user_ids[0]]})

    r = await async_client.patch("/doors/3", json={"allowed_user_ids": [user_ids[1]]})

    assert r.status_code == 200
    assert r.json()["allowed_user_ids"] == [user_ids[1]]
    got = await async_client.get("/doors/3")
    assert got.json()["allowed_user_ids"] == [user_ids[1]]


async def test_patch_deactivates_door_and_keeps_allow_list(async_client: AsyncClient, user_ids):
    await async_client.post("/doors", json={"id": "3", "allowed_user_ids": user_ids})

    r = await async_client.patch("/doors/3", json={"active": False, "location": "Lobby"})

    assert r.status_code == 200
    assert r.json()["active"] is False
    assert r.json()["location"] == "Lobby"
    assert r.json()["allowed_user_ids"] == user_ids


async def test_patch_requires_a_field(async_client: AsyncClient):
    await async_client.post("/doors", json={"id": "3"})
    assert (await async_client.patch("/doors/3", json={})).status_code == 422
    assert (await async_client.patch("/doors/3", json={"allowed_user_ids": None})).status_code == 422


async def test_list_and_delete_doors(async_client: AsyncClient):
    await async_client.post("/doors", json={"id": "7"})
    await async_client.post("/doors", json={"id": "3"})

    assert [d["id"] for d in (await async_client.get("/doors")).json()] == ["3", "7"]

    r = await async_client.delete("/doors/3")
    assert r.status_code == 200
    assert [d["id"] for d in (await async_client.get("/doors")).json()] == ["7"]
    assert (await async_client.get("/doors/3")).status_code == 404
