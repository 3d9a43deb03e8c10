"""Integration tests for the members endpoints."""

import uuid

import pytest
from fastapi.encoders import jsonable_encoder
from tests.factories import MemberFactory


async def _create_member(client, **overrides):
    response = await client.post(
        "/api/v1/members", json=jsonable_encoder(MemberFactory.payload(**overrides))
    )
    assert response.status_code == 201, response.text
    return response.json()


@pytest.mark.asyncio
@pytest.mark.integration
async def test_health(client):
    response = await client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok"}
    assert "X-Request-ID" in response.headers


@pytest.mark.asyncio
@pytest.mark.integration
async def test_create_member_generates_current_obligation(client):
    member = await _create_member(client, name="Gabriela Alves", monthly_dues="75.5")

    assert member["monthly_dues"] == "75.50"

    response = await client.get("/api/v1/payments", params={"member_id": member["id"]})
    assert response.status_code == 200
    [payment] = response.json()
    assert payment["amount"] == "75.50"
    assert payment["due_date"] == "2024-03-05"


@pytest.mark.asyncio
@pytest.mark.integration
async def test_list_search_and_get(client):
    first = await _create_member(client, name="Helena Prado")
    await _create_member(client, name="Igor Matos")

    response = await client.get("/api/v1/members")
    assert len(response.json()) == 2

    response = await client.get("/api/v1/members", params={"q": "prado"})
    assert [m["id"] for m in response.json()] == [first["id"]]

    response = await client.get(f"/api/v1/members/{first['id']}")
    assert response.json()["name"] == "Helena Prado"


@pytest.mark.asyncio
@pytest.mark.integration
async def test_invalid_member_lists_every_field(client):
    response = await client.post(
        "/api/v1/members",
        json={"name": "J", "email": "broken", "monthly_dues": "0"},
    )

    assert response.status_code == 422
    body = response.json()
    assert body["error"] == "validation_error"
    fields = {message.split(":")[0] for message in body["errors"]}
    assert fields == {"name", "email", "monthly_dues"}


@pytest.mark.asyncio
@pytest.mark.integration
async def test_sub_cent_dues_are_422_and_leave_generation_working(client):
    response = await client.post(
        "/api/v1/members",
        json=jsonable_encoder(MemberFactory.payload(monthly_dues="0.004")),
    )

    assert response.status_code == 422
    assert response.json()["errors"][0].startswith("monthly_dues:")

    response = await client.get("/api/v1/members")
    assert response.json() == []

    member = await _create_member(client)
    response = await client.get("/api/v1/payments", params={"member_id": member["id"]})
    assert len(response.json()) == 1


@pytest.mark.asyncio
@pytest.mark.integration
async def test_duplicate_email_is_409(client):
    await _create_member(client, email="kai@volleyclub.com")

    response = await client.post(
        "/api/v1/members",
        json=jsonable_encoder(MemberFactory.payload(email="kai@volleyclub.com")),
    )

    assert response.status_code == 409
    assert response.json()["error"] == "conflict"


@pytest.mark.asyncio
@pytest.mark.integration
async def test_update_and_delete_member(client):
    member = await _create_member(client)

    response = await client.patch(
        f"/api/v1/members/{member['id']}", json={"position": "opposite"}
    )
    assert response.status_code == 200
    assert response.json()["position"] == "opposite"

    response = await client.delete(f"/api/v1/members/{member['id']}")
    assert response.status_code == 204

    response = await client.get(f"/api/v1/members/{member['id']}")
    assert response.status_code == 404


@pytest.mark.asyncio
@pytest.mark.integration
async def test_unknown_member_is_404(client):
    response = await client.get(f"/api/v1/members/{uuid.uuid4()}")

    assert response.status_code == 404
    assert response.json()["error"] == "not_found"


@pytest.mark.asyncio
@pytest.mark.integration
async def test_missing_user_header_is_401(client):
    response = await client.get("/api/v1/members", headers={"X-Club-User": ""})

    assert response.status_code == 401


@pytest.mark.asyncio
@pytest.mark.integration
async def test_viewer_can_read_but_not_edit(viewer_client):
    response = await viewer_client.get("/api/v1/members")
    assert response.status_code == 200

    response = await viewer_client.post(
        "/api/v1/members", json=jsonable_encoder(MemberFactory.payload())
    )
    assert response.status_code == 403
    assert response.json()["error"] == "permission_denied"
