"""Integration tests for the equipment inventory and loan endpoints."""

import uuid

import pytest
from fastapi.encoders import jsonable_encoder
from tests.factories import EquipmentFactory, LoanFactory, MemberFactory


@pytest.fixture
def member(app):
    return app.state.club.members.add_member(**MemberFactory.payload(name="Nina Costa"))


async def _create_item(client, **overrides):
    response = await client.post(
        "/api/v1/equipment", json=jsonable_encoder(EquipmentFactory.payload(**overrides))
    )
    assert response.status_code == 201, response.text
    return response.json()


async def _lend(client, item, member, **overrides):
    return await client.post(
        "/api/v1/equipment/loans",
        json=jsonable_encoder(LoanFactory.payload(item["id"], member.id, **overrides)),
    )


@pytest.mark.asyncio
@pytest.mark.integration
async def test_create_equipment_schedules_maintenance(client):
    item = await _create_item(client, category="net", purchase_date="2024-03-01")

    assert item["available_quantity"] == 5
    assert item["last_maintenance"] == "2024-03-01"
    assert item["next_maintenance"] == "2024-05-30"
    assert item["needs_maintenance"] is False


@pytest.mark.asyncio
@pytest.mark.integration
async def test_loan_lifecycle(client, member):
    item = await _create_item(client)

    response = await _lend(client, item, member, quantity=3)
    assert response.status_code == 201, response.text
    loan = response.json()
    assert loan["member_name"] == "Nina Costa"
    assert loan["display_status"] == "active"

    response = await client.get(f"/api/v1/equipment/{item['id']}")
    assert response.json()["available_quantity"] == 2

    response = await _lend(client, item, member, quantity=3)
    assert response.status_code == 409

    response = await client.post(f"/api/v1/equipment/loans/{loan['id']}/return")
    assert response.status_code == 200
    assert response.json()["status"] == "returned"
    assert response.json()["actual_return_date"] == "2024-03-10"

    response = await client.get(f"/api/v1/equipment/{item['id']}")
    assert response.json()["available_quantity"] == 5

    response = await client.post(f"/api/v1/equipment/loans/{loan['id']}/return")
    assert response.status_code == 409


@pytest.mark.asyncio
@pytest.mark.integration
async def test_delete_with_active_loan_is_409(client, member):
    item = await _create_item(client)
    await _lend(client, item, member)

    response = await client.delete(f"/api/v1/equipment/{item['id']}")
    assert response.status_code == 409

    response = await client.get("/api/v1/equipment")
    assert len(response.json()) == 1


@pytest.mark.asyncio
@pytest.mark.integration
async def test_overdue_loans_filter(client, clock, member):
    item = await _create_item(client)
    await _lend(client, item, member, expected_return_date="2024-03-17")
    await _lend(client, item, member, expected_return_date="2024-03-24")

    clock.advance(days=9)

    response = await client.get("/api/v1/equipment/loans", params={"overdue": True})
    [overdue] = response.json()
    assert overdue["expected_return_date"] == "2024-03-17"
    assert overdue["display_status"] == "overdue"
    # Stored status stays active; overdue is derived
    assert overdue["status"] == "active"
    assert overdue["overdue_days"] == 2

    response = await client.get("/api/v1/equipment/stats")
    assert response.json()["overdue_loans"] == 1
    assert response.json()["active_loans"] == 2

    response = await client.get(
        "/api/v1/equipment/loans", params={"member_id": str(member.id), "active": True}
    )
    assert len(response.json()) == 2


@pytest.mark.asyncio
@pytest.mark.integration
async def test_quantity_cannot_drop_below_loaned(client, member):
    item = await _create_item(client)
    await _lend(client, item, member, quantity=4)

    response = await client.patch(f"/api/v1/equipment/{item['id']}", json={"quantity": 3})
    assert response.status_code == 409

    response = await client.patch(f"/api/v1/equipment/{item['id']}", json={"quantity": 6})
    assert response.json()["available_quantity"] == 2


@pytest.mark.asyncio
@pytest.mark.integration
async def test_maintenance_due_and_done(client, clock):
    item = await _create_item(client)

    clock.advance(days=21)
    response = await client.get("/api/v1/equipment", params={"needs_maintenance": True})
    assert [i["id"] for i in response.json()] == [item["id"]]

    response = await client.post(f"/api/v1/equipment/{item['id']}/maintenance")
    assert response.json()["last_maintenance"] == "2024-03-31"
    assert response.json()["needs_maintenance"] is False


@pytest.mark.asyncio
@pytest.mark.integration
async def test_loan_of_unknown_item_is_404(client, member):
    response = await _lend(client, {"id": str(uuid.uuid4())}, member)

    assert response.status_code == 404
