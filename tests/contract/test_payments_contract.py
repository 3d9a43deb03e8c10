"""
Contract tests for payment responses.

These tests validate that the response SHAPE matches what consumers
expect. They don't test business logic, only that the JSON keys and
types are correct.
"""

import pytest
from tests.factories import MemberFactory


@pytest.fixture
def member(app):
    return app.state.club.members.add_member(**MemberFactory.payload())


@pytest.mark.asyncio
@pytest.mark.contract
async def test_payment_list_contract(client, member):
    """
    GET /api/v1/payments response contract.

    Consumers: payments table, overdue badge (status, is_overdue, days_overdue)
    """
    response = await client.get("/api/v1/payments")
    assert response.status_code == 200
    [data] = response.json()

    required_fields = [
        "id",
        "member_id",
        "amount",
        "due_date",
        "status",
        "payment_date",
        "payment_method",
        "notes",
        "is_overdue",
        "days_overdue",
    ]
    for field in required_fields:
        assert field in data, (
            f"Missing required contract field '{field}' in /api/v1/payments response."
        )

    assert isinstance(data["amount"], str)
    assert isinstance(data["is_overdue"], bool)
    assert isinstance(data["days_overdue"], int)
    assert data["status"] in {"pending", "paid", "overdue", "cancelled"}


@pytest.mark.asyncio
@pytest.mark.contract
async def test_financial_stats_contract(client, member):
    """
    GET /api/v1/payments/stats response contract.

    Consumers: dashboard summary cards, payments export ``stats`` block
    """
    response = await client.get("/api/v1/payments/stats")
    assert response.status_code == 200
    data = response.json()

    required_fields = [
        "total_revenue",
        "pending_revenue",
        "overdue_revenue",
        "total_payments",
        "paid_payments",
        "pending_payments",
        "overdue_payments",
        "cancelled_payments",
        "payment_rate",
    ]
    for field in required_fields:
        assert field in data, f"Missing contract field '{field}' in payment stats."

    assert isinstance(data["payment_rate"], float)


@pytest.mark.asyncio
@pytest.mark.contract
async def test_payments_export_contract(client, member):
    """
    GET /api/v1/data/export/payments document contract.

    Consumers: POST /api/v1/data/import/payments
    """
    response = await client.get("/api/v1/data/export/payments")
    data = response.json()

    for field in ["payments", "stats", "generated_at"]:
        assert field in data, f"Missing contract field '{field}' in payments export."
    assert data["stats"]["overdue_payments"] == 1
