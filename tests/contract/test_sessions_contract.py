"""
Contract tests for training session and attendance responses.
"""

import pytest
from tests.factories import MemberFactory, SessionFactory


@pytest.mark.asyncio
@pytest.mark.contract
async def test_session_contract(client, app):
    """
    GET /api/v1/attendance/sessions/{id} response contract.

    Consumers: attendance sheet (attendance map keyed by member id)
    """
    club = app.state.club
    member = club.members.add_member(**MemberFactory.payload())
    session = club.attendance.create_session(**SessionFactory.payload())
    club.attendance.set_attendance(session.id, member.id, "justified")

    response = await client.get(f"/api/v1/attendance/sessions/{session.id}")
    assert response.status_code == 200
    data = response.json()

    required_fields = ["id", "date", "time", "location", "notes", "attendance"]
    for field in required_fields:
        assert field in data, (
            f"Missing required contract field '{field}' in session response."
        )

    assert data["attendance"] == {str(member.id): "justified"}


@pytest.mark.asyncio
@pytest.mark.contract
async def test_session_stats_contract(client, app):
    """
    GET /api/v1/attendance/sessions/{id}/stats response contract.

    Consumers: attendance sheet footer, dashboard attendance chart
    """
    session = app.state.club.attendance.create_session(**SessionFactory.payload())

    response = await client.get(f"/api/v1/attendance/sessions/{session.id}/stats")
    data = response.json()

    required_fields = [
        "session_id",
        "present",
        "absent",
        "justified",
        "unmarked",
        "roster_size",
        "attendance_rate",
    ]
    for field in required_fields:
        assert field in data, f"Missing contract field '{field}' in session stats."

    assert isinstance(data["attendance_rate"], float)
