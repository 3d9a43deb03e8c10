"""Integration tests for messages and member notifications."""

import pytest
from tests.factories import MemberFactory, MessageFactory


@pytest.fixture
def members(app):
    directory = app.state.club.members
    return [directory.add_member(**MemberFactory.payload()) for _ in range(2)]


async def _post(client, **overrides):
    response = await client.post(
        "/api/v1/communications/messages", json=MessageFactory.payload(**overrides)
    )
    assert response.status_code == 201, response.text
    return response.json()


@pytest.mark.asyncio
@pytest.mark.integration
async def test_broadcast_notifies_every_member(client, members):
    message = await _post(client)

    assert message["author"] == "system"
    assert message["target"] == "all"

    for member in members:
        response = await client.get(f"/api/v1/communications/notifications/{member.id}")
        [notification] = response.json()
        assert notification["message_id"] == message["id"]
        assert notification["read"] is False


@pytest.mark.asyncio
@pytest.mark.integration
async def test_targeted_message_reaches_only_its_member(client, members):
    first, second = members
    await _post(client, target=str(first.id), priority="low")

    response = await client.get(
        "/api/v1/communications/messages", params={"member_id": str(second.id)}
    )
    assert response.json() == []

    response = await client.get(
        "/api/v1/communications/messages", params={"member_id": str(first.id)}
    )
    assert len(response.json()) == 1


@pytest.mark.asyncio
@pytest.mark.integration
async def test_read_and_acknowledge(client, members):
    member = members[0]
    message = await _post(client)
    url = f"/api/v1/communications/messages/{message['id']}"

    response = await client.post(f"{url}/read", json={"member_id": str(member.id)})
    assert response.json()["read_by"] == [str(member.id)]

    response = await client.get(
        "/api/v1/communications/messages",
        params={"member_id": str(member.id), "unread": True},
    )
    assert response.json() == []

    response = await client.post(f"{url}/acknowledge", json={"member_id": str(member.id)})
    assert response.json()["acknowledged_by"] == [str(member.id)]


@pytest.mark.asyncio
@pytest.mark.integration
async def test_notification_read(client, members):
    member = members[0]
    await _post(client)
    url = f"/api/v1/communications/notifications/{member.id}"
    [notification] = (await client.get(url)).json()

    response = await client.post(
        f"/api/v1/communications/notifications/{notification['id']}/read"
    )
    assert response.json()["read"] is True

    response = await client.get(url, params={"unread": True})
    assert response.json() == []


@pytest.mark.asyncio
@pytest.mark.integration
async def test_expired_messages_are_hidden(client, clock, members):
    await _post(client, expires_at="2024-03-11T00:00:00-03:00")

    clock.advance(days=2)

    response = await client.get("/api/v1/communications/messages")
    assert response.json() == []


@pytest.mark.asyncio
@pytest.mark.integration
async def test_filters_and_delete(client, members):
    urgent = await _post(client, priority="urgent")
    await _post(client, type="reminder", priority="low")

    response = await client.get(
        "/api/v1/communications/messages", params={"priority": "urgent"}
    )
    assert [m["id"] for m in response.json()] == [urgent["id"]]

    response = await client.get("/api/v1/communications/messages", params={"type": "reminder"})
    assert len(response.json()) == 1

    response = await client.delete(f"/api/v1/communications/messages/{urgent['id']}")
    assert response.status_code == 204

    response = await client.get("/api/v1/communications/messages")
    assert len(response.json()) == 1


@pytest.mark.asyncio
@pytest.mark.integration
async def test_blank_message_is_422(client):
    response = await client.post(
        "/api/v1/communications/messages", json={"title": "", "content": ""}
    )

    assert response.status_code == 422


@pytest.mark.asyncio
@pytest.mark.integration
async def test_viewer_cannot_post(viewer_client):
    response = await viewer_client.post(
        "/api/v1/communications/messages", json=MessageFactory.payload()
    )

    assert response.status_code == 403
