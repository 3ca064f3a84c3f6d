import json
from datetime import datetime, timedelta

import pytest
from sqlalchemy import update

from app.core.websocket_manager import manager, swap_requests_channel
from app.models.swap_request import SwapRequest


@pytest.fixture
def pair(make_member):
    async def _pair():
        requester, requester_headers = await make_member("req", "Requester")
        recipient, recipient_headers = await make_member("rec", "Recipient")
        return requester, requester_headers, recipient, recipient_headers
    return _pair


async def send_request(client, headers, recipient_id, **extra):
    response = await client.post("/swap-requests", json={"recipient_id": recipient_id, **extra}, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()


@pytest.mark.asyncio
async def test_create_uses_default_message_and_notifies_recipient(client, pair):
    requester, req_h, recipient, rec_h = await pair()

    swap = await send_request(client, req_h, recipient["id"])
    assert swap["status"] == "pending"
    assert swap["message"] == "Would love to exchange skills with you!"
    assert swap["requester_id"] == requester["id"]
    assert swap["expires_at"] is not None

    incoming = (await client.get("/swap-requests/incoming", headers=rec_h)).json()
    assert [s["id"] for s in incoming] == [swap["id"]]
    assert incoming[0]["requester"]["full_name"] == "Requester"

    outgoing = (await client.get("/swap-requests/outgoing", headers=req_h)).json()
    assert outgoing[0]["recipient"]["full_name"] == "Recipient"

    notifications = (await client.get("/notifications/my", headers=rec_h)).json()
    assert len(notifications) == 1
    assert notifications[0]["kind"] == "swap_request"
    assert notifications[0]["is_read"] is False


@pytest.mark.asyncio
async def test_cannot_request_yourself_or_missing_profiles(client, pair):
    requester, req_h, _, _ = await pair()

    response = await client.post("/swap-requests", json={"recipient_id": requester["id"]}, headers=req_h)
    assert response.status_code == 400

    response = await client.post("/swap-requests", json={"recipient_id": "nobody"}, headers=req_h)
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_full_lifecycle_counts_swaps(client, pair):
    requester, req_h, recipient, rec_h = await pair()
    swap = await send_request(client, req_h, recipient["id"], message="Guitar for Python?")

    # requester cannot answer their own request
    response = await client.patch(f"/swap-requests/{swap['id']}/status", json={"status": "accepted"}, headers=req_h)
    assert response.status_code == 403

    # pending cannot jump to completed
    response = await client.patch(f"/swap-requests/{swap['id']}/status", json={"status": "completed"}, headers=rec_h)
    assert response.status_code == 400

    response = await client.patch(f"/swap-requests/{swap['id']}/status", json={"status": "accepted"}, headers=rec_h)
    assert response.status_code == 200
    assert response.json()["status"] == "accepted"

    # accepted requests can no longer be withdrawn
    assert (await client.delete(f"/swap-requests/{swap['id']}", headers=req_h)).status_code == 400

    response = await client.patch(f"/swap-requests/{swap['id']}/status", json={"status": "completed"}, headers=req_h)
    assert response.status_code == 200
    assert response.json()["status"] == "completed"

    # terminal
    response = await client.patch(f"/swap-requests/{swap['id']}/status", json={"status": "completed"}, headers=rec_h)
    assert response.status_code == 400

    assert (await client.get("/profiles/me", headers=req_h)).json()["total_swaps"] == 1
    assert (await client.get("/profiles/me", headers=rec_h)).json()["total_swaps"] == 1

    completed = (await client.get("/swap-requests/completed", headers=rec_h)).json()
    assert len(completed) == 1
    assert completed[0]["partner"]["id"] == requester["id"]
    assert completed[0]["completed_at"] == completed[0]["updated_at"]

    # accepted notification went to the requester
    titles = [n["title"] for n in (await client.get("/notifications/my", headers=req_h)).json()]
    assert "Recipient accepted your swap request" in titles


@pytest.mark.asyncio
async def test_reject_notifies_requester(client, pair):
    _, req_h, recipient, rec_h = await pair()
    swap = await send_request(client, req_h, recipient["id"])

    response = await client.patch(f"/swap-requests/{swap['id']}/status", json={"status": "rejected"}, headers=rec_h)
    assert response.status_code == 200

    notifications = (await client.get("/notifications/my", headers=req_h)).json()
    assert [n["title"] for n in notifications] == ["Recipient declined your swap request"]


@pytest.mark.asyncio
async def test_outsiders_are_forbidden(client, pair, make_member):
    _, req_h, recipient, _ = await pair()
    _, outsider = await make_member("outsider", "Outsider")
    swap = await send_request(client, req_h, recipient["id"])

    response = await client.patch(f"/swap-requests/{swap['id']}/status", json={"status": "rejected"}, headers=outsider)
    assert response.status_code == 403
    assert (await client.delete(f"/swap-requests/{swap['id']}", headers=outsider)).status_code == 403


@pytest.mark.asyncio
async def test_unknown_status_is_a_validation_error(client, pair):
    _, req_h, recipient, rec_h = await pair()
    swap = await send_request(client, req_h, recipient["id"])

    response = await client.patch(f"/swap-requests/{swap['id']}/status", json={"status": "pending"}, headers=rec_h)
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_requester_withdraws_pending_request(client, pair):
    _, req_h, recipient, rec_h = await pair()
    swap = await send_request(client, req_h, recipient["id"])

    assert (await client.delete(f"/swap-requests/{swap['id']}", headers=rec_h)).status_code == 403
    assert (await client.delete(f"/swap-requests/{swap['id']}", headers=req_h)).status_code == 204
    assert (await client.get("/swap-requests/incoming", headers=rec_h)).json() == []
    assert (await client.delete(f"/swap-requests/{swap['id']}", headers=req_h)).status_code == 404


@pytest.mark.asyncio
async def test_expired_request_cannot_be_accepted(client, pair, db):
    _, req_h, recipient, rec_h = await pair()
    swap = await send_request(client, req_h, recipient["id"])

    await db.execute(
        update(SwapRequest)
        .where(SwapRequest.id == swap["id"])
        .values(expires_at=datetime.utcnow() - timedelta(days=1))
    )
    await db.commit()

    response = await client.patch(f"/swap-requests/{swap['id']}/status", json={"status": "accepted"}, headers=rec_h)
    assert response.status_code == 400
    assert "expired" in response.json()["detail"]


class RecordingSocket:
    def __init__(self):
        self.events = []

    async def accept(self):
        pass

    async def send_text(self, message):
        self.events.append(json.loads(message))


@pytest.mark.asyncio
async def test_changes_are_pushed_to_both_parties(client, pair):
    requester, req_h, recipient, rec_h = await pair()
    req_socket, rec_socket = RecordingSocket(), RecordingSocket()
    await manager.connect(swap_requests_channel(requester["id"]), requester["id"], req_socket)
    await manager.connect(swap_requests_channel(recipient["id"]), recipient["id"], rec_socket)
    try:
        swap = await send_request(client, req_h, recipient["id"])
        await client.patch(f"/swap-requests/{swap['id']}/status", json={"status": "rejected"}, headers=rec_h)
    finally:
        manager.disconnect(swap_requests_channel(requester["id"]), requester["id"], req_socket)
        manager.disconnect(swap_requests_channel(recipient["id"]), recipient["id"], rec_socket)

    for socket in (req_socket, rec_socket):
        assert [(e["event"], e["table"]) for e in socket.events] == [
            ("INSERT", "swap_requests"), ("UPDATE", "swap_requests")
        ]
        assert socket.events[1]["old"]["status"] == "pending"
        assert socket.events[1]["new"]["status"] == "rejected"
