"""Unit tests for the live WebSocket routes."""

import asyncio

import pytest
from starlette.websockets import WebSocketDisconnect

from meet.domain.subscription import Snapshot
from meet.interface.api.routes.live import keep_latest
from tests.api import api_client, future, register


@pytest.fixture
def client():
    with api_client() as test_client:
        yield test_client


class TestLiveInvitations:
    """Tests for /live/invitations."""

    def test_requires_authentication(self, client):
        with pytest.raises(WebSocketDisconnect):
            with client.websocket_connect("/live/invitations") as websocket:
                websocket.receive_json()

    def test_streams_snapshots(self, client):
        alice_id, alice = register(client, "Alice")
        _, bob = register(client, "Bob")

        with client.websocket_connect("/live/invitations", headers=alice) as websocket:
            first = websocket.receive_json()
            assert first == {"version": 1, "items": [], "error": None}

            client.post(
                "/invitations",
                json={
                    "receiver_id": alice_id,
                    "title": "Coffee",
                    "proposed_time": future(),
                },
                headers=bob,
            )
            second = websocket.receive_json()

        assert second["version"] == 2
        assert [item["title"] for item in second["items"]] == ["Coffee"]
        assert second["items"][0]["status"] == "pending"
        assert second["items"][0]["sender_name"] == "Bob"


class TestLiveMeetings:
    """Tests for /live/meetings."""

    def test_sender_sees_meeting_when_accepted(self, client):
        alice_id, alice = register(client, "Alice")
        _, bob = register(client, "Bob")
        invitation_id = client.post(
            "/invitations",
            json={"receiver_id": alice_id, "title": "Sync", "proposed_time": future()},
            headers=bob,
        ).json()["invitation"]["id"]

        with client.websocket_connect("/live/meetings", headers=bob) as websocket:
            assert websocket.receive_json()["items"] == []

            client.post(f"/invitations/{invitation_id}/accept", headers=alice)
            snapshot = websocket.receive_json()

        assert len(snapshot["items"]) == 1
        meeting = snapshot["items"][0]
        assert meeting["title"] == "Sync"
        assert meeting["other_participant_name"] == "Alice"
        assert meeting["timing"] == "upcoming"


class TestKeepLatest:
    """Tests for the per-socket snapshot queue."""

    def test_unsent_snapshot_is_replaced_by_newer(self):
        queue: asyncio.Queue[Snapshot] = asyncio.Queue(maxsize=1)

        for version in (1, 2, 3):
            keep_latest(queue, Snapshot(version=version))

        assert queue.qsize() == 1
        assert queue.get_nowait().version == 3

    def test_sent_snapshot_leaves_room(self):
        queue: asyncio.Queue[Snapshot] = asyncio.Queue(maxsize=1)
        keep_latest(queue, Snapshot(version=1))
        assert queue.get_nowait().version == 1

        keep_latest(queue, Snapshot(version=2))

        assert queue.get_nowait().version == 2
