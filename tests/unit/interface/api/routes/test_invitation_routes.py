"""Unit tests for invitation and meeting routes."""

import pytest

from tests.api import api_client, future, register


@pytest.fixture
def client():
    with api_client() as test_client:
        yield test_client


def _propose(client, headers: dict, receiver_id: str, days: int = 1):
    return client.post(
        "/invitations",
        json={
            "receiver_id": receiver_id,
            "title": "Coffee",
            "description": "Catch up",
            "proposed_time": future(days),
        },
        headers=headers,
    )


class TestProposeRoute:
    """Tests for POST /invitations."""

    def test_propose(self, client):
        alice_id, _ = register(client, "Alice")
        bob_id, bob = register(client, "Bob")

        response = _propose(client, bob, alice_id)

        assert response.status_code == 201
        invitation = response.json()["invitation"]
        assert invitation["status"] == "pending"
        assert invitation["sender_id"] == bob_id
        assert invitation["receiver_name"] == "Alice"

    def test_requires_authentication(self, client):
        alice_id, _ = register(client, "Alice")

        assert _propose(client, {}, alice_id).status_code == 401

    def test_past_time(self, client):
        alice_id, _ = register(client, "Alice")
        _, bob = register(client, "Bob")

        response = _propose(client, bob, alice_id, days=-1)

        assert response.status_code == 422
        assert response.json()["error"] == "validation_error"

    def test_naive_time_is_rejected(self, client):
        alice_id, _ = register(client, "Alice")
        _, bob = register(client, "Bob")

        response = client.post(
            "/invitations",
            json={
                "receiver_id": alice_id,
                "title": "Coffee",
                "proposed_time": "2099-01-01T10:00:00",
            },
            headers=bob,
        )

        assert response.status_code == 422

    def test_unknown_receiver(self, client):
        _, bob = register(client, "Bob")

        assert _propose(client, bob, "nobody").status_code == 404


class TestRespondRoutes:
    """Tests for accept, reject and retry routes."""

    def test_accept_schedules_meeting_for_both(self, client):
        alice_id, alice = register(client, "Alice")
        bob_id, bob = register(client, "Bob")
        invitation_id = _propose(client, bob, alice_id).json()["invitation"]["id"]

        response = client.post(f"/invitations/{invitation_id}/accept", headers=alice)

        assert response.status_code == 200
        body = response.json()
        assert body["outcome"] == "accepted"
        assert body["meeting"]["participants"] == [bob_id, alice_id]
        assert body["meeting"]["other_participant_name"] == "Bob"

        meetings = client.get("/meetings", headers=bob).json()
        assert len(meetings["upcoming"]) == 1
        assert meetings["upcoming"][0]["other_participant_name"] == "Alice"
        assert meetings["past"] == []

    def test_accept_twice_conflicts(self, client):
        alice_id, alice = register(client, "Alice")
        _, bob = register(client, "Bob")
        invitation_id = _propose(client, bob, alice_id).json()["invitation"]["id"]
        client.post(f"/invitations/{invitation_id}/accept", headers=alice)

        response = client.post(f"/invitations/{invitation_id}/accept", headers=alice)

        assert response.status_code == 409
        assert response.json()["current_status"] == "accepted"

    def test_reject(self, client):
        alice_id, alice = register(client, "Alice")
        _, bob = register(client, "Bob")
        invitation_id = _propose(client, bob, alice_id).json()["invitation"]["id"]

        response = client.post(f"/invitations/{invitation_id}/reject", headers=alice)

        assert response.status_code == 200
        assert response.json()["outcome"] == "rejected"
        assert client.get("/meetings", headers=alice).json()["upcoming"] == []

        listed = client.get("/invitations", headers=alice).json()
        assert listed["pending_count"] == 0
        assert listed["invitations"][0]["status"] == "rejected"

    def test_sender_cannot_accept(self, client):
        alice_id, _ = register(client, "Alice")
        _, bob = register(client, "Bob")
        invitation_id = _propose(client, bob, alice_id).json()["invitation"]["id"]

        response = client.post(f"/invitations/{invitation_id}/accept", headers=bob)

        assert response.status_code == 403

    def test_retry_returns_existing_meeting(self, client):
        alice_id, alice = register(client, "Alice")
        _, bob = register(client, "Bob")
        invitation_id = _propose(client, bob, alice_id).json()["invitation"]["id"]
        accepted = client.post(f"/invitations/{invitation_id}/accept", headers=alice)

        response = client.post(f"/invitations/{invitation_id}/meeting", headers=bob)

        assert response.status_code == 200
        assert response.json()["meeting"]["id"] == accepted.json()["meeting"]["id"]

    def test_unknown_invitation(self, client):
        _, alice = register(client, "Alice")

        response = client.post(
            "/invitations/00000000-0000-0000-0000-000000000000/accept", headers=alice
        )

        assert response.status_code == 404
