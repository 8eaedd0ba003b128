"""Unit tests for the Invitation entity and its status state machine."""

from uuid import uuid4

import pytest
from pydantic import ValidationError as PydanticValidationError

from meet.domain.error import InvalidTransitionError
from meet.domain.model import Invitation
from meet.domain.value import (
    InvitationId,
    InvitationStatus,
    ParticipantSnapshot,
    UserId,
)
from tests.conftest import NOW, later

ALICE = ParticipantSnapshot(
    user_id=UserId("alice"), display_name="Alice", avatar_url="https://a/alice"
)
BOB = ParticipantSnapshot(
    user_id=UserId("bob"), display_name="Bob", avatar_url="https://a/bob"
)


def _propose() -> Invitation:
    return Invitation.propose(
        invitation_id=InvitationId(uuid4()),
        sender=BOB,
        receiver=ALICE,
        title="Coffee",
        description=None,
        proposed_time=later(days=1),
        now=NOW,
    )


class TestPropose:
    """Tests for Invitation.propose."""

    def test_new_invitation_is_pending(self):
        """A proposed invitation starts pending with both timestamps set to now."""
        invitation = _propose()

        assert invitation.status == InvitationStatus.PENDING
        assert invitation.is_pending
        assert invitation.created_at == NOW
        assert invitation.updated_at == NOW

    def test_copies_participant_snapshots(self):
        """Sender and receiver names and avatars are copied onto the invitation."""
        invitation = _propose()

        assert invitation.sender == BOB
        assert invitation.receiver == ALICE
        assert invitation.sender_name == "Bob"
        assert invitation.receiver_avatar == "https://a/alice"

    def test_sender_and_receiver_must_differ(self):
        """An invitation cannot be addressed to its own sender."""
        with pytest.raises(PydanticValidationError):
            Invitation.propose(
                invitation_id=InvitationId(uuid4()),
                sender=BOB,
                receiver=BOB,
                title="Solo",
                description=None,
                proposed_time=later(days=1),
                now=NOW,
            )


class TestTransition:
    """Tests for the pending -> accepted | rejected state machine."""

    @pytest.mark.parametrize(
        "target", [InvitationStatus.ACCEPTED, InvitationStatus.REJECTED]
    )
    def test_pending_can_move_to_terminal_state(self, target):
        invitation = _propose()

        updated = invitation.transition(target, later(minutes=5))

        assert updated.status == target
        assert updated.updated_at == later(minutes=5)
        assert updated.created_at == NOW
        # Original is immutable
        assert invitation.status == InvitationStatus.PENDING

    @pytest.mark.parametrize(
        "current,target",
        [
            (InvitationStatus.ACCEPTED, InvitationStatus.REJECTED),
            (InvitationStatus.ACCEPTED, InvitationStatus.ACCEPTED),
            (InvitationStatus.REJECTED, InvitationStatus.ACCEPTED),
            (InvitationStatus.REJECTED, InvitationStatus.PENDING),
            (InvitationStatus.ACCEPTED, InvitationStatus.PENDING),
        ],
    )
    def test_terminal_states_are_final(self, current, target):
        """Accepted and rejected invitations never change status again."""
        invitation = _propose().transition(current, later(minutes=1))

        assert not invitation.can_transition_to(target)
        with pytest.raises(InvalidTransitionError) as exc_info:
            invitation.transition(target, later(minutes=2))

        assert exc_info.value.current == current
        assert exc_info.value.requested == target

    def test_pending_cannot_move_to_pending(self):
        invitation = _propose()

        with pytest.raises(InvalidTransitionError):
            invitation.transition(InvitationStatus.PENDING, later(minutes=1))
