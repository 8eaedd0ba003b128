"""In-memory invitation repository for testing."""

from datetime import datetime
from typing import Optional

from meet.domain.model.invitation import Invitation
from meet.domain.repository.change_feed import INVITATIONS_CHANNEL
from meet.domain.repository.invitation import InvitationRepository
from meet.domain.value import InvitationId, InvitationStatus, UserId
from meet.persistence.changefeed.inmemory import InMemoryChangeFeed

from .base import InMemoryStore


class InMemoryInvitationRepository(InMemoryStore, InvitationRepository):
    """In-memory implementation of InvitationRepository for testing."""

    def __init__(
        self, change_feed: InMemoryChangeFeed | None = None, latency: float = 0.0
    ) -> None:
        super().__init__(latency)
        self.change_feed = change_feed
        self._invitations: dict[InvitationId, Invitation] = {}

    async def find_by_id(self, invitation_id: InvitationId) -> Optional[Invitation]:
        """Find an invitation by ID."""
        await self._round_trip("find_by_id")
        return self._invitations.get(invitation_id)

    async def find_by_receiver(self, receiver_id: UserId) -> list[Invitation]:
        """Find invitations addressed to a user, newest first."""
        await self._round_trip("find_by_receiver")
        matches = [
            inv for inv in self._invitations.values() if inv.receiver_id == receiver_id
        ]
        matches.sort(key=lambda inv: inv.created_at, reverse=True)
        return matches

    async def add(self, invitation: Invitation) -> Invitation:
        """Insert a new invitation."""
        await self._round_trip("add")
        self._invitations[invitation.id] = invitation
        self._publish(invitation)
        return invitation

    async def transition_status(
        self,
        invitation_id: InvitationId,
        expected: InvitationStatus,
        new_status: InvitationStatus,
        updated_at: datetime,
    ) -> Optional[Invitation]:
        """Change the status only if it still equals expected."""
        await self._round_trip("transition_status")
        current = self._invitations.get(invitation_id)
        if current is None or current.status != expected:
            return None

        updated = current.model_copy(
            update={"status": new_status, "updated_at": updated_at}
        )
        self._invitations[invitation_id] = updated
        self._publish(updated)
        return updated

    def _publish(self, invitation: Invitation) -> None:
        if self.change_feed is not None:
            self.change_feed.publish(
                INVITATIONS_CHANNEL, str(invitation.id), [invitation.receiver_id]
            )
