"""Invitation repository interface."""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Optional

from meet.domain.model.invitation import Invitation
from meet.domain.value import InvitationId, InvitationStatus, UserId


class InvitationRepository(ABC):
    """Repository for Invitation entity.

    Every write publishes a change event on the invitations channel with
    the receiver as audience.
    """

    @abstractmethod
    async def find_by_id(self, invitation_id: InvitationId) -> Optional[Invitation]:
        """Find an invitation by ID.

        Args:
            invitation_id: The invitation's unique identifier

        Returns:
            The invitation if found, None otherwise
        """
        pass

    @abstractmethod
    async def find_by_receiver(self, receiver_id: UserId) -> list[Invitation]:
        """Find all invitations addressed to a user, newest first.

        Args:
            receiver_id: The receiving user's ID

        Returns:
            Invitations ordered by created_at descending
        """
        pass

    @abstractmethod
    async def add(self, invitation: Invitation) -> Invitation:
        """Insert a new invitation.

        Args:
            invitation: The invitation to insert

        Returns:
            The stored invitation
        """
        pass

    @abstractmethod
    async def transition_status(
        self,
        invitation_id: InvitationId,
        expected: InvitationStatus,
        new_status: InvitationStatus,
        updated_at: datetime,
    ) -> Optional[Invitation]:
        """Conditionally change an invitation's status.

        The write only happens if the stored status still equals expected.

        Args:
            invitation_id: The invitation to update
            expected: Status the invitation must currently have
            new_status: Status to write
            updated_at: New updated_at instant

        Returns:
            The updated invitation, or None if it is missing or its
            status no longer equals expected
        """
        pass
