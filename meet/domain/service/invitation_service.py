"""Invitation domain service."""

from datetime import datetime
from uuid import uuid4

import logfire

from meet.domain.error import InvalidTransitionError, NotFoundError, ValidationError
from meet.domain.model.common import utcnow
from meet.domain.model.invitation import Invitation
from meet.domain.repository import (
    INVITATIONS_CHANNEL,
    ChangeFeed,
    InvitationRepository,
)
from meet.domain.subscription import LiveQuery, SnapshotListener, Subscription
from meet.domain.value import (
    InvitationId,
    InvitationStatus,
    ParticipantSnapshot,
    UserId,
)

from .base import Service


def require_aware(value: datetime, field: str) -> datetime:
    """Reject naive datetimes; instants must carry a timezone.

    Raises:
        ValidationError: If value has no tzinfo
    """
    if value.tzinfo is None or value.utcoffset() is None:
        raise ValidationError(f"{field} must be timezone-aware")
    return value


class InvitationService(Service):
    """Domain service for the invitation store.

    Creates invitations, moves them through the status state machine and
    serves live views of a receiver's invitations.
    """

    def __init__(
        self, invitation_repository: InvitationRepository, change_feed: ChangeFeed
    ) -> None:
        """Initialize invitation service.

        Args:
            invitation_repository: Invitation repository
            change_feed: Feed of committed writes for live queries
        """
        self.invitation_repository = invitation_repository
        self.change_feed = change_feed

    async def create(
        self,
        sender: ParticipantSnapshot,
        receiver: ParticipantSnapshot,
        title: str,
        description: str | None,
        proposed_time: datetime,
        now: datetime | None = None,
    ) -> InvitationId:
        """Create a pending invitation.

        Args:
            sender: Snapshot of the proposing user
            receiver: Snapshot of the invited user
            title: Meeting title, must not be blank
            description: Optional meeting description
            proposed_time: Proposed start, strictly after now
            now: Submission instant (defaults to the current time)

        Returns:
            ID of the new invitation

        Raises:
            ValidationError: If the title is blank, the proposed time is not in
                the future, or sender and receiver are the same user
        """
        now = require_aware(now or utcnow(), "now")

        with logfire.span(
            "invitation_service.create",
            sender_id=sender.user_id,
            receiver_id=receiver.user_id,
        ):
            title = title.strip()
            if not title:
                logfire.warn("Invitation rejected: empty title", sender_id=sender.user_id)
                raise ValidationError("Title must not be empty")

            require_aware(proposed_time, "proposed_time")
            if proposed_time <= now:
                logfire.warn(
                    "Invitation rejected: proposed time not in the future",
                    sender_id=sender.user_id,
                    proposed_time=proposed_time.isoformat(),
                )
                raise ValidationError("Meeting time must be in the future")

            if sender.user_id == receiver.user_id:
                raise ValidationError("Cannot invite yourself")

            description = description.strip() if description else None

            invitation = Invitation.propose(
                invitation_id=InvitationId(uuid4()),
                sender=sender,
                receiver=receiver,
                title=title,
                description=description or None,
                proposed_time=proposed_time,
                now=now,
            )
            saved = await self.invitation_repository.add(invitation)
            logfire.info(
                "Invitation created",
                invitation_id=str(saved.id),
                sender_id=saved.sender_id,
                receiver_id=saved.receiver_id,
            )
            return saved.id

    async def get(self, invitation_id: InvitationId) -> Invitation:
        """Get invitation by ID.

        Raises:
            NotFoundError: If the invitation does not exist
        """
        invitation = await self.invitation_repository.find_by_id(invitation_id)
        if not invitation:
            logfire.warn("Invitation not found", invitation_id=str(invitation_id))
            raise NotFoundError("Invitation", str(invitation_id))
        return invitation

    async def set_status(
        self,
        invitation_id: InvitationId,
        new_status: InvitationStatus,
        now: datetime | None = None,
    ) -> Invitation:
        """Move a pending invitation to a terminal status.

        The status is read, checked against the state machine, then written
        with a conditional update that only succeeds if the invitation is
        still pending.

        Args:
            invitation_id: Invitation to update
            new_status: ACCEPTED or REJECTED
            now: Update instant (defaults to the current time)

        Returns:
            Updated invitation

        Raises:
            NotFoundError: If the invitation does not exist
            InvalidTransitionError: If the invitation is not pending
        """
        now = require_aware(now or utcnow(), "now")

        with logfire.span(
            "invitation_service.set_status",
            invitation_id=str(invitation_id),
            new_status=new_status.value,
        ):
            invitation = await self.get(invitation_id)
            # Raises InvalidTransitionError for terminal invitations
            invitation.transition(new_status, now)

            updated = await self.invitation_repository.transition_status(
                invitation_id, invitation.status, new_status, now
            )
            if updated is None:
                # Another writer got there between our read and write
                current = await self.get(invitation_id)
                logfire.warn(
                    "Invitation status changed concurrently",
                    invitation_id=str(invitation_id),
                    current=current.status.value,
                    requested=new_status.value,
                )
                raise InvalidTransitionError(invitation_id, current.status, new_status)

            logfire.info(
                "Invitation status updated",
                invitation_id=str(invitation_id),
                status=updated.status.value,
            )
            return updated

    async def list_for_receiver(self, receiver_id: UserId) -> list[Invitation]:
        """List invitations addressed to a user, newest first."""
        with logfire.span("invitation_service.list_for_receiver", receiver_id=receiver_id):
            invitations = await self.invitation_repository.find_by_receiver(receiver_id)
            logfire.info(
                "Invitations listed", receiver_id=receiver_id, count=len(invitations)
            )
            return invitations

    def subscribe(
        self, receiver_id: UserId, on_change: SnapshotListener
    ) -> Subscription:
        """Subscribe to the invitations addressed to a user.

        on_change receives the full list (newest first) once, then again after
        every write that concerns the receiver, until unsubscribed.

        Args:
            receiver_id: Receiving user's ID
            on_change: Called with each snapshot

        Returns:
            Subscription handle
        """
        logfire.info("Invitation subscription opened", receiver_id=receiver_id)
        query: LiveQuery[Invitation] = LiveQuery(
            name="invitations",
            change_feed=self.change_feed,
            channel=INVITATIONS_CHANNEL,
            key=receiver_id,
            fetch=lambda: self.invitation_repository.find_by_receiver(receiver_id),
            listener=on_change,
        )
        return query.start()
