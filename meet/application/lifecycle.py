"""Invitation lifecycle coordination.

The coordinator is the only way an invitation changes status. Accepting an
invitation updates its status, derives the meeting from it and stores the
meeting, in that order.
"""

from datetime import datetime

import logfire
from pydantic import BaseModel, ConfigDict

from meet.domain.error import (
    MeetingCreationError,
    NotAuthorizedError,
    StoreUnavailableError,
)
from meet.domain.model import Invitation, Meeting
from meet.domain.service import (
    InvitationService,
    MeetingService,
    UserService,
    derive_meeting,
)
from meet.domain.value import (
    InvitationId,
    InvitationStatus,
    LifecycleOutcome,
    UserId,
)


class InFlightRegistry:
    """Invitation IDs with a response currently being processed.

    Shared by every coordinator in the process. Marking and checking happen
    without awaiting, so two tasks can never both mark the same ID.
    """

    def __init__(self) -> None:
        self._in_flight: set[InvitationId] = set()

    def __contains__(self, invitation_id: InvitationId) -> bool:
        return invitation_id in self._in_flight

    def try_mark(self, invitation_id: InvitationId) -> bool:
        """Mark the ID as in flight. Returns False if it already was."""
        if invitation_id in self._in_flight:
            return False
        self._in_flight.add(invitation_id)
        return True

    def clear(self, invitation_id: InvitationId) -> None:
        self._in_flight.discard(invitation_id)


class LifecycleResult(BaseModel):
    """Outcome of an accept or reject action."""

    model_config = ConfigDict(frozen=True)

    invitation_id: InvitationId
    outcome: LifecycleOutcome
    invitation: Invitation | None = None
    meeting: Meeting | None = None


class LifecycleCoordinator:
    """Runs the propose, accept and reject actions of the invitation lifecycle."""

    def __init__(
        self,
        invitation_service: InvitationService,
        meeting_service: MeetingService,
        user_service: UserService,
        in_flight: InFlightRegistry,
    ) -> None:
        """Initialize lifecycle coordinator.

        Args:
            invitation_service: Invitation domain service
            meeting_service: Meeting domain service
            user_service: User domain service
            in_flight: Process-wide registry of invitations being processed
        """
        self.invitation_service = invitation_service
        self.meeting_service = meeting_service
        self.user_service = user_service
        self.in_flight = in_flight

    async def propose(
        self,
        acting_user_id: UserId,
        receiver_id: UserId,
        title: str,
        description: str | None,
        proposed_time: datetime,
        now: datetime | None = None,
    ) -> InvitationId:
        """Send an invitation from the acting user to receiver_id.

        Both users' current names and avatars are copied onto the invitation.

        Raises:
            NotFoundError: If either user does not exist
            ValidationError: If the proposal is invalid
        """
        with logfire.span(
            "lifecycle.propose", sender_id=acting_user_id, receiver_id=receiver_id
        ):
            sender = await self.user_service.get_by_id(acting_user_id)
            receiver = await self.user_service.get_by_id(receiver_id)
            return await self.invitation_service.create(
                sender=sender.snapshot(),
                receiver=receiver.snapshot(),
                title=title,
                description=description,
                proposed_time=proposed_time,
                now=now,
            )

    async def accept(
        self,
        acting_user_id: UserId,
        invitation_id: InvitationId,
        now: datetime | None = None,
    ) -> LifecycleResult:
        """Accept an invitation and schedule its meeting.

        Args:
            acting_user_id: User responding; must be the receiver
            invitation_id: Invitation to accept
            now: Response instant (defaults to the current time)

        Returns:
            Result with the accepted invitation and new meeting, or an
            ALREADY_PROCESSING outcome if a response is already in flight

        Raises:
            NotFoundError: If the invitation does not exist
            NotAuthorizedError: If the acting user is not the receiver
            InvalidTransitionError: If the invitation is not pending
            MeetingCreationError: If the invitation was accepted but the
                meeting could not be stored
        """
        if not self.in_flight.try_mark(invitation_id):
            logfire.info(
                "Invitation response already in flight",
                invitation_id=str(invitation_id),
            )
            return LifecycleResult(
                invitation_id=invitation_id,
                outcome=LifecycleOutcome.ALREADY_PROCESSING,
            )

        try:
            with logfire.span(
                "lifecycle.accept",
                invitation_id=str(invitation_id),
                user_id=acting_user_id,
            ):
                await self._require_receiver(acting_user_id, invitation_id)
                accepted = await self.invitation_service.set_status(
                    invitation_id, InvitationStatus.ACCEPTED, now
                )
                try:
                    meeting = await self.meeting_service.persist(
                        derive_meeting(accepted), now
                    )
                except StoreUnavailableError as e:
                    logfire.error(
                        "Invitation accepted but meeting not created",
                        invitation_id=str(invitation_id),
                        error=str(e),
                    )
                    raise MeetingCreationError(invitation_id, str(e)) from e

                return LifecycleResult(
                    invitation_id=invitation_id,
                    outcome=LifecycleOutcome.ACCEPTED,
                    invitation=accepted,
                    meeting=meeting,
                )
        finally:
            self.in_flight.clear(invitation_id)

    async def reject(
        self,
        acting_user_id: UserId,
        invitation_id: InvitationId,
        now: datetime | None = None,
    ) -> LifecycleResult:
        """Reject an invitation. No meeting is created.

        Raises:
            NotFoundError: If the invitation does not exist
            NotAuthorizedError: If the acting user is not the receiver
            InvalidTransitionError: If the invitation is not pending
        """
        if not self.in_flight.try_mark(invitation_id):
            return LifecycleResult(
                invitation_id=invitation_id,
                outcome=LifecycleOutcome.ALREADY_PROCESSING,
            )

        try:
            with logfire.span(
                "lifecycle.reject",
                invitation_id=str(invitation_id),
                user_id=acting_user_id,
            ):
                await self._require_receiver(acting_user_id, invitation_id)
                rejected = await self.invitation_service.set_status(
                    invitation_id, InvitationStatus.REJECTED, now
                )
                return LifecycleResult(
                    invitation_id=invitation_id,
                    outcome=LifecycleOutcome.REJECTED,
                    invitation=rejected,
                )
        finally:
            self.in_flight.clear(invitation_id)

    async def retry_meeting(
        self,
        acting_user_id: UserId,
        invitation_id: InvitationId,
        now: datetime | None = None,
    ) -> LifecycleResult:
        """Create the meeting for an accepted invitation that has none.

        Returns the existing meeting if one was already created.

        Raises:
            NotFoundError: If the invitation does not exist
            NotAuthorizedError: If the acting user is not a participant
            ValidationError: If the invitation is not accepted
            MeetingCreationError: If the meeting still cannot be stored
        """
        if not self.in_flight.try_mark(invitation_id):
            return LifecycleResult(
                invitation_id=invitation_id,
                outcome=LifecycleOutcome.ALREADY_PROCESSING,
            )

        try:
            with logfire.span(
                "lifecycle.retry_meeting",
                invitation_id=str(invitation_id),
                user_id=acting_user_id,
            ):
                invitation = await self.invitation_service.get(invitation_id)
                if acting_user_id not in (invitation.sender_id, invitation.receiver_id):
                    raise NotAuthorizedError(
                        "Invitation", str(invitation_id), acting_user_id
                    )

                draft = derive_meeting(invitation)
                try:
                    meeting = await self.meeting_service.find_by_invitation(
                        invitation_id
                    )
                    if meeting is None:
                        meeting = await self.meeting_service.persist(draft, now)
                    else:
                        logfire.info(
                            "Meeting already exists",
                            invitation_id=str(invitation_id),
                            meeting_id=str(meeting.id),
                        )
                except StoreUnavailableError as e:
                    raise MeetingCreationError(invitation_id, str(e)) from e

                return LifecycleResult(
                    invitation_id=invitation_id,
                    outcome=LifecycleOutcome.ACCEPTED,
                    invitation=invitation,
                    meeting=meeting,
                )
        finally:
            self.in_flight.clear(invitation_id)

    async def _require_receiver(
        self, acting_user_id: UserId, invitation_id: InvitationId
    ) -> Invitation:
        invitation = await self.invitation_service.get(invitation_id)
        if invitation.receiver_id != acting_user_id:
            logfire.warn(
                "Invitation response by non-receiver",
                invitation_id=str(invitation_id),
                user_id=acting_user_id,
            )
            raise NotAuthorizedError("Invitation", str(invitation_id), acting_user_id)
        return invitation
