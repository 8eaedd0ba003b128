"""Respond to invitation use case."""

from enum import Enum
from uuid import UUID

from pydantic import BaseModel

from meet.application.lifecycle import LifecycleCoordinator
from meet.application.usecase.meeting.get_meetings import MeetingInfo
from meet.domain.value import InvitationId, LifecycleOutcome, UserId

from .get_invitations import InvitationInfo


class InvitationAction(str, Enum):
    """Response a receiver can give to an invitation."""

    ACCEPT = "accept"
    REJECT = "reject"
    RETRY_MEETING = "retry_meeting"


class RespondToInvitationRequest(BaseModel):
    """Respond to invitation request."""

    user_id: str  # From authenticated user
    invitation_id: UUID
    action: InvitationAction


class RespondToInvitationResponse(BaseModel):
    """Respond to invitation response."""

    invitation_id: str
    outcome: LifecycleOutcome
    invitation: InvitationInfo | None = None
    meeting: MeetingInfo | None = None


class RespondToInvitationUseCase:
    """Use case for accepting or rejecting an invitation."""

    def __init__(self, coordinator: LifecycleCoordinator) -> None:
        self.coordinator = coordinator

    async def execute(
        self, request: RespondToInvitationRequest
    ) -> RespondToInvitationResponse:
        """Run the requested lifecycle action.

        Raises:
            NotFoundError: If the invitation does not exist
            NotAuthorizedError: If the user may not respond to it
            InvalidTransitionError: If the invitation is not pending
            MeetingCreationError: If the meeting could not be stored
        """
        user_id = UserId(request.user_id)
        invitation_id = InvitationId(request.invitation_id)

        if request.action == InvitationAction.ACCEPT:
            result = await self.coordinator.accept(user_id, invitation_id)
        elif request.action == InvitationAction.REJECT:
            result = await self.coordinator.reject(user_id, invitation_id)
        else:
            result = await self.coordinator.retry_meeting(user_id, invitation_id)

        return RespondToInvitationResponse(
            invitation_id=str(result.invitation_id),
            outcome=result.outcome,
            invitation=InvitationInfo.from_invitation(result.invitation)
            if result.invitation
            else None,
            meeting=MeetingInfo.from_meeting(result.meeting, user_id)
            if result.meeting
            else None,
        )
