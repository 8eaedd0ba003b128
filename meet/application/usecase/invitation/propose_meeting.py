"""Propose meeting use case."""

from datetime import datetime

from pydantic import AwareDatetime, BaseModel, Field

from meet.application.lifecycle import LifecycleCoordinator
from meet.application.usecase.base import BaseUseCase
from meet.domain.service import InvitationService
from meet.domain.value import UserId

from .get_invitations import InvitationInfo


class ProposeMeetingRequest(BaseModel):
    """Propose meeting request."""

    sender_id: str  # From authenticated user
    receiver_id: str
    title: str = Field(max_length=255)
    description: str | None = Field(default=None, max_length=2000)
    proposed_time: AwareDatetime


class ProposeMeetingResponse(BaseModel):
    """Propose meeting response."""

    invitation: InvitationInfo


class ProposeMeetingUseCase(BaseUseCase):
    """Use case for inviting another user to a meeting."""

    def __init__(
        self,
        coordinator: LifecycleCoordinator,
        invitation_service: InvitationService,
    ) -> None:
        """Initialize propose meeting use case.

        Args:
            coordinator: Invitation lifecycle coordinator
            invitation_service: Invitation domain service
        """
        self.coordinator = coordinator
        self.invitation_service = invitation_service

    async def execute(
        self, request: ProposeMeetingRequest, now: datetime | None = None
    ) -> ProposeMeetingResponse:
        """Execute propose meeting flow.

        Raises:
            NotFoundError: If the receiver does not exist
            ValidationError: If the proposal is invalid
        """
        invitation_id = await self.coordinator.propose(
            acting_user_id=UserId(request.sender_id),
            receiver_id=UserId(request.receiver_id),
            title=request.title,
            description=request.description,
            proposed_time=request.proposed_time,
            now=now,
        )
        invitation = await self.invitation_service.get(invitation_id)
        return ProposeMeetingResponse(
            invitation=InvitationInfo.from_invitation(invitation)
        )
