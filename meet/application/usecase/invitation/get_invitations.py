"""Get invitations use case."""

from datetime import datetime

from pydantic import BaseModel

from meet.domain.model import Invitation
from meet.domain.service import InvitationService
from meet.domain.value import InvitationStatus, UserId


class InvitationInfo(BaseModel):
    """Invitation information for response."""

    id: str
    sender_id: str
    sender_name: str
    sender_avatar: str
    receiver_id: str
    receiver_name: str
    title: str
    description: str | None
    proposed_time: datetime
    status: InvitationStatus
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_invitation(cls, invitation: Invitation) -> "InvitationInfo":
        return cls(
            id=str(invitation.id),
            sender_id=invitation.sender_id,
            sender_name=invitation.sender_name,
            sender_avatar=invitation.sender_avatar,
            receiver_id=invitation.receiver_id,
            receiver_name=invitation.receiver_name,
            title=invitation.title,
            description=invitation.description,
            proposed_time=invitation.proposed_time,
            status=invitation.status,
            created_at=invitation.created_at,
            updated_at=invitation.updated_at,
        )


class GetInvitationsRequest(BaseModel):
    """Get invitations request."""

    receiver_id: str


class GetInvitationsResponse(BaseModel):
    """Invitations addressed to the user, newest first."""

    invitations: list[InvitationInfo]
    pending_count: int


class GetInvitationsUseCase:
    """Use case for reading a user's received invitations."""

    def __init__(self, invitation_service: InvitationService) -> None:
        self.invitation_service = invitation_service

    async def execute(self, request: GetInvitationsRequest) -> GetInvitationsResponse:
        invitations = await self.invitation_service.list_for_receiver(
            UserId(request.receiver_id)
        )
        return GetInvitationsResponse(
            invitations=[InvitationInfo.from_invitation(inv) for inv in invitations],
            pending_count=sum(1 for inv in invitations if inv.is_pending),
        )
