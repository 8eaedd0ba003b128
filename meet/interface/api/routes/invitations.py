"""Invitation routes."""

from uuid import UUID

from dishka.integrations.fastapi import DishkaRoute, FromDishka
from fastapi import APIRouter, Cookie, status
from pydantic import AwareDatetime, BaseModel, Field

from meet.application.usecase.invitation import (
    GetInvitationsUseCase,
    InvitationAction,
    ProposeMeetingUseCase,
    RespondToInvitationUseCase,
)
from meet.application.usecase.invitation.get_invitations import (
    GetInvitationsRequest,
    GetInvitationsResponse,
)
from meet.application.usecase.invitation.propose_meeting import (
    ProposeMeetingRequest,
    ProposeMeetingResponse,
)
from meet.application.usecase.invitation.respond_to_invitation import (
    RespondToInvitationRequest,
    RespondToInvitationResponse,
)
from meet.domain.service import JWTService
from meet.interface.api.authentication import require_identity

router = APIRouter(prefix="/invitations", tags=["invitations"], route_class=DishkaRoute)


class ProposeMeetingAPIRequest(BaseModel):
    """API request for inviting a user to a meeting."""

    receiver_id: str
    title: str = Field(max_length=255)
    description: str | None = Field(default=None, max_length=2000)
    proposed_time: AwareDatetime


@router.post(
    "", response_model=ProposeMeetingResponse, status_code=status.HTTP_201_CREATED
)
async def propose_meeting(
    request: ProposeMeetingAPIRequest,
    propose_meeting_use_case: FromDishka[ProposeMeetingUseCase],
    jwt_service: FromDishka[JWTService],
    auth_token: str | None = Cookie(default=None),
) -> ProposeMeetingResponse:
    """Invite another user to a meeting at a future instant.

    Example:
        POST /invitations
        {
            "receiver_id": "Xb3...",
            "title": "Coffee chat",
            "proposed_time": "2030-01-01T10:00:00Z"
        }
    """
    identity = require_identity(jwt_service, auth_token)
    return await propose_meeting_use_case.execute(
        ProposeMeetingRequest(
            sender_id=identity.user_id,
            receiver_id=request.receiver_id,
            title=request.title,
            description=request.description,
            proposed_time=request.proposed_time,
        )
    )


@router.get("", response_model=GetInvitationsResponse)
async def get_invitations(
    get_invitations_use_case: FromDishka[GetInvitationsUseCase],
    jwt_service: FromDishka[JWTService],
    auth_token: str | None = Cookie(default=None),
) -> GetInvitationsResponse:
    """List invitations received by the current user, newest first."""
    identity = require_identity(jwt_service, auth_token)
    return await get_invitations_use_case.execute(
        GetInvitationsRequest(receiver_id=identity.user_id)
    )


async def _respond(
    invitation_id: UUID,
    action: InvitationAction,
    use_case: RespondToInvitationUseCase,
    jwt_service: JWTService,
    auth_token: str | None,
) -> RespondToInvitationResponse:
    identity = require_identity(jwt_service, auth_token)
    return await use_case.execute(
        RespondToInvitationRequest(
            user_id=identity.user_id, invitation_id=invitation_id, action=action
        )
    )


@router.post("/{invitation_id}/accept", response_model=RespondToInvitationResponse)
async def accept_invitation(
    invitation_id: UUID,
    respond_use_case: FromDishka[RespondToInvitationUseCase],
    jwt_service: FromDishka[JWTService],
    auth_token: str | None = Cookie(default=None),
) -> RespondToInvitationResponse:
    """Accept an invitation and schedule the meeting.

    If a response to the same invitation is already being processed the
    outcome is "already_processing" and nothing is written.
    """
    return await _respond(
        invitation_id, InvitationAction.ACCEPT, respond_use_case, jwt_service, auth_token
    )


@router.post("/{invitation_id}/reject", response_model=RespondToInvitationResponse)
async def reject_invitation(
    invitation_id: UUID,
    respond_use_case: FromDishka[RespondToInvitationUseCase],
    jwt_service: FromDishka[JWTService],
    auth_token: str | None = Cookie(default=None),
) -> RespondToInvitationResponse:
    """Reject an invitation."""
    return await _respond(
        invitation_id, InvitationAction.REJECT, respond_use_case, jwt_service, auth_token
    )


@router.post("/{invitation_id}/meeting", response_model=RespondToInvitationResponse)
async def retry_meeting(
    invitation_id: UUID,
    respond_use_case: FromDishka[RespondToInvitationUseCase],
    jwt_service: FromDishka[JWTService],
    auth_token: str | None = Cookie(default=None),
) -> RespondToInvitationResponse:
    """Create the meeting for an accepted invitation whose meeting is missing."""
    return await _respond(
        invitation_id,
        InvitationAction.RETRY_MEETING,
        respond_use_case,
        jwt_service,
        auth_token,
    )
