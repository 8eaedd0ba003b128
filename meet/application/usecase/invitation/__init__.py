"""Invitation use cases."""

from .get_invitations import GetInvitationsUseCase, InvitationInfo
from .propose_meeting import ProposeMeetingUseCase
from .respond_to_invitation import InvitationAction, RespondToInvitationUseCase

__all__ = [
    "GetInvitationsUseCase",
    "InvitationAction",
    "InvitationInfo",
    "ProposeMeetingUseCase",
    "RespondToInvitationUseCase",
]
