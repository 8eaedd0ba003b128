"""Domain services."""

from .base import Service
from .identity_service import IdentityClient, IdentityService
from .invitation_service import InvitationService
from .jwt_service import JWTService
from .meeting_service import MeetingService, derive_meeting
from .session import IdentitySession
from .user_service import DirectoryListing, UserService

__all__ = [
    "DirectoryListing",
    "IdentityClient",
    "IdentityService",
    "IdentitySession",
    "InvitationService",
    "JWTService",
    "MeetingService",
    "Service",
    "UserService",
    "derive_meeting",
]
