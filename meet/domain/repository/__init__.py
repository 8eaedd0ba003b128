"""Repository interfaces for Meet domain.

Repository interfaces are defined in the domain layer (dependency inversion).
Implementations live in the infrastructure layer.
"""

from meet.domain.repository.change_feed import (
    INVITATIONS_CHANNEL,
    MEETINGS_CHANNEL,
    ChangeEvent,
    ChangeFeed,
    ChangeStream,
)
from meet.domain.repository.invitation import InvitationRepository
from meet.domain.repository.meeting import MeetingRepository
from meet.domain.repository.user import UserRepository

__all__ = [
    "ChangeEvent",
    "ChangeFeed",
    "ChangeStream",
    "INVITATIONS_CHANNEL",
    "MEETINGS_CHANNEL",
    "InvitationRepository",
    "MeetingRepository",
    "UserRepository",
]
