"""Domain value objects for Meet."""

from meet.domain.value.identifiers import InvitationId, MeetingId, UserId
from meet.domain.value.types import (
    Identity,
    IdentityFailureReason,
    InvitationStatus,
    LifecycleOutcome,
    MeetingStatus,
    MeetingTiming,
    ParticipantSnapshot,
)

__all__ = [
    # Identifiers
    "UserId",
    "InvitationId",
    "MeetingId",
    # Types
    "InvitationStatus",
    "MeetingStatus",
    "MeetingTiming",
    "LifecycleOutcome",
    "IdentityFailureReason",
    "Identity",
    "ParticipantSnapshot",
]
