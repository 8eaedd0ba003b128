"""Domain value objects for Meet.

Value objects are immutable and defined by their values, not identity.
They encapsulate validation rules and business logic.
"""

from enum import Enum

from pydantic import field_validator

from meet.domain.value.common import ValueObject
from meet.domain.value.identifiers import UserId


class InvitationStatus(str, Enum):
    """Lifecycle status of an invitation.

    PENDING is the initial state; ACCEPTED and REJECTED are terminal.
    """

    PENDING = "pending"
    ACCEPTED = "accepted"
    REJECTED = "rejected"


class MeetingStatus(str, Enum):
    """Status of a meeting."""

    SCHEDULED = "scheduled"


class MeetingTiming(str, Enum):
    """Where a meeting falls relative to the evaluation instant."""

    UPCOMING = "upcoming"
    PAST = "past"


class LifecycleOutcome(str, Enum):
    """Result of a coordinator action."""

    ACCEPTED = "accepted"
    REJECTED = "rejected"
    ALREADY_PROCESSING = "already_processing"


class IdentityFailureReason(str, Enum):
    """User-facing reasons an identity operation can fail."""

    EMAIL_ALREADY_REGISTERED = "email_already_registered"
    INVALID_CREDENTIAL_FORMAT = "invalid_credential_format"
    WEAK_CREDENTIAL = "weak_credential"
    INVALID_CREDENTIALS = "invalid_credentials"
    TRANSIENT_NETWORK = "transient_network"


class Identity(ValueObject):
    """Authenticated identity as reported by the identity service."""

    user_id: UserId
    email: str


class ParticipantSnapshot(ValueObject):
    """Copy of a user's public profile taken when an invitation is created.

    The snapshot is never refreshed: later profile edits do not change
    invitations that were already sent.
    """

    user_id: UserId
    display_name: str
    avatar_url: str

    @field_validator("display_name")
    @classmethod
    def validate_display_name(cls, v: str) -> str:
        """Validate display name is not blank."""
        if not v.strip():
            raise ValueError("Display name must not be empty")
        return v
