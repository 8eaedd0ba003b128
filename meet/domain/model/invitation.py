"""Invitation entity.

An invitation is a proposal from one user to another for a meeting at a
specific instant. Its status moves from pending to exactly one terminal
state, accepted or rejected, and never moves back.
"""

from datetime import datetime
from typing import Optional

from pydantic import Field, model_validator

from meet.domain.error import InvalidTransitionError, InvariantViolationError
from meet.domain.model.common import DomainModel, utcnow
from meet.domain.value import InvitationId, InvitationStatus, ParticipantSnapshot, UserId

ALLOWED_TRANSITIONS: dict[InvitationStatus, frozenset[InvitationStatus]] = {
    InvitationStatus.PENDING: frozenset(
        {InvitationStatus.ACCEPTED, InvitationStatus.REJECTED}
    ),
    InvitationStatus.ACCEPTED: frozenset(),
    InvitationStatus.REJECTED: frozenset(),
}


class Invitation(DomainModel):
    """Invitation entity.

    Business rules:
    - Sender and receiver are different users
    - Sender/receiver name and avatar are copied at creation time
    - Status only changes pending -> accepted or pending -> rejected
    """

    id: InvitationId
    sender_id: UserId
    sender_name: str
    sender_avatar: str
    receiver_id: UserId
    receiver_name: str
    receiver_avatar: str
    title: str
    description: Optional[str] = None
    proposed_time: datetime
    status: InvitationStatus = InvitationStatus.PENDING
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)

    @model_validator(mode="after")
    def check_distinct_parties(self) -> "Invitation":
        """An invitation cannot be addressed to its own sender."""
        if self.sender_id == self.receiver_id:
            raise ValueError("Sender and receiver must be different users")
        return self

    @classmethod
    def propose(
        cls,
        invitation_id: InvitationId,
        sender: ParticipantSnapshot,
        receiver: ParticipantSnapshot,
        title: str,
        description: str | None,
        proposed_time: datetime,
        now: datetime,
    ) -> "Invitation":
        """Build a new pending invitation from participant snapshots."""
        return cls(
            id=invitation_id,
            sender_id=sender.user_id,
            sender_name=sender.display_name,
            sender_avatar=sender.avatar_url,
            receiver_id=receiver.user_id,
            receiver_name=receiver.display_name,
            receiver_avatar=receiver.avatar_url,
            title=title,
            description=description,
            proposed_time=proposed_time,
            status=InvitationStatus.PENDING,
            created_at=now,
            updated_at=now,
        )

    @property
    def sender(self) -> ParticipantSnapshot:
        return ParticipantSnapshot(
            user_id=self.sender_id,
            display_name=self.sender_name,
            avatar_url=self.sender_avatar,
        )

    @property
    def receiver(self) -> ParticipantSnapshot:
        return ParticipantSnapshot(
            user_id=self.receiver_id,
            display_name=self.receiver_name,
            avatar_url=self.receiver_avatar,
        )

    @property
    def is_pending(self) -> bool:
        return self.status == InvitationStatus.PENDING

    def can_transition_to(self, new_status: InvitationStatus) -> bool:
        """Whether the state machine permits moving to new_status."""
        allowed = ALLOWED_TRANSITIONS.get(self.status)
        if allowed is None:
            raise InvariantViolationError(
                f"Invitation {self.id} has unknown status {self.status!r}"
            )
        return new_status in allowed

    def transition(self, new_status: InvitationStatus, at: datetime) -> "Invitation":
        """Return a copy moved to new_status.

        Raises:
            InvalidTransitionError: If the invitation is not pending
        """
        if not self.can_transition_to(new_status):
            raise InvalidTransitionError(self.id, self.status, new_status)
        return self.model_copy(update={"status": new_status, "updated_at": at})
