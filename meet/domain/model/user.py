"""User entity.

Users are created when they register with the identity service. Only the
profile fields can change afterwards, and only by their owner.
"""

from datetime import datetime
from typing import Optional

from pydantic import Field

from meet.domain.model.common import DomainModel, utcnow
from meet.domain.value import ParticipantSnapshot, UserId


class User(DomainModel):
    """Registered user, listed in the directory and targeted by invitations."""

    id: UserId
    email: str
    display_name: str
    bio: Optional[str] = None
    avatar_url: str
    created_at: datetime = Field(default_factory=utcnow)

    def snapshot(self) -> ParticipantSnapshot:
        """Copy of the public profile for denormalizing onto an invitation."""
        return ParticipantSnapshot(
            user_id=self.id,
            display_name=self.display_name,
            avatar_url=self.avatar_url,
        )
