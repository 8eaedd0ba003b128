"""Meeting entity.

Meetings are derived from accepted invitations. Participant order is
significant: index 0 is always the original sender of the invitation.
"""

from datetime import datetime, timedelta
from typing import Optional

from pydantic import Field, model_validator

from meet.domain.model.common import DomainModel, utcnow
from meet.domain.value import InvitationId, MeetingId, MeetingStatus, UserId

# Fixed length of every meeting
MEETING_DURATION = timedelta(hours=1)


class MeetingDraft(DomainModel):
    """Meeting record before the store assigns its identifier."""

    title: str
    description: Optional[str] = None
    participants: tuple[UserId, UserId]
    participant_names: tuple[str, str]
    start_time: datetime
    end_time: datetime
    created_from: InvitationId
    status: MeetingStatus = MeetingStatus.SCHEDULED

    @model_validator(mode="after")
    def check_time_range(self) -> "MeetingDraft":
        """A meeting must end after it starts."""
        if self.end_time <= self.start_time:
            raise ValueError("Meeting must end after it starts")
        return self


class Meeting(MeetingDraft):
    """Scheduled meeting between exactly two participants."""

    id: MeetingId
    created_at: datetime = Field(default_factory=utcnow)

    def includes(self, user_id: UserId) -> bool:
        return user_id in self.participants

    def other_participant_name(self, viewer_id: UserId) -> str:
        """Display name of the participant who is not the viewer."""
        other_index = 1 if self.participants[0] == viewer_id else 0
        return self.participant_names[other_index]
